"""Delivery of computed boxes to the external collector."""
