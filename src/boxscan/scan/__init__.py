"""Scan session: observation collector, box estimator, state machine."""
