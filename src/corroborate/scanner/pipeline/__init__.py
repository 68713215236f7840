"""Orchestration stages: changeset preparation, detector dispatch and adjustments."""
