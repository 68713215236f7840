"""Corroborate: multi-tool finding aggregation and risk scoring for code review."""

__version__ = "0.1.0"
