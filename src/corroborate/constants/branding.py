"""Branding constants for terminal output."""

from __future__ import annotations

BRAND_NAME: str = "CORROBORATE"
CLI_DESCRIPTION: str = f"{BRAND_NAME} multi-tool finding aggregation and risk scoring"
