"""Core data structures and utilities for wpcs_lint."""

from wpcs_lint.core.finding import Finding, Severity, TokenEdit
from wpcs_lint.core.config import Config, ConfigError
from wpcs_lint.core.report import Reporter

__all__ = ["Finding", "Severity", "TokenEdit", "Config", "ConfigError", "Reporter"]
