"""
WPCS-Lint - Static analyzer for the WordPress PHP coding standards.

This package checks PHP files against the WordPress coding standards
(escaping, nonces, sanitization, naming, formatting, PHPDoc) and fixes the
mechanical violations.
"""

__version__ = "0.1.0"

from wpcs_lint.core.finding import Finding, Severity
from wpcs_lint.core.config import Config

__all__ = ["Finding", "Severity", "Config", "__version__"]
