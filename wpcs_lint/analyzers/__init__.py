"""Analyzers for PHP source files."""

from wpcs_lint.analyzers.base import Analyzer
from wpcs_lint.analyzers.sniff_analyzer import SniffAnalyzer

__all__ = ["Analyzer", "SniffAnalyzer"]
