"""
WordPress coding-standards sniffs for PHP source.

This package tokenizes PHP, indexes its structure and runs the sniff groups
(security, naming, formatting, functions, docs, i18n) over it.
"""

from .analyzer import SNIFF_GROUPS, SniffAnalyzer
from .php_file import ClassScope, FunctionScope, PhpFile
from .suppression import Suppressions
from .tokenizer import Token, TokenizeError, TokenType, tokenize

__all__ = [
    "SniffAnalyzer",
    "SNIFF_GROUPS",
    "PhpFile",
    "ClassScope",
    "FunctionScope",
    "Suppressions",
    "Token",
    "TokenType",
    "TokenizeError",
    "tokenize",
]
