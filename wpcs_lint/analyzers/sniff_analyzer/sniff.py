"""Base class shared by the sniff groups."""

import re
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from wpcs_lint.core.config import Config
from wpcs_lint.core.finding import Finding, Severity, TokenEdit
from wpcs_lint.rules import get_rule_info

from .php_file import PhpFile

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_ACRONYM_BOUNDARY_RE = re.compile(r"(?<=[A-Z])(?=[A-Z][a-z])")


def to_snake_case(name: str) -> str:
    """fooBarBAZQux -> foo_bar_baz_qux"""
    name = _ACRONYM_BOUNDARY_RE.sub("_", name)
    return _CAMEL_BOUNDARY_RE.sub("_", name).lower()


class Sniff(ABC):
    """A group of related checks run over one PhpFile."""

    def __init__(self, config: Config, php_file: PhpFile):
        self.config = config
        self.file = php_file
        self.findings: List[Finding] = []

    @abstractmethod
    def run(self) -> List[Finding]:
        """Run every check in the group and return the findings."""

    def enabled(self, *rule_ids: str) -> bool:
        return any(self.config.is_rule_enabled(rule_id) for rule_id in rule_ids)

    def add(
        self,
        rule_id: str,
        index: int,
        message: str,
        suggestion: Optional[str] = None,
        fix: Optional[Iterable[TokenEdit]] = None,
        line: Optional[int] = None,
        col: Optional[int] = None,
    ):
        """Record a finding located at token index (or an explicit line/col)."""
        if not self.config.is_rule_enabled(rule_id):
            return
        severity = self.config.get_rule_severity(rule_id, get_rule_info(rule_id)["severity"])
        token = self.file[index]
        self.findings.append(
            Finding(
                rule_id=rule_id,
                severity=Severity(severity),
                filename=self.file.filename,
                line=line if line is not None else token.line,
                col=col if col is not None else token.col,
                message=message,
                suggestion=suggestion,
                fix=tuple(fix) if fix is not None else None,
            ))
