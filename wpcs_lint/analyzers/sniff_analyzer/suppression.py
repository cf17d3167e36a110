"""
Inline suppression comments, in phpcs syntax:

    // phpcs:ignoreFile
    // phpcs:ignore WordPress.Security.EscapeOutput -- Escaped upstream.
    // phpcs:disable WordPress.DB.PreparedSQL
    // phpcs:enable
"""

import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple

from wpcs_lint.core.config import rule_matches
from wpcs_lint.core.finding import Finding

from .php_file import PhpFile
from .tokenizer import TokenType

_DIRECTIVE_RE = re.compile(r"phpcs:(ignoreFile|ignore|disable|enable)\b(.*)", re.IGNORECASE | re.DOTALL)

# None means "every rule".
Codes = Optional[FrozenSet[str]]


@dataclass
class SuppressedRegion:
    start_line: int
    end_line: Optional[int]  # None = until end of file
    codes: Codes
    # (line, code) pairs re-enabled inside the region by a narrower phpcs:enable
    reenabled: List[Tuple[int, str]] = field(default_factory=list)

    def covers(self, line: int, rule_id: str) -> bool:
        if line < self.start_line or (self.end_line is not None and line > self.end_line):
            return False
        if not _codes_match(self.codes, rule_id):
            return False
        return not any(line > since and rule_matches(code, rule_id) for since, code in self.reenabled)


def _parse_codes(raw: str) -> Codes:
    raw = raw.split(" --", 1)[0]
    raw = raw.replace("*/", "").strip()
    codes = frozenset(c.strip() for c in raw.split(",") if c.strip())
    return codes or None


def _codes_match(codes: Codes, rule_id: str) -> bool:
    return codes is None or any(rule_matches(code, rule_id) for code in codes)


class Suppressions:
    """Suppression directives collected from a file's comments."""

    def __init__(self, php_file: PhpFile):
        self.ignore_file = False
        self.lines: Dict[int, List[Codes]] = {}
        self.regions: List[SuppressedRegion] = []
        self._collect(php_file)

    def _collect(self, php_file: PhpFile):
        for i, token in enumerate(php_file.tokens):
            if token.type != TokenType.COMMENT:
                continue
            match = _DIRECTIVE_RE.search(token.text)
            if match is None:
                continue
            directive = match.group(1).lower()
            codes = _parse_codes(match.group(2))

            if directive == "ignorefile":
                self.ignore_file = True
            elif directive == "ignore":
                line = token.line
                if self._alone_on_line(php_file, i):
                    line = token.line + token.text.count("\n") + 1
                self.lines.setdefault(line, []).append(codes)
            elif directive == "disable":
                self.regions.append(SuppressedRegion(token.line, None, codes))
            else:
                self._close_regions(token.line, codes)

    @staticmethod
    def _alone_on_line(php_file: PhpFile, index: int) -> bool:
        start = php_file.line_start_index(index)
        return all(php_file[j].type == TokenType.WHITESPACE for j in range(start, index))

    def _close_regions(self, line: int, codes: Codes):
        for region in self.regions:
            if region.end_line is not None:
                continue
            if codes is None or (region.codes is not None and all(_codes_match(codes, c) for c in region.codes)):
                region.end_line = line
            elif any(_codes_match(region.codes, code) for code in codes):
                region.reenabled.extend((line, code) for code in sorted(codes))

    def suppresses(self, finding: Finding) -> bool:
        if self.ignore_file:
            return True
        for codes in self.lines.get(finding.line, ()):
            if _codes_match(codes, finding.rule_id):
                return True
        return any(region.covers(finding.line, finding.rule_id) for region in self.regions)
