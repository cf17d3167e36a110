"""
Auto-fixer for the fixable sniffs, in the spirit of phpcbf.

Every pass re-analyzes the source, applies the token edits of all
non-overlapping fixes and re-tokenizes, until nothing is left to fix.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Set

from wpcs_lint.analyzers.sniff_analyzer import SniffAnalyzer
from wpcs_lint.core.config import Config
from wpcs_lint.core.finding import Finding

logger = logging.getLogger(__name__)

# phpcbf gives up after the same number of loops.
MAX_PASSES = 50


@dataclass
class FixOutcome:
    """Result of fixing one file."""
    source: str
    applied: int
    passes: int

    @property
    def changed(self) -> bool:
        return self.applied > 0


class Fixer:
    """Applies the fixes attached to findings until the source is stable."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config if config is not None else Config()
        self.analyzer = SniffAnalyzer(self.config)

    def fix(self, source: str, filename: str) -> FixOutcome:
        applied = 0
        passes = 0
        while passes < MAX_PASSES:
            findings = self.analyzer.analyze(source, filename)
            php_file = self.analyzer.php_file
            if php_file is None:
                logger.warning("Not fixing %s: %s", filename, findings[0].message if findings else "tokenizer error")
                break

            fixable = [f for f in findings if f.fix]
            if not fixable:
                break

            texts = [token.text for token in php_file.tokens]
            count = self._apply(fixable, texts)
            new_source = "".join(texts)
            passes += 1
            if new_source == source:
                break
            applied += count
            logger.debug("Pass %d: applied %d fix(es) to %s", passes, count, filename)
            source = new_source
        else:
            logger.warning("Gave up fixing %s after %d passes", filename, MAX_PASSES)

        return FixOutcome(source=source, applied=applied, passes=passes)

    @staticmethod
    def _apply(findings: List[Finding], texts: List[str]) -> int:
        """Apply each fix whose tokens are untouched so far in this pass."""
        touched: Set[int] = set()
        count = 0
        for finding in findings:
            indices = {edit.index for edit in finding.fix}
            if indices & touched:
                continue  # retried on the next pass
            for edit in finding.fix:
                texts[edit.index] = edit.text
            touched |= indices
            count += 1
        return count
