"""Walks paths, runs the analyzer on each PHP file and applies fixes."""

import fnmatch
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from wpcs_lint.analyzers.sniff_analyzer import SniffAnalyzer
from wpcs_lint.core.config import Config
from wpcs_lint.core.finding import Finding
from wpcs_lint.fixer import Fixer

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".idea",
    ".vscode",
    "node_modules",
    "vendor",
}


@dataclass
class CheckResults:
    findings: List[Finding] = field(default_factory=list)
    files_checked: int = 0

    @property
    def error_count(self) -> int:
        return sum(1 for f in self.findings if f.is_error)


@dataclass
class FixResults:
    files_fixed: int = 0
    fixes_applied: int = 0


def _excluded(path: Path, patterns: Sequence[str]) -> bool:
    posix = path.as_posix()
    return any(fnmatch.fnmatch(posix, p) or fnmatch.fnmatch(path.name, p) for p in patterns)


def iter_files(paths: Iterable[Path], extensions: Sequence[str], exclude_patterns: Sequence[str] = ()) -> Iterator[Path]:
    """
    Yield the files to scan. Directories are walked recursively in sorted
    order; files named explicitly are always yielded.
    """
    suffixes = tuple("." + e.lstrip(".").lower() for e in extensions)
    for p in paths:
        if p.is_dir():
            for fp in sorted(p.rglob("*")):
                if not fp.is_file() or fp.suffix.lower() not in suffixes:
                    continue
                if any(part in DEFAULT_EXCLUDE_DIRS for part in fp.relative_to(p).parts):
                    continue
                if _excluded(fp, exclude_patterns):
                    logger.debug("Excluded %s", fp)
                    continue
                yield fp
        elif p.is_file():
            yield p
        else:
            logger.warning("No such file or directory: %s", p)


def analyze_source(source: str, filename: str, config: Config) -> List[Finding]:
    """Analyze one file's source text."""
    return SniffAnalyzer(config).analyze(source, filename)


def check_paths(paths: List[Path], config: Config) -> CheckResults:
    results = CheckResults()
    analyzer = SniffAnalyzer(config)

    for fp in iter_files(paths, config.extensions, config.exclude_patterns):
        logger.debug("Scanning %s", fp)
        try:
            findings = analyzer.analyze_path(fp)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping %s: %s", fp, e)
            continue
        results.files_checked += 1
        results.findings.extend(findings)

        if config.max_errors > 0 and results.error_count >= config.max_errors:
            logger.warning("Stopped after %d errors (max_errors=%d)", results.error_count, config.max_errors)
            break

    return results


def fix_paths(paths: List[Path], config: Config) -> FixResults:
    results = FixResults()
    fixer = Fixer(config)

    for fp in iter_files(paths, config.extensions, config.exclude_patterns):
        try:
            with open(fp, "r", encoding="utf-8", newline="") as f:
                src = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping %s: %s", fp, e)
            continue
        outcome = fixer.fix(src, str(fp))
        if outcome.source != src:
            with open(fp, "w", encoding="utf-8", newline="") as f:
                f.write(outcome.source)
            results.files_fixed += 1
            results.fixes_applied += outcome.applied
            logger.debug("Fixed %d issue(s) in %s", outcome.applied, fp)

    return results
