"""Base class for all analyzers."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from wpcs_lint.core.config import Config
from wpcs_lint.core.finding import Finding


class Analyzer(ABC):
    """Base class for analyzers that turn one source file into findings."""

    def __init__(self, config: Config):
        self.config = config
        self.findings: List[Finding] = []

    @abstractmethod
    def analyze(self, source_code: str, filename: str) -> List[Finding]:
        """
        Analyze the given source code and return findings.

        Args:
            source_code: The PHP source to analyze
            filename: Path reported in findings (also used by file name sniffs)

        Returns:
            List of findings discovered during analysis
        """

    def analyze_path(self, path: Path) -> List[Finding]:
        """
        Read a file as UTF-8 and analyze it.

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not valid UTF-8
        """
        # newline="" keeps "\r\n" so fixes can be written back byte-for-byte
        with open(path, "r", encoding="utf-8", newline="") as f:
            source_code = f.read()
        return self.analyze(source_code, str(path))

    def reset(self):
        """Reset the analyzer state for a new file."""
        self.findings = []
