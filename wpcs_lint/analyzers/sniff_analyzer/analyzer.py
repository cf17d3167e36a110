"""
Main sniff analyzer integrating all sniff groups.

Tokenizes a PHP file, runs every sniff group over it and drops the findings
silenced by phpcs-style suppression comments.
"""

from typing import List, Optional

from wpcs_lint.analyzers.base import Analyzer
from wpcs_lint.core.config import Config
from wpcs_lint.core.finding import Finding, Severity

from .docs import DocsSniff
from .formatting import FormattingSniff
from .functions import FunctionsSniff
from .i18n import I18nSniff
from .naming import NamingSniff
from .php_file import PhpFile
from .security import SecuritySniff
from .suppression import Suppressions
from .tokenizer import TokenizeError

TOKENIZER_RULE = "Internal.Tokenizer.Exception"

SNIFF_GROUPS = (
    SecuritySniff,
    NamingSniff,
    FormattingSniff,
    FunctionsSniff,
    DocsSniff,
    I18nSniff,
)


class SniffAnalyzer(Analyzer):
    """
    Token-level analyzer for the WordPress coding standards.

    Example usage:
        analyzer = SniffAnalyzer(config)
        findings = analyzer.analyze(source, "class-my-plugin.php")
    """

    def __init__(self, config: Optional[Config] = None):
        if config is None:
            config = Config()
        super().__init__(config)
        self.php_file: Optional[PhpFile] = None

    def reset(self):
        super().reset()
        self.php_file = None

    def analyze(self, source_code: str, filename: str) -> List[Finding]:
        """Analyze PHP source code for coding-standard violations."""
        self.reset()

        try:
            php_file = PhpFile(source_code, filename)
        except TokenizeError as e:
            if self.config.is_rule_enabled(TOKENIZER_RULE):
                self.findings.append(
                    Finding(
                        rule_id=TOKENIZER_RULE,
                        severity=Severity.ERROR,
                        filename=filename,
                        line=e.line,
                        col=e.col,
                        message=f"Tokenizer error: {e}",
                    ))
            return self.findings

        self.php_file = php_file
        suppressions = Suppressions(php_file)
        if suppressions.ignore_file:
            return self.findings

        for sniff_cls in SNIFF_GROUPS:
            sniff = sniff_cls(self.config, php_file)
            self.findings.extend(f for f in sniff.run() if not suppressions.suppresses(f))

        self.findings.sort(key=lambda f: (f.line, f.col, f.rule_id))
        return self.findings
