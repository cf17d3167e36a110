"""Configuration management for wpcs_lint."""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set

import toml

from wpcs_lint.core.finding import Severity

TOML_CONFIG_NAME = ".wpcs_lint.toml"

# Same lookup order phpcs uses for its own ruleset files.
PHPCS_CONFIG_NAMES = (".phpcs.xml", "phpcs.xml", ".phpcs.xml.dist", "phpcs.xml.dist")

_OFF_VALUES = ("off", "false", "disabled")
_SEVERITY_VALUES = tuple(s.value for s in Severity)


class ConfigError(ValueError):
    pass


def rule_matches(code: str, rule_id: str) -> bool:
    """True if ``code`` is ``rule_id`` or one of its dotted prefixes."""
    return rule_id == code or rule_id.startswith(code + ".")


@dataclass
class Config:
    """
    Configuration for wpcs_lint analysis.

    Attributes:
        enabled_rules: Sniff codes (or prefixes) to enable (None = all enabled)
        disabled_rules: Sniff codes (or prefixes) to disable
        rule_severities: Override severities for specific codes
        text_domains: Allowed i18n text domains (empty = not checked)
        prefixes: Required prefixes for global names (empty = not checked)
        extensions: File extensions scanned inside directories
        exclude_patterns: fnmatch patterns of paths to skip
        tab_width: Number of spaces a tab stands for in indentation
        max_errors: Maximum number of errors before stopping (0 = unlimited)
        show_suggestions: Whether to show fix suggestions
        output_format: Output format (text, json, sarif, summary)
    """
    enabled_rules: Optional[Set[str]] = None
    disabled_rules: Set[str] = field(default_factory=set)
    rule_severities: Dict[str, str] = field(default_factory=dict)
    text_domains: List[str] = field(default_factory=list)
    prefixes: List[str] = field(default_factory=list)
    extensions: List[str] = field(default_factory=lambda: ["php"])
    exclude_patterns: List[str] = field(default_factory=list)
    tab_width: int = 4
    max_errors: int = 0
    show_suggestions: bool = True
    output_format: str = "text"

    @classmethod
    def from_file(cls, config_path: Optional[Path] = None) -> "Config":
        """
        Load configuration from a TOML file or a phpcs XML ruleset.

        If config_path is None, searches for .wpcs_lint.toml (then the phpcs
        ruleset names) in current directory and parent directories.
        """
        if config_path is None:
            config_path = cls._find_config_file()

        if config_path is None or not config_path.exists():
            return cls()

        if config_path.suffix in (".xml", ".dist"):
            return cls._from_phpcs_xml(config_path)

        try:
            data = toml.loads(config_path.read_text(encoding="utf-8"))
        except toml.TomlDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        config = cls()

        # Rules can be specified as code = "severity" or code = "off"
        for rule_id, severity in data.get("rules", {}).items():
            if not isinstance(severity, str):
                raise ConfigError(f"rules.{rule_id} must be a string")
            if severity.lower() in _OFF_VALUES:
                config.disabled_rules.add(rule_id)
            elif severity.lower() in _SEVERITY_VALUES:
                config.rule_severities[rule_id] = severity.lower()
            else:
                raise ConfigError(f"rules.{rule_id}: unknown severity '{severity}'")

        if "wordpress" in data:
            wordpress = data["wordpress"]
            if "text_domain" in wordpress:
                domain = wordpress["text_domain"]
                config.text_domains = [domain] if isinstance(domain, str) else list(domain)
            if "prefixes" in wordpress:
                config.prefixes = list(wordpress["prefixes"])

        if "files" in data:
            files = data["files"]
            if "extensions" in files:
                config.extensions = [e.lstrip(".") for e in files["extensions"]]
            if "exclude" in files:
                config.exclude_patterns = list(files["exclude"])

        if "format" in data and "tab_width" in data["format"]:
            config.tab_width = int(data["format"]["tab_width"])

        if "analysis" in data and "max_errors" in data["analysis"]:
            config.max_errors = int(data["analysis"]["max_errors"])

        if "output" in data:
            output = data["output"]
            if "format" in output:
                config.output_format = output["format"]
            if "show_suggestions" in output:
                config.show_suggestions = bool(output["show_suggestions"])

        return config

    @classmethod
    def _from_phpcs_xml(cls, path: Path) -> "Config":
        """Read the subset of a phpcs ruleset that maps onto Config."""
        try:
            root = ET.parse(path).getroot()
        except ET.ParseError as e:
            raise ConfigError(f"Invalid phpcs ruleset {path}: {e}") from e

        config = cls()

        for pattern in root.findall("exclude-pattern"):
            if pattern.text:
                config.exclude_patterns.append(pattern.text.strip())

        for arg in root.findall("arg"):
            name = arg.get("name")
            value = arg.get("value", "")
            if name == "extensions":
                config.extensions = [e.split("/")[0].strip() for e in value.split(",") if e.strip()]
            elif name == "tab-width":
                config.tab_width = int(value)

        for rule in root.findall("rule"):
            ref = rule.get("ref", "")
            for exclude in rule.findall("exclude"):
                if exclude.get("name"):
                    config.disabled_rules.add(exclude.get("name"))

            severity = rule.findtext("severity")
            if severity is not None and severity.strip() == "0":
                config.disabled_rules.add(ref)
            rule_type = rule.findtext("type")
            if rule_type is not None and rule_type.strip().lower() in _SEVERITY_VALUES:
                config.rule_severities[ref] = rule_type.strip().lower()

            for prop in rule.findall("properties/property"):
                values = [e.get("value") for e in prop.findall("element") if e.get("value")]
                if not values and prop.get("value"):
                    values = [v.strip() for v in prop.get("value").split(",") if v.strip()]
                if prop.get("name") == "text_domain":
                    config.text_domains = values
                elif prop.get("name") == "prefixes":
                    config.prefixes = values

        return config

    @staticmethod
    def _find_config_file() -> Optional[Path]:
        """Search for a config file in current and parent directories."""
        current = Path.cwd()

        while True:
            for name in (TOML_CONFIG_NAME, ) + PHPCS_CONFIG_NAMES:
                config_path = current / name
                if config_path.exists():
                    return config_path

            # Check if we've reached the root
            parent = current.parent
            if parent == current:
                break
            current = parent

        return None

    def is_rule_enabled(self, rule_id: str) -> bool:
        """Check if a rule is enabled."""
        if any(rule_matches(code, rule_id) for code in self.disabled_rules):
            return False
        if self.enabled_rules is None:
            return True
        return any(rule_matches(code, rule_id) for code in self.enabled_rules)

    def get_rule_severity(self, rule_id: str, default: str = "warning") -> str:
        """Get the severity for a rule, with fallback to default.

        The most specific matching code wins.
        """
        best = None
        for code, severity in self.rule_severities.items():
            if rule_matches(code, rule_id) and (best is None or len(code) > len(best)):
                best = code
        return self.rule_severities[best] if best is not None else default
