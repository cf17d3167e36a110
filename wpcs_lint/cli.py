"""Command-line interface for wpcs_lint."""

import functools
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from wpcs_lint import __version__
from wpcs_lint.core.config import Config, ConfigError
from wpcs_lint.core.report import OUTPUT_FORMATS, Reporter
from wpcs_lint.rules import list_categories, list_rules
from wpcs_lint.scanner import check_paths, fix_paths


def common_options(func):
    """Options shared by the check and fix commands."""

    @click.argument("paths", nargs=-1, type=click.Path(exists=True), required=True)
    @click.option(
        "--config",
        "config_path",
        type=click.Path(exists=True, dir_okay=False),
        help="Path to config file (.wpcs_lint.toml or phpcs.xml.dist)",
    )
    @click.option(
        "--format",
        "output_format",
        type=click.Choice(OUTPUT_FORMATS),
        default=None,
        help="Output format",
    )
    @click.option(
        "--enable-rule",
        multiple=True,
        help="Enable only this sniff code or prefix (can be used multiple times)",
    )
    @click.option(
        "--disable-rule",
        multiple=True,
        help="Disable a sniff code or prefix (can be used multiple times)",
    )
    @click.option(
        "--text-domain",
        multiple=True,
        help="Allowed i18n text domain (can be used multiple times)",
    )
    @click.option(
        "--prefix",
        multiple=True,
        help="Required prefix for global functions, classes and constants",
    )
    @click.option(
        "--extensions",
        help="Comma-separated extensions to scan in directories (default: php)",
    )
    @click.option(
        "--ignore",
        multiple=True,
        help="fnmatch pattern of paths to skip (can be used multiple times)",
    )
    @click.option(
        "--no-suggestions",
        is_flag=True,
        help="Don't show fix suggestions in output",
    )
    @click.option(
        "--max-errors",
        type=int,
        default=0,
        help="Maximum number of errors before stopping (0 = unlimited)",
    )
    @click.option("-v", "--verbose", is_flag=True, help="Log each file as it is scanned")
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)

    return wrapper


def _load_config(
    config_path: Optional[str],
    output_format: Optional[str],
    enable_rule: tuple,
    disable_rule: tuple,
    text_domain: tuple,
    prefix: tuple,
    extensions: Optional[str],
    ignore: tuple,
    no_suggestions: bool,
    max_errors: int,
    verbose: bool,
) -> Config:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    # Load configuration
    try:
        cfg = Config.from_file(Path(config_path) if config_path else None)
    except ConfigError as e:
        raise click.UsageError(str(e))

    # Override config with CLI options
    if output_format:
        cfg.output_format = output_format
    if enable_rule:
        cfg.enabled_rules = set(enable_rule)
    if disable_rule:
        cfg.disabled_rules |= set(disable_rule)
    if text_domain:
        cfg.text_domains = list(text_domain)
    if prefix:
        cfg.prefixes = list(prefix)
    if extensions:
        cfg.extensions = [e.strip().lstrip(".") for e in extensions.split(",") if e.strip()]
    if ignore:
        cfg.exclude_patterns.extend(ignore)
    if no_suggestions:
        cfg.show_suggestions = False
    if max_errors:
        cfg.max_errors = max_errors
    return cfg


@click.group()
@click.version_option(version=__version__)
def main():
    """
    WPCS-Lint - WordPress coding standards checker for PHP.

    Checks escaping, nonce verification, input sanitization, prepared SQL,
    naming, formatting and PHPDoc rules, and fixes the mechanical ones.

    Examples:

        # Check a plugin
        wpcs-lint check wp-content/plugins/my-plugin

        # Fix what can be fixed, then report the rest
        wpcs-lint fix my-plugin.php

        # Output as SARIF for code scanning
        wpcs-lint check --format=sarif . > report.sarif
    """


@main.command()
@common_options
def check(paths: tuple, **options):
    """Check PHP files and report violations."""
    cfg = _load_config(**options)
    results = check_paths([Path(p) for p in paths], cfg)

    reporter = Reporter(output_format=cfg.output_format, show_suggestions=cfg.show_suggestions)
    sys.exit(reporter.report(results.findings))


@main.command()
@common_options
def fix(paths: tuple, **options):
    """Fix auto-fixable violations in place, then report what is left."""
    cfg = _load_config(**options)
    path_list = [Path(p) for p in paths]

    fixed = fix_paths(path_list, cfg)
    click.echo(f"Fixed {fixed.fixes_applied} issue(s) in {fixed.files_fixed} file(s)", err=True)

    results = check_paths(path_list, cfg)
    reporter = Reporter(output_format=cfg.output_format, show_suggestions=cfg.show_suggestions)
    sys.exit(reporter.report(results.findings))


@main.command(name="rules")
@click.option(
    "--category",
    type=click.Choice(list_categories()),
    help="Only list rules in this category",
)
def rules_command(category: Optional[str]):
    """List all available rules."""
    rules = list_rules()

    click.echo("Available Rules:\n")

    # Group by category
    by_category = {}
    for rule_id, rule_info in rules.items():
        if category and rule_info["category"] != category:
            continue
        by_category.setdefault(rule_info["category"], []).append((rule_id, rule_info))

    # Print by category
    for name, category_rules in sorted(by_category.items()):
        click.echo(f"{name.upper()}:")
        for rule_id, rule_info in sorted(category_rules):
            severity = rule_info["severity"]
            fixable = " [fixable]" if rule_info["fixable"] else ""
            click.echo(f"  {rule_id}")
            click.echo(f"      [{severity:>7}] {rule_info['description']}{fixable}")
        click.echo()


if __name__ == "__main__":
    main()
