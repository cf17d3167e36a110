"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from wpcs_lint import __version__
from wpcs_lint.cli import main

BAD_CODE = "<?php\n$items = [ 1 ];\necho $items;\n"


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_version():
    result = CliRunner().invoke(main, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_check_clean_file(workdir):
    (workdir / "clean.php").write_text("<?php\n/**\n * Clean.\n *\n * @package Acme\n */\n\n$a = 1;\n")

    result = CliRunner().invoke(main, ["check", "clean.php"])

    assert result.exit_code == 0
    assert "No issues found." in result.output


def test_check_reports_errors(workdir):
    (workdir / "bad.php").write_text(BAD_CODE)

    result = CliRunner().invoke(main, ["check", "bad.php"])

    assert result.exit_code == 1
    assert "bad.php:3:6: error: WordPress.Security.EscapeOutput.OutputNotEscaped" in result.output
    assert "[fixable]" in result.output


def test_check_json_format(workdir):
    (workdir / "bad.php").write_text(BAD_CODE)

    result = CliRunner().invoke(main, ["check", "--format", "json", "bad.php"])
    data = json.loads(result.output)

    assert result.exit_code == 1
    assert data["summary"]["fixable"] == 1


def test_check_rule_filters(workdir):
    (workdir / "bad.php").write_text(BAD_CODE)

    result = CliRunner().invoke(main, [
        "check", "--format", "json", "--enable-rule", "WordPress.Security", "--disable-rule",
        "WordPress.Security.EscapeOutput", "bad.php"
    ])

    assert result.exit_code == 0
    assert json.loads(result.output)["findings"] == []


def test_check_text_domain_option(workdir):
    (workdir / "i18n.php").write_text("<?php\n$a = __( 'Hi', 'other' );\n")

    result = CliRunner().invoke(main, [
        "check", "--format", "json", "--text-domain", "acme", "--enable-rule", "WordPress.WP.I18n", "i18n.php"
    ])
    rule_ids = [f["rule_id"] for f in json.loads(result.output)["findings"]]

    assert rule_ids == ["WordPress.WP.I18n.TextDomainMismatch"]


def test_check_uses_config_file(workdir):
    (workdir / "bad.php").write_text(BAD_CODE)
    (workdir / ".wpcs_lint.toml").write_text('[rules]\n"WordPress.Security" = "off"\n"Squiz" = "off"\n'
                                             '"Universal" = "off"\n')

    result = CliRunner().invoke(main, ["check", "bad.php"])

    assert result.exit_code == 0


def test_invalid_config_is_usage_error(workdir):
    (workdir / "bad.php").write_text(BAD_CODE)
    (workdir / "broken.toml").write_text("[rules\n")

    result = CliRunner().invoke(main, ["check", "--config", "broken.toml", "bad.php"])

    assert result.exit_code == 2
    assert "Invalid TOML" in result.output


def test_check_directory_with_extensions(workdir):
    (workdir / "src").mkdir()
    (workdir / "src" / "part.inc").write_text(BAD_CODE)

    result = CliRunner().invoke(main, ["check", "src"])
    assert result.exit_code == 0

    result = CliRunner().invoke(main, ["check", "--extensions", "php,inc", "src"])
    assert result.exit_code == 1


def test_fix_command(workdir):
    target = workdir / "bad.php"
    target.write_text(BAD_CODE)

    result = CliRunner().invoke(main, ["fix", "bad.php"])

    assert "Fixed 1 issue(s) in 1 file(s)" in result.output
    assert target.read_text() == "<?php\n$items = array( 1 );\necho $items;\n"
    # The remaining unescaped echo is still reported.
    assert result.exit_code == 1


def test_rules_command():
    result = CliRunner().invoke(main, ["rules"])

    assert result.exit_code == 0
    assert result.output.startswith("Available Rules:")
    assert "SECURITY:" in result.output
    assert "WordPress.Security.EscapeOutput.OutputNotEscaped" in result.output
    assert "[fixable]" in result.output


def test_rules_command_category():
    result = CliRunner().invoke(main, ["rules", "--category", "docs"])

    assert result.exit_code == 0
    assert "DOCS:" in result.output
    assert "SECURITY:" not in result.output
    assert "Squiz.Commenting.FileComment.Missing" in result.output


def test_missing_path_is_usage_error(workdir):
    result = CliRunner().invoke(main, ["check", "nope.php"])
    assert result.exit_code == 2
