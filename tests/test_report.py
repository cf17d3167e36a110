"""Tests for the report formats."""

import io
import json

import pytest

from wpcs_lint.core.finding import Finding, Severity, TokenEdit
from wpcs_lint.core.report import Reporter


def _findings():
    return [
        Finding(
            rule_id="WordPress.Security.EscapeOutput.OutputNotEscaped",
            severity=Severity.ERROR,
            filename="b.php",
            line=3,
            col=6,
            message="All output should be run through an escaping function, found '$name'.",
            suggestion="Wrap the output in esc_html()",
        ),
        Finding(
            rule_id="Universal.Arrays.DisallowShortArraySyntax.Found",
            severity=Severity.ERROR,
            filename="a.php",
            line=1,
            col=9,
            message="Short array syntax is not allowed",
            fix=(TokenEdit(4, "array("), TokenEdit(8, ")")),
        ),
        Finding(
            rule_id="PSR2.ControlStructures.ElseIfDeclaration.NotAllowed",
            severity=Severity.WARNING,
            filename="a.php",
            line=5,
            col=3,
            message="Usage of ELSE IF is discouraged; use ELSEIF instead",
        ),
    ]


def _render(output_format, findings, **kwargs):
    out = io.StringIO()
    code = Reporter(output_format=output_format, **kwargs).report(findings, out)
    return code, out.getvalue()


def test_unknown_format():
    with pytest.raises(ValueError):
        Reporter(output_format="xml")


def test_text_report():
    code, text = _render("text", _findings())

    assert code == 1
    assert text.index("a.php:1:9") < text.index("a.php:5:3") < text.index("b.php:3:6")
    assert "a.php:1:9: error: Universal.Arrays.DisallowShortArraySyntax.Found [fixable]" in text
    assert "    Suggestion: Wrap the output in esc_html()" in text
    assert "3 issues found (2 errors, 1 warning)" in text
    assert "1 of them can be fixed automatically" in text


def test_text_report_without_suggestions():
    _, text = _render("text", _findings(), show_suggestions=False)
    assert "Suggestion:" not in text


def test_empty_report():
    code, text = _render("text", [])

    assert code == 0
    assert text == "No issues found.\n"


def test_warnings_only_exit_code():
    code, _ = _render("text", _findings()[2:])
    assert code == 0


def test_json_report():
    _, text = _render("json", _findings())
    data = json.loads(text)

    assert data["summary"] == {"total": 3, "errors": 2, "warnings": 1, "fixable": 1}
    assert data["findings"][1]["fixable"] is True
    assert data["findings"][0]["severity"] == "error"


def test_sarif_report():
    _, text = _render("sarif", _findings())
    sarif = json.loads(text)
    run = sarif["runs"][0]

    assert sarif["version"] == "2.1.0"
    assert run["tool"]["driver"]["name"] == "wpcs_lint"
    assert len(run["tool"]["driver"]["rules"]) == 3
    first = run["results"][0]
    assert first["level"] == "error"
    assert first["locations"][0]["physicalLocation"]["region"] == {"startLine": 3, "startColumn": 6}
    assert first["fixes"][0]["description"]["text"] == "Wrap the output in esc_html()"
    assert run["results"][2]["level"] == "warning"


def test_summary_report():
    _, text = _render("summary", _findings())
    lines = text.splitlines()

    assert lines[0].split() == ["FILE", "ERRORS", "WARNINGS"]
    assert lines[2].split() == ["a.php", "1", "1"]
    assert lines[3].split() == ["b.php", "1", "0"]
    assert lines[-1] == "A TOTAL OF 2 ERROR(S) AND 1 WARNING(S) WERE FOUND IN 2 FILE(S)"


def test_finding_str():
    text = str(_findings()[0])
    assert text.startswith("b.php:3:6: error: WordPress.Security.EscapeOutput.OutputNotEscaped\n")
