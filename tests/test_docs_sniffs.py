"""Tests for the PHPDoc sniffs."""

from wpcs_lint.analyzers.sniff_analyzer import SniffAnalyzer
from wpcs_lint.core.config import Config

FILE_DOC = """<?php
/**
 * Plugin bootstrap.
 *
 * @package Acme
 */

"""


def _findings(code, prefix="Squiz.Commenting"):
    analyzer = SniffAnalyzer(Config())
    return [f for f in analyzer.analyze(code, "test.php") if f.rule_id.startswith(prefix)]


def test_missing_file_comment():
    findings = _findings("<?php\n$a = 1;\n")

    assert [f.rule_id for f in findings] == ["Squiz.Commenting.FileComment.Missing"]
    assert findings[0].line == 2


def test_file_comment_present():
    assert _findings(FILE_DOC + "$a = 1;\n") == []


def test_html_only_file():
    assert _findings("<p>Hello</p>\n") == []


def test_file_doc_does_not_document_function():
    """Test that the file docblock is not taken as the function's docblock."""
    findings = _findings(FILE_DOC + "function acme_init() {}\n")

    assert [f.rule_id for f in findings] == ["Squiz.Commenting.FunctionComment.Missing"]
    assert "acme_init()" in findings[0].message


def test_missing_param_tag():
    code = FILE_DOC + """/**
 * Adds numbers.
 *
 * @param int $a First number.
 * @return int
 */
function acme_add( $a, $b = array( 1 ) ) {}
"""
    findings = _findings(code)

    assert [f.rule_id for f in findings] == ["Squiz.Commenting.FunctionComment.MissingParamTag"]
    assert '"$b"' in findings[0].message
    assert findings[0].line == 8


def test_variadic_and_reference_params():
    code = FILE_DOC + """/**
 * Collects.
 *
 * @param array $into  Target.
 * @param mixed ...$items Items.
 */
function acme_collect( array &$into, ...$items ) {}
"""
    assert _findings(code) == []


def test_inheritdoc_skips_param_check():
    code = FILE_DOC + """/**
 * Acme widget.
 */
class Acme_Widget {
	/**
	 * {@inheritDoc}
	 */
	public function render( $args ) {}
}
"""
    assert _findings(code) == []


def test_missing_class_and_method_comments():
    code = FILE_DOC + "class Acme_Widget {\n\tpublic function render() {}\n}\n"
    codes = [f.rule_id for f in _findings(code)]

    assert codes == [
        "Squiz.Commenting.ClassComment.Missing",
        "Squiz.Commenting.FunctionComment.Missing",
    ]


def test_closures_need_no_doc():
    assert _findings(FILE_DOC + "$f = function ( $x ) { return $x; };\n") == []
