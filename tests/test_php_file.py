"""Tests for the PhpFile structural index."""

import pytest

from wpcs_lint.analyzers.sniff_analyzer.php_file import PhpFile


def _index_of(php_file, text, start=0):
    for i in range(start, len(php_file)):
        if php_file[i].text == text:
            return i
    raise AssertionError(f"{text!r} not found")


def test_bracket_pairs():
    """Test that openers and closers are paired both ways."""
    php_file = PhpFile("<?php foo( [ 1, 2 ], bar() );", "test.php")
    open_paren = _index_of(php_file, "(")
    close_paren = php_file.pairs[open_paren]

    assert php_file[close_paren].text == ")"
    assert php_file.pairs[close_paren] == open_paren
    assert php_file.text(open_paren, close_paren) == "( [ 1, 2 ], bar() )"


def test_parents():
    """Test the enclosing-bracket map."""
    php_file = PhpFile("<?php foo( [ 1 ] );", "test.php")
    open_paren = _index_of(php_file, "(")
    open_bracket = _index_of(php_file, "[")

    assert php_file.parents[open_paren] is None
    assert php_file.parents[open_bracket] == open_paren


def test_call_name():
    """Test which parentheses count as plain function calls."""
    php_file = PhpFile(
        "<?php esc_html( $a ); if ( $b ) {} $obj->save( 1 ); function foo() {} new Bar( 2 ); \\strlen( $c );",
        "test.php",
    )
    parens = [i for i in range(len(php_file)) if php_file[i].text == "("]
    names = [php_file.call_name(i) for i in parens]

    assert names == ["esc_html", None, None, None, None, "strlen"]
    assert php_file.method_call_name(parens[2]) == "save"


def test_enclosing_calls_innermost_first():
    """Test the per-token call stack."""
    php_file = PhpFile("<?php echo esc_html( trim( $name ) ) . $other;", "test.php")
    name = _index_of(php_file, "$name")
    other = _index_of(php_file, "$other")

    assert php_file.enclosing_calls(name) == ("trim", "esc_html")
    assert php_file.enclosing_calls(other) == ()


def test_enclosing_calls_isset_and_methods():
    """Test that isset and method calls appear in the call stack."""
    php_file = PhpFile("<?php isset( $_GET['a'] ); $wpdb->prepare( $sql );", "test.php")
    get = _index_of(php_file, "$_GET")
    sql = _index_of(php_file, "$sql")

    assert php_file.enclosing_calls(get) == ("isset",)
    assert php_file.enclosing_calls(sql) == ("->prepare",)


def test_call_arguments():
    """Test splitting a call into top-level arguments."""
    php_file = PhpFile("<?php in_array( $needle, array( 1, 2 ), true );", "test.php")
    open_paren = _index_of(php_file, "(")
    args = php_file.call_arguments(open_paren)

    assert len(args) == 3
    assert [php_file[i].text for i in args[0]] == ["$needle"]
    assert php_file[args[1][0]].text == "array"
    assert [php_file[i].text for i in args[2]] == ["true"]


def test_call_arguments_empty():
    php_file = PhpFile("<?php wp_die();", "test.php")
    assert php_file.call_arguments(_index_of(php_file, "(")) == []


def test_statement_end_skips_brackets():
    """Test that statement_end skips nested brackets."""
    php_file = PhpFile("<?php $a = foo( function () { return 1; } ); $b = 2;", "test.php")
    end = php_file.statement_end(_index_of(php_file, "$a"))

    assert php_file[end].text == ";"
    assert php_file[php_file.next_code(end)].text == "$b"


def test_functions_and_methods():
    """Test function and method scope detection."""
    code = """<?php
function outer( $a ) {
    $f = function ( $b ) { return $b; };
}
class Foo_Bar {
    public function baz() {}
    abstract protected function qux();
}
"""
    php_file = PhpFile(code, "test.php")
    named = {php_file[s.name].text: s for s in php_file.functions if s.name is not None}

    assert set(named) == {"outer", "baz", "qux"}
    assert not named["outer"].is_method
    assert named["baz"].is_method
    assert named["qux"].body_open is None
    assert len(php_file.classes) == 1
    assert php_file[php_file.classes[0].name].text == "Foo_Bar"

    closure = [s for s in php_file.functions if s.name is None]
    assert len(closure) == 1
    inner_b = _index_of(php_file, "$b", closure[0].body_open)
    assert php_file.function_at(inner_b) is closure[0]


def test_class_constant_is_not_a_class():
    php_file = PhpFile("<?php $name = Foo::class;", "test.php")
    assert php_file.classes == []


def test_preceding_doc_comment():
    """Test docblock lookup across modifiers and attributes."""
    code = """<?php
class Foo {
    /**
     * Documented.
     */
    #[Deprecated]
    public static function bar() {}

    public function baz() {}
}
"""
    php_file = PhpFile(code, "test.php")
    by_name = {php_file[s.name].text: s for s in php_file.functions}

    doc = php_file.preceding_doc_comment(by_name["bar"].keyword)
    assert doc is not None
    assert "Documented." in php_file[doc].text
    assert php_file.preceding_doc_comment(by_name["baz"].keyword) is None


@pytest.mark.parametrize("code", ["<?php foo( ;", "<?php } ) ]"])
def test_unbalanced_brackets_tolerated(code):
    php_file = PhpFile(code, "test.php")
    assert len(php_file.call_stack) == len(php_file)
