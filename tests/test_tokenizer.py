"""Tests for the PHP tokenizer."""

import pytest

from wpcs_lint.analyzers.sniff_analyzer.tokenizer import (
    TokenizeError,
    TokenType,
    has_interpolation,
    tokenize,
)


def _types(tokens):
    return [(t.type, t.text) for t in tokens if t.type != TokenType.WHITESPACE]


def test_lossless():
    """Test that joining token texts gives back the source."""
    code = "<h1>Title</h1>\n<?php\n// comment\n$a = [1, 'two', \"th$ree\"];\n?>\n<p><?= $a ?></p>\n"
    tokens = tokenize(code)
    assert "".join(t.text for t in tokens) == code


def test_inline_html_and_tags():
    """Test inline HTML, open, echo and close tags."""
    code = "<div><?php echo 1; ?></div><?= $x ?>"
    tokens = _types(tokenize(code))

    assert tokens[0] == (TokenType.INLINE_HTML, "<div>")
    assert tokens[1] == (TokenType.OPEN_TAG, "<?php")
    assert (TokenType.CLOSE_TAG, "?>") in tokens
    assert (TokenType.OPEN_TAG_WITH_ECHO, "<?=") in tokens
    assert (TokenType.INLINE_HTML, "</div>") in tokens


def test_short_open_tag():
    """Test that "<?" is an open tag but "<?xml" is inline HTML."""
    tokens = _types(tokenize("<?xml version=\"1.0\"?>\n<? echo 1;"))

    assert tokens[0][0] == TokenType.INLINE_HTML
    assert tokens[0][1].startswith("<?xml")
    assert (TokenType.OPEN_TAG, "<?") in tokens


def test_comments():
    """Test line, block and doc comments."""
    code = "<?php\n/**\n * Doc.\n */\n/* block */\n# hash\n// line ?>after"
    tokens = _types(tokenize(code))

    assert tokens[1][0] == TokenType.DOC_COMMENT
    assert tokens[2] == (TokenType.COMMENT, "/* block */")
    assert tokens[3] == (TokenType.COMMENT, "# hash")
    # A line comment ends at a close tag.
    assert tokens[4] == (TokenType.COMMENT, "// line ")
    assert tokens[5] == (TokenType.CLOSE_TAG, "?>")
    assert tokens[6] == (TokenType.INLINE_HTML, "after")


def test_strings_and_escapes():
    """Test quoted strings with escaped quotes."""
    code = "<?php $a = 'it\\'s'; $b = \"say \\\"hi\\\"\";"
    tokens = [t for t in tokenize(code) if t.type == TokenType.STRING]

    assert [t.text for t in tokens] == ["'it\\'s'", "\"say \\\"hi\\\"\""]


def test_heredoc_and_nowdoc():
    """Test heredoc and nowdoc bodies are single tokens."""
    code = "<?php\n$a = <<<EOT\nHello $name\nEOT;\n$b = <<<'EOT'\nRaw $name\n    EOT;\n"
    heredocs = [t for t in tokenize(code) if t.type == TokenType.HEREDOC]

    assert len(heredocs) == 2
    assert has_interpolation(heredocs[0])
    assert not has_interpolation(heredocs[1])


def test_operators_longest_match():
    """Test multi-character operators."""
    code = "<?php $a === $b ?? $c <=> $d; $o?->p; Foo::bar();"
    ops = [t.text for t in tokenize(code) if t.type == TokenType.OPERATOR]

    assert "===" in ops
    assert "??" in ops
    assert "<=>" in ops
    assert "?->" in ops
    assert "::" in ops


def test_numbers_identifiers_variables():
    """Test numbers, namespaced identifiers and variables."""
    code = "<?php $count = 0x1F + 1.5e3 + .5; \\WP_Query::class;"
    tokens = _types(tokenize(code))

    assert (TokenType.VARIABLE, "$count") in tokens
    assert (TokenType.NUMBER, "0x1F") in tokens
    assert (TokenType.NUMBER, "1.5e3") in tokens
    assert (TokenType.NUMBER, ".5") in tokens
    assert (TokenType.IDENTIFIER, "\\WP_Query") in tokens


def test_line_and_column():
    """Test 1-based line and column tracking."""
    code = "<?php\n\t$a = 1;\n"
    var = next(t for t in tokenize(code) if t.type == TokenType.VARIABLE)

    assert var.line == 2
    assert var.col == 2


def test_interpolation_detection():
    """Test which strings count as interpolated."""
    tokens = [t for t in tokenize("<?php 'a $b'; \"a $b\"; \"a {$b->c}\"; \"a \\$b\"; \"plain\";")
              if t.type == TokenType.STRING]

    assert [has_interpolation(t) for t in tokens] == [False, True, True, False, False]


@pytest.mark.parametrize("literal", [
    '"v={$opts["NULL"]} and {$m["TRUE"]}"',
    '"${cfg["key"]}"',
    '"{$a[ "x" ]->b( "}" )}"',
    "\"{$map['k']}\"",
    '`ls {$dirs["tmp"]}`',
])
def test_quotes_inside_complex_interpolation(literal):
    """Test that quotes nested in {$...} and ${...} stay inside the string."""
    code = f"<?php $a = {literal};"

    assert _types(tokenize(code)) == [
        (TokenType.OPEN_TAG, "<?php"),
        (TokenType.VARIABLE, "$a"),
        (TokenType.OPERATOR, "="),
        (TokenType.STRING, literal),
        (TokenType.OPERATOR, ";"),
    ]


@pytest.mark.parametrize("code", [
    "<?php $a = 'unterminated;",
    "<?php /* never closed",
    "<?php $a = <<<EOT\nno end\n",
    '<?php $a = "{$b["x"];',
])
def test_unterminated_raises(code):
    """Test that unterminated constructs raise TokenizeError."""
    with pytest.raises(TokenizeError) as exc_info:
        tokenize(code)
    assert exc_info.value.line == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
