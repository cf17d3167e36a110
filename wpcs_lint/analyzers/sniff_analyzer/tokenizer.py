"""
PHP tokenizer for the sniff analyzer.

Splits PHP source into a flat, lossless token list: joining the text of
every token gives back the original source, which is what lets the fixer
rewrite single tokens and leave the rest of the file untouched.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List


class TokenType(str, Enum):
    """Token categories produced by the tokenizer."""
    INLINE_HTML = "inline_html"
    OPEN_TAG = "open_tag"
    OPEN_TAG_WITH_ECHO = "open_tag_with_echo"
    CLOSE_TAG = "close_tag"
    WHITESPACE = "whitespace"
    COMMENT = "comment"
    DOC_COMMENT = "doc_comment"
    VARIABLE = "variable"
    STRING = "string"
    HEREDOC = "heredoc"
    NUMBER = "number"
    IDENTIFIER = "identifier"
    OPERATOR = "operator"


NON_CODE_TYPES = frozenset({TokenType.WHITESPACE, TokenType.COMMENT, TokenType.DOC_COMMENT})


@dataclass(frozen=True)
class Token:
    """A single token; line and col are 1-indexed."""
    type: TokenType
    text: str
    line: int
    col: int

    @property
    def lower(self) -> str:
        return self.text.lower()

    def is_op(self, *ops: str) -> bool:
        return self.type == TokenType.OPERATOR and self.text in ops

    def is_word(self, *words: str) -> bool:
        """Case-insensitive identifier/keyword test."""
        return self.type == TokenType.IDENTIFIER and self.text.lower() in words


class TokenizeError(ValueError):
    """Raised for unterminated strings, comments and heredocs."""

    def __init__(self, message: str, line: int, col: int):
        super().__init__(message)
        self.line = line
        self.col = col


# Longest operators first so that "===" wins over "==".
OPERATORS = sorted(
    [
        "<=>", "**=", "...", "<<=", ">>=", "===", "!==", "??=", "?->",
        "==", "!=", "<>", "<=", ">=", "&&", "||", "++", "--", "+=", "-=",
        "*=", "/=", ".=", "%=", "&=", "|=", "^=", "->", "=>", "::", "<<",
        ">>", "??", "**", "#[",
    ],
    key=len,
    reverse=True,
)

_OPEN_TAG_RE = re.compile(r"<\?(php(?=\s|$)|=)?", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")
_VARIABLE_RE = re.compile(r"\$[A-Za-z_\x80-\uffff][\w\x80-\uffff]*")
_IDENTIFIER_RE = re.compile(r"\\?[A-Za-z_\x80-\uffff][\w\x80-\uffff]*(?:\\[A-Za-z_\x80-\uffff][\w\x80-\uffff]*)*")
_NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+"
    r"|(?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d+)?"
)
_HEREDOC_START_RE = re.compile(r"<<<[ \t]*(['\"]?)([A-Za-z_][A-Za-z0-9_]*)\1\r?\n")
_LINE_COMMENT_END_RE = re.compile(r"\r?\n|\?>")


class Tokenizer:
    """Converts PHP source text into a list of tokens."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.col = 1
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        in_php = False
        while self.pos < len(self.source):
            if in_php:
                in_php = self._php_token()
            else:
                in_php = self._html_token()
        return self.tokens

    def _emit(self, token_type: TokenType, end: int):
        text = self.source[self.pos:end]
        self.tokens.append(Token(token_type, text, self.line, self.col))
        newlines = text.count("\n")
        if newlines:
            self.line += newlines
            self.col = len(text) - text.rfind("\n")
        else:
            self.col += len(text)
        self.pos = end

    def _error(self, message: str):
        raise TokenizeError(f"{message} starting on line {self.line}", self.line, self.col)

    def _html_token(self) -> bool:
        """Consume inline HTML up to and including the next open tag."""
        match = _OPEN_TAG_RE.search(self.source, self.pos)
        # "<?xml" is inline HTML, not a short open tag.
        while match and match.group(1) is None and self.source.startswith("<?xml", match.start()):
            match = _OPEN_TAG_RE.search(self.source, match.end())
        if match is None:
            self._emit(TokenType.INLINE_HTML, len(self.source))
            return False
        if match.start() > self.pos:
            self._emit(TokenType.INLINE_HTML, match.start())
        if match.group(1) == "=":
            self._emit(TokenType.OPEN_TAG_WITH_ECHO, match.end())
        else:
            self._emit(TokenType.OPEN_TAG, match.end())
        return True

    def _php_token(self) -> bool:
        src = self.source
        pos = self.pos
        ch = src[pos]

        if src.startswith("?>", pos):
            self._emit(TokenType.CLOSE_TAG, pos + 2)
            return False

        if ch.isspace():
            self._emit(TokenType.WHITESPACE, _WHITESPACE_RE.match(src, pos).end())
        elif src.startswith("/*", pos):
            end = src.find("*/", pos + 2)
            if end == -1:
                self._error("Unterminated comment")
            is_doc = src.startswith("/**", pos) and pos + 3 < len(src) and src[pos + 3].isspace()
            self._emit(TokenType.DOC_COMMENT if is_doc else TokenType.COMMENT, end + 2)
        elif src.startswith("//", pos) or (ch == "#" and not src.startswith("#[", pos)):
            match = _LINE_COMMENT_END_RE.search(src, pos)
            self._emit(TokenType.COMMENT, match.start() if match else len(src))
        elif ch == "$" and _VARIABLE_RE.match(src, pos):
            self._emit(TokenType.VARIABLE, _VARIABLE_RE.match(src, pos).end())
        elif ch in "'\"`":
            self._emit(TokenType.STRING, self._quoted_end(pos, ch))
        elif src.startswith("<<<", pos) and _HEREDOC_START_RE.match(src, pos):
            self._emit(TokenType.HEREDOC, self._heredoc_end(_HEREDOC_START_RE.match(src, pos)))
        elif ch.isdigit() or (ch == "." and pos + 1 < len(src) and src[pos + 1].isdigit()):
            self._emit(TokenType.NUMBER, _NUMBER_RE.match(src, pos).end())
        elif _IDENTIFIER_RE.match(src, pos):
            self._emit(TokenType.IDENTIFIER, _IDENTIFIER_RE.match(src, pos).end())
        else:
            for op in OPERATORS:
                if src.startswith(op, pos):
                    self._emit(TokenType.OPERATOR, pos + len(op))
                    break
            else:
                self._emit(TokenType.OPERATOR, pos + 1)
        return True

    def _quoted_end(self, start: int, quote: str) -> int:
        src = self.source
        i = start + 1
        while i < len(src):
            if src[i] == "\\":
                i += 2
                continue
            if src[i] == quote:
                return i + 1
            if quote != "'":
                # "{$expr}" and "${expr}" may hold nested quoted strings.
                if src.startswith("{$", i):
                    i = self._braced_end(i)
                    continue
                if src.startswith("${", i):
                    i = self._braced_end(i + 1)
                    continue
            i += 1
        self._error("Unterminated string")

    def _braced_end(self, open_brace: int) -> int:
        """Index just past the brace that closes the one at open_brace."""
        src = self.source
        depth = 0
        i = open_brace
        while i < len(src):
            ch = src[i]
            if ch in "'\"`":
                i = self._quoted_end(i, ch)
                continue
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return i + 1
            i += 1
        self._error("Unterminated string")

    def _heredoc_end(self, match) -> int:
        label = match.group(2)
        # PHP 7.3+ allows the closing label to be indented.
        closing = re.compile(r"^[ \t]*" + re.escape(label) + r"\b", re.MULTILINE)
        end = closing.search(self.source, match.end())
        if end is None:
            self._error("Unterminated heredoc")
        return end.end()


def tokenize(source: str) -> List[Token]:
    """Tokenize PHP source. Raises TokenizeError for unterminated constructs."""
    return Tokenizer(source).tokenize()


def is_nowdoc(token: Token) -> bool:
    return token.type == TokenType.HEREDOC and token.text.lstrip("<").lstrip(" \t").startswith("'")


def has_interpolation(token: Token) -> bool:
    """True for double-quoted strings and heredocs that embed variables."""
    if token.type == TokenType.STRING:
        if not token.text.startswith(('"', "`")):
            return False
    elif token.type != TokenType.HEREDOC or is_nowdoc(token):
        return False
    return re.search(r"(?<!\\)\$[A-Za-z_{]|\{\$", token.text) is not None
