"""
Formatting sniffs: Yoda conditions, array syntax, whitespace and control
structure layout. Most of these carry token edits for the fixer.
"""

from typing import List, Optional

from wpcs_lint.core.finding import Finding, TokenEdit

from .sniff import Sniff
from .tokenizer import TokenType, has_interpolation

YODA = "WordPress.PHP.YodaConditions.NotYoda"
SHORT_ARRAY = "Universal.Arrays.DisallowShortArraySyntax.Found"
SHORT_LIST = "Universal.Lists.DisallowShortListSyntax.Found"
ELSE_IF = "PSR2.ControlStructures.ElseIfDeclaration.NotAllowed"
SPACE_INDENT = "Generic.WhiteSpace.DisallowSpaceIndent.SpacesUsed"
TRAILING_WHITESPACE = "Squiz.WhiteSpace.SuperfluousWhitespace.EndLine"
CONTROL_SPACING = "WordPress.WhiteSpace.ControlStructureSpacing"
CALL_SIGNATURE = "PEAR.Functions.FunctionCallSignature"
LOWERCASE_CONSTANT = "Generic.PHP.LowerCaseConstant.Found"
SHORT_OPEN_TAG = "Generic.PHP.DisallowShortOpenTag.Found"
INLINE_CONTROL = "Generic.ControlStructures.InlineControlStructure.NotAllowed"
ASSIGNMENT_IN_CONDITION = "Generic.CodeAnalysis.AssignmentInCondition.Found"

CONTROL_KEYWORDS = ("if", "elseif", "while", "for", "foreach", "switch", "catch")
BRACED_KEYWORDS = ("if", "elseif", "while", "for", "foreach", "switch")

EQUALITY_OPERATORS = ("==", "===", "!=", "!==")
ASSIGNMENT_OPERATORS = ("=", "+=", "-=", "*=", "/=", ".=", "%=", "&=", "|=", "^=", "<<=", ">>=", "**=", "??=")

# Operators and keywords that end one operand of a comparison.
_OPERAND_BOUNDARY_OPS = ("&&", "||", "?", ":", ",", ";", "=>", "??") + ASSIGNMENT_OPERATORS
_OPERAND_BOUNDARY_WORDS = ("and", "or", "xor", "return", "echo", "print", "case")

# After these keywords "[" starts an array literal rather than an index.
_ARRAY_AFTER_WORDS = ("return", "yield", "echo", "print", "case", "and", "or", "xor", "throw", "as", "in",
                      "include", "require", "include_once", "require_once", "else")

_LITERAL_WORDS = ("true", "false", "null")


class FormattingSniff(Sniff):
    """Checks layout and syntax style rules."""

    def run(self) -> List[Finding]:
        for i, token in enumerate(self.file.tokens):
            if token.type == TokenType.OPERATOR:
                if token.text in EQUALITY_OPERATORS:
                    self._check_yoda(i)
                elif token.text == "[":
                    self._check_short_array(i)
                elif token.text == "(":
                    self._check_call_spacing(i)
            elif token.type == TokenType.IDENTIFIER:
                lower = token.lower
                if lower == "else":
                    self._check_else(i)
                if lower in ("else", "do"):
                    self._check_inline_else_do(i)
                if lower in CONTROL_KEYWORDS:
                    self._check_control_spacing(i)
                if lower in BRACED_KEYWORDS:
                    self._check_inline_control(i)
                if lower in ("if", "elseif"):
                    self._check_assignment_in_condition(i)
                if lower in _LITERAL_WORDS and token.text != lower:
                    self._check_constant_case(i)
            elif token.type == TokenType.WHITESPACE:
                self._check_whitespace(i)
            elif token.type in (TokenType.COMMENT, TokenType.DOC_COMMENT):
                self._check_comment_trailing_whitespace(i)
            elif token.type == TokenType.OPEN_TAG and token.text == "<?":
                self._check_short_open_tag(i)
        return self.findings

    # Yoda conditions

    def _operand(self, index: int, step: int) -> List[int]:
        """Code indices of one comparison operand walking away from the operator."""
        operand: List[int] = []
        i = self.file.next_code(index) if step > 0 else self.file.prev_code(index)
        while i is not None:
            token = self.file[i]
            if token.type in (TokenType.OPEN_TAG, TokenType.OPEN_TAG_WITH_ECHO, TokenType.CLOSE_TAG):
                break
            if token.type == TokenType.OPERATOR and token.text in _OPERAND_BOUNDARY_OPS:
                break
            if token.is_word(*_OPERAND_BOUNDARY_WORDS):
                break
            opens = "([{" if step > 0 else ")]}"
            if token.type == TokenType.OPERATOR and token.text in opens and i in self.file.pairs:
                other = self.file.pairs[i]
                lo, hi = min(i, other), max(i, other)
                operand.extend(self.file.code_indices(lo, hi + 1))
                i = self.file.next_code(hi) if step > 0 else self.file.prev_code(lo)
                continue
            if token.type == TokenType.OPERATOR and token.text in "()[]{}":
                break  # unmatched bracket: the enclosing group ends here
            operand.append(i)
            i = self.file.next_code(i) if step > 0 else self.file.prev_code(i)
        return operand

    def _check_yoda(self, index: int):
        left = self._operand(index, -1)
        right = self._operand(index, 1)
        if not left or not right:
            return
        if not any(self.file[i].type == TokenType.VARIABLE for i in left):
            return
        for i in right:
            token = self.file[i]
            if token.type in (TokenType.NUMBER, TokenType.IDENTIFIER):
                continue
            if token.type == TokenType.STRING and not has_interpolation(token):
                continue
            if token.is_op("-", "+", "::"):
                continue
            return
        if self.file[right[-1]].is_op("::"):
            return
        self.add(
            YODA,
            index,
            "Use Yoda Condition checks, you must.",
            suggestion=f"Write {self.file.text(right[0], right[-1])} "
            f"{self.file[index].text} {self.file.text(left[0], left[-1])}",
        )

    # Arrays

    def _is_array_literal(self, index: int) -> bool:
        prev = self.file.prev_code(index)
        if prev is None:
            return True
        token = self.file[prev]
        if token.type in (TokenType.VARIABLE, TokenType.STRING, TokenType.HEREDOC, TokenType.NUMBER):
            return False
        if token.type == TokenType.IDENTIFIER:
            return token.lower in _ARRAY_AFTER_WORDS
        return not token.is_op(")", "]", "}", "->", "?->", "::")

    def _is_short_list(self, index: int) -> bool:
        close = self.file.pairs[index]
        after = self.file.next_code(close)
        if after is not None and self.file[after].is_op("="):
            return True
        prev = self.file.prev_code(index)
        if prev is not None and self.file[prev].is_word("as"):
            return True
        parent = self.file.parents.get(index)
        if parent is not None and self.file[parent].is_op("[") and self._is_array_literal(parent):
            return self._is_short_list(parent)
        if parent is not None and self.file[parent].is_op("("):
            keyword = self.file.prev_code(parent)
            return keyword is not None and self.file[keyword].is_word("list")
        return False

    def _check_short_array(self, index: int):
        if index not in self.file.pairs or not self._is_array_literal(index):
            return
        close = self.file.pairs[index]
        if self._is_short_list(index):
            self.add(
                SHORT_LIST,
                index,
                "Short list syntax is not allowed",
                fix=(TokenEdit(index, "list("), TokenEdit(close, ")")),
            )
        else:
            self.add(
                SHORT_ARRAY,
                index,
                "Short array syntax is not allowed",
                fix=(TokenEdit(index, "array("), TokenEdit(close, ")")),
            )

    # Control structures

    def _check_else(self, index: int):
        nxt = index + 1
        if nxt + 1 >= len(self.file) or self.file[nxt].type != TokenType.WHITESPACE:
            return
        if not self.file[nxt + 1].is_word("if"):
            return
        self.add(
            ELSE_IF,
            index,
            "Usage of ELSE IF is discouraged; use ELSEIF instead",
            fix=(TokenEdit(index, "elseif"), TokenEdit(nxt, ""), TokenEdit(nxt + 1, "")),
        )

    def _condition_parens(self, index: int) -> Optional[int]:
        open_paren = self.file.next_code(index)
        if open_paren is None or not self.file[open_paren].is_op("(") or open_paren not in self.file.pairs:
            return None
        return open_paren

    def _check_control_spacing(self, index: int):
        open_paren = self._condition_parens(index)
        if open_paren is None:
            return
        keyword = self.file[index].lower
        if open_paren == index + 1:
            self.add(
                f"{CONTROL_SPACING}.NoSpaceBeforeOpenParenthesis",
                index,
                f"Space after opening control structure is required; found \"{keyword}(\"",
                fix=(TokenEdit(index, self.file[index].text + " "), ),
            )
        self._check_paren_padding(open_paren, CONTROL_SPACING, "NoSpaceAfterOpenParenthesis",
                                  "NoSpaceBeforeCloseParenthesis", "control structure")

    def _check_call_spacing(self, index: int):
        if self.file.call_name(index) is None and self.file.method_call_name(index) is None:
            return
        self._check_paren_padding(index, CALL_SIGNATURE, "SpaceAfterOpenBracket", "SpaceBeforeCloseBracket",
                                  "function call")

    def _check_paren_padding(self, open_paren: int, sniff: str, open_code: str, close_code: str, what: str):
        close = self.file.pairs.get(open_paren)
        if close is None or close == open_paren + 1:
            return  # no arguments
        if self.file[open_paren + 1].type != TokenType.WHITESPACE:
            self.add(
                f"{sniff}.{open_code}",
                open_paren,
                f"Expected 1 space after opening parenthesis of {what}; 0 found",
                fix=(TokenEdit(open_paren, "( "), ),
            )
        if self.file[close - 1].type != TokenType.WHITESPACE:
            self.add(
                f"{sniff}.{close_code}",
                close,
                f"Expected 1 space before closing parenthesis of {what}; 0 found",
                fix=(TokenEdit(close, " )"), ),
            )

    def _check_inline_control(self, index: int):
        open_paren = self._condition_parens(index)
        if open_paren is None:
            return
        body = self.file.next_code(self.file.pairs[open_paren])
        if body is None or self.file[body].is_op("{", ":", ";"):
            return
        keyword = self.file[index].lower
        self.add(
            INLINE_CONTROL,
            index,
            f"Inline control structures are not allowed; wrap the {keyword} body in braces",
        )

    def _check_inline_else_do(self, index: int):
        prev = self.file.prev_code(index)
        if prev is not None and (self.file[prev].is_op("->", "?->", "::") or self.file[prev].is_word("function")):
            return  # method named else/do
        body = self.file.next_code(index)
        if body is None or self.file[body].is_op("{", ":"):
            return
        keyword = self.file[index].lower
        if keyword == "else" and self.file[body].is_word("if"):
            return
        self.add(
            INLINE_CONTROL,
            index,
            f"Inline control structures are not allowed; wrap the {keyword} body in braces",
        )

    def _check_assignment_in_condition(self, index: int):
        open_paren = self._condition_parens(index)
        if open_paren is None:
            return
        close = self.file.pairs[open_paren]
        i = open_paren + 1
        while i < close:
            token = self.file[i]
            if token.is_op("(", "[", "{") and i in self.file.pairs:
                i = self.file.pairs[i] + 1
                continue
            if token.type == TokenType.OPERATOR and token.text in ASSIGNMENT_OPERATORS:
                self.add(
                    ASSIGNMENT_IN_CONDITION,
                    i,
                    "Variable assignment found within a condition. Did you mean to do a comparison?",
                )
                return
            i += 1

    # Constants and tags

    def _check_constant_case(self, index: int):
        prev = self.file.prev_code(index)
        if prev is not None and (self.file[prev].is_op("->", "?->", "::") or self.file[prev].is_word(
                "const", "function", "class", "new")):
            return
        nxt = self.file.next_code(index)
        if nxt is not None and self.file[nxt].is_op("(", "::"):
            return
        token = self.file[index]
        self.add(
            LOWERCASE_CONSTANT,
            index,
            f"TRUE, FALSE and NULL must be lowercase; expected \"{token.lower}\" but found \"{token.text}\"",
            fix=(TokenEdit(index, token.lower), ),
        )

    def _check_short_open_tag(self, index: int):
        nxt = index + 1
        needs_space = nxt < len(self.file) and self.file[nxt].type != TokenType.WHITESPACE
        self.add(
            SHORT_OPEN_TAG,
            index,
            "Short PHP opening tag used; expected \"<?php\" but found \"<?\"",
            fix=(TokenEdit(index, "<?php " if needs_space else "<?php"), ),
        )

    # Whitespace

    def _check_whitespace(self, index: int):
        token = self.file[index]
        if "\n" not in token.text:
            return
        segments = token.text.split("\n")

        cleaned = "\n".join([("\r" if s.endswith("\r") else "") for s in segments[:-1]] + [segments[-1]])
        for n, segment in enumerate(segments[:-1]):
            content = segment.rstrip("\r")
            if content:
                line = token.line + n
                col = token.col if n == 0 else 1
                self.add(
                    TRAILING_WHITESPACE,
                    index,
                    "Whitespace found at end of line",
                    fix=(TokenEdit(index, cleaned), ),
                    line=line,
                    col=col,
                )

        indent = segments[-1]
        if index + 1 >= len(self.file) or indent == "":
            return
        spaces = " " * self.config.tab_width
        if spaces in indent:
            fixed = "\n".join(segments[:-1] + [indent.replace(spaces, "\t")])
            self.add(
                SPACE_INDENT,
                index + 1,
                "Tabs must be used to indent lines; spaces are not allowed",
                fix=(TokenEdit(index, fixed), ),
                line=token.line + len(segments) - 1,
                col=1,
            )

    def _check_comment_trailing_whitespace(self, index: int):
        token = self.file[index]
        if "\n" in token.text:
            self._check_comment_lines(index)
            return
        if token.text == token.text.rstrip(" \t"):
            return
        nxt = index + 1
        if nxt < len(self.file) and "\n" not in self.file[nxt].text:
            return  # comment followed by a close tag on the same line
        self.add(
            TRAILING_WHITESPACE,
            index,
            "Whitespace found at end of line",
            fix=(TokenEdit(index, token.text.rstrip(" \t")), ),
            col=token.col + len(token.text.rstrip(" \t")),
        )

    def _check_comment_lines(self, index: int):
        """Trailing whitespace on each line of a block comment or docblock."""
        token = self.file[index]
        segments = token.text.split("\n")
        stripped = [s[:-1].rstrip(" \t") if s.endswith("\r") else s.rstrip(" \t") for s in segments[:-1]]
        cleaned = "\n".join(
            [s + "\r" if segment.endswith("\r") else s for s, segment in zip(stripped, segments)]
            + [segments[-1]]
        )
        for n, content in enumerate(stripped):
            if len(content) == len(segments[n].rstrip("\r")):
                continue
            self.add(
                TRAILING_WHITESPACE,
                index,
                "Whitespace found at end of line",
                fix=(TokenEdit(index, cleaned), ),
                line=token.line + n,
                col=(token.col if n == 0 else 1) + len(content),
            )
