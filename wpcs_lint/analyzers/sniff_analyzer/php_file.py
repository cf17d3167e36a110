"""
Structural index over a PHP token list.

Sniffs work on tokens rather than a full AST, so this module precomputes the
few structural facts they need: bracket pairs, which call each token sits
inside, and the ranges of function and class bodies.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .tokenizer import NON_CODE_TYPES, Token, TokenType, tokenize

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}

# Keywords followed by parentheses that are not function calls.
LANGUAGE_CONSTRUCTS = frozenset({
    "if", "elseif", "while", "for", "foreach", "switch", "match", "catch",
    "function", "fn", "array", "list", "isset", "empty", "unset", "declare",
    "return", "echo", "print", "include", "include_once", "require",
    "require_once", "new", "use", "and", "or", "xor", "clone", "instanceof",
    "yield", "throw", "case", "else", "do", "static", "self", "parent",
})

CLASS_KEYWORDS = ("class", "interface", "trait", "enum")


@dataclass(frozen=True)
class FunctionScope:
    """A named or anonymous function declaration."""
    keyword: int  # index of the "function"/"fn" token
    name: Optional[int]  # index of the name token, None for closures
    params_open: int
    params_close: int
    body_open: Optional[int]  # None for abstract/interface methods
    body_close: Optional[int]
    class_scope: Optional["ClassScope"] = None

    @property
    def is_method(self) -> bool:
        return self.class_scope is not None


@dataclass(frozen=True)
class ClassScope:
    """A class, interface, trait or enum declaration."""
    keyword: int
    name: Optional[int]  # None for anonymous classes
    body_open: int
    body_close: int


class PhpFile:
    """Tokens of one PHP file plus precomputed structure."""

    def __init__(self, source: str, filename: str, tokens: Optional[List[Token]] = None):
        self.source = source
        self.filename = filename
        self.tokens = tokens if tokens is not None else tokenize(source)
        self.pairs: Dict[int, int] = {}
        self.parents: Dict[int, Optional[int]] = {}
        self.call_stack: List[Tuple[str, ...]] = []
        self.classes: List[ClassScope] = []
        self.functions: List[FunctionScope] = []
        self._match_brackets()
        self._index_calls()
        self._index_scopes()

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int) -> Token:
        return self.tokens[index]

    # Navigation

    def is_code(self, index: int) -> bool:
        return self.tokens[index].type not in NON_CODE_TYPES

    def next_code(self, index: int) -> Optional[int]:
        """Index of the next non-whitespace, non-comment token after index."""
        for i in range(index + 1, len(self.tokens)):
            if self.is_code(i):
                return i
        return None

    def prev_code(self, index: int) -> Optional[int]:
        """Index of the previous non-whitespace, non-comment token before index."""
        for i in range(index - 1, -1, -1):
            if self.is_code(i):
                return i
        return None

    def code_indices(self, start: int = 0, end: Optional[int] = None) -> List[int]:
        """Indices of code tokens in [start, end)."""
        end = len(self.tokens) if end is None else end
        return [i for i in range(start, end) if self.is_code(i)]

    def text(self, start: int, end: int) -> str:
        """Source text of tokens [start, end]."""
        return "".join(t.text for t in self.tokens[start:end + 1])

    def statement_end(self, start: int) -> int:
        """
        Index of the ";" or close tag ending the statement that contains start,
        skipping over nested brackets.
        """
        i = start
        while i < len(self.tokens):
            token = self.tokens[i]
            if token.type == TokenType.CLOSE_TAG or token.is_op(";"):
                return i
            if token.type == TokenType.OPERATOR and token.text in _OPENERS and i in self.pairs:
                i = self.pairs[i] + 1
                continue
            if token.is_op(")", "]", "}"):
                return i
            i += 1
        return len(self.tokens) - 1

    def line_start_index(self, index: int) -> int:
        """Index of the first token on the same line as index."""
        line = self.tokens[index].line
        i = index
        while i > 0 and self.tokens[i - 1].line == line and "\n" not in self.tokens[i - 1].text:
            i -= 1
        return i

    # Calls

    def call_name(self, open_paren: int) -> Optional[str]:
        """
        Lowercased function name for a call's opening parenthesis, or None when
        the parenthesis is not a plain function call.
        """
        prev = self.prev_code(open_paren)
        if prev is None or self.tokens[prev].type != TokenType.IDENTIFIER:
            return None
        name = self.tokens[prev].lower.lstrip("\\")
        if name in LANGUAGE_CONSTRUCTS:
            return None
        before = self.prev_code(prev)
        if before is not None:
            before_token = self.tokens[before]
            if before_token.is_op("->", "?->", "::") or before_token.is_word("function", "new", "const"):
                return None
        return name

    def method_call_name(self, open_paren: int) -> Optional[str]:
        """Lowercased method name for "$obj->method(" style calls."""
        prev = self.prev_code(open_paren)
        if prev is None or self.tokens[prev].type != TokenType.IDENTIFIER:
            return None
        before = self.prev_code(prev)
        if before is None or not self.tokens[before].is_op("->", "?->", "::"):
            return None
        return self.tokens[prev].lower

    def enclosing_calls(self, index: int) -> Tuple[str, ...]:
        """Names of the calls (and isset/empty) whose argument lists contain index."""
        return self.call_stack[index]

    def call_arguments(self, open_paren: int) -> List[List[int]]:
        """Code token indices of each top-level argument of a call."""
        close = self.pairs.get(open_paren)
        if close is None:
            return []
        args: List[List[int]] = [[]]
        i = open_paren + 1
        while i < close:
            token = self.tokens[i]
            if self.is_code(i):
                if token.is_op(","):
                    args.append([])
                elif token.text in _OPENERS and i in self.pairs:
                    args[-1].extend(self.code_indices(i, self.pairs[i] + 1))
                    i = self.pairs[i] + 1
                    continue
                else:
                    args[-1].append(i)
            i += 1
        if args == [[]]:
            return []
        return args

    # Scopes

    def function_at(self, index: int) -> Optional[FunctionScope]:
        """Innermost function whose body contains index."""
        best = None
        for scope in self.functions:
            if scope.body_open is None:
                continue
            if scope.body_open < index < scope.body_close:
                if best is None or scope.body_open > best.body_open:
                    best = scope
        return best

    def scope_range(self, index: int) -> Tuple[int, int]:
        """Token range of the innermost function body around index, else the whole file."""
        scope = self.function_at(index)
        if scope is None:
            return 0, len(self.tokens) - 1
        return scope.body_open, scope.body_close

    def class_at(self, index: int) -> Optional[ClassScope]:
        best = None
        for scope in self.classes:
            if scope.body_open < index < scope.body_close:
                if best is None or scope.body_open > best.body_open:
                    best = scope
        return best

    def preceding_doc_comment(self, index: int) -> Optional[int]:
        """
        Index of the docblock attached to a declaration starting at index,
        skipping modifiers and attributes.
        """
        i = self.prev_code(index)
        boundary = index
        while i is not None:
            token = self.tokens[i]
            if token.is_word("public", "protected", "private", "static", "abstract", "final", "readonly"):
                boundary = i
                i = self.prev_code(i)
            elif token.is_op("]") and self._attribute_start(i) is not None:
                boundary = self._attribute_start(i)
                i = self.prev_code(boundary)
            else:
                break
        for j in range(boundary - 1, -1, -1):
            token = self.tokens[j]
            if token.type == TokenType.DOC_COMMENT:
                return j
            if token.type not in (TokenType.WHITESPACE, TokenType.COMMENT):
                return None
        return None

    def _attribute_start(self, close_bracket: int) -> Optional[int]:
        open_bracket = self.pairs.get(close_bracket)
        if open_bracket is not None and self.tokens[open_bracket].is_op("#["):
            return open_bracket
        return None

    # Index building

    def _match_brackets(self):
        stack: List[int] = []
        for i, token in enumerate(self.tokens):
            if token.type != TokenType.OPERATOR:
                continue
            if token.text in _OPENERS or token.text == "#[":
                self.parents[i] = stack[-1] if stack else None
                stack.append(i)
            elif token.text in _CLOSERS:
                # Tolerate unbalanced input; pop to the nearest matching opener.
                for depth in range(len(stack) - 1, -1, -1):
                    opener = self.tokens[stack[depth]].text
                    if opener == _CLOSERS[token.text] or (opener == "#[" and token.text == "]"):
                        self.pairs[stack[depth]] = i
                        self.pairs[i] = stack[depth]
                        del stack[depth:]
                        break

    def _index_calls(self):
        stack: List[Tuple[int, str]] = []
        for i, token in enumerate(self.tokens):
            while stack and i > stack[-1][0]:
                stack.pop()
            self.call_stack.append(tuple(name for _, name in stack))
            if token.is_op("(") and i in self.pairs:
                name = self.call_name(i)
                if name is None:
                    prev = self.prev_code(i)
                    if prev is not None and self.tokens[prev].is_word("isset", "empty", "unset"):
                        name = self.tokens[prev].lower
                    elif prev is not None and self.method_call_name(i) is not None:
                        name = "->" + self.method_call_name(i)
                if name is not None:
                    stack.append((self.pairs[i], name))
        # The stack holds the outermost call first; store innermost first.
        self.call_stack = [tuple(reversed(names)) for names in self.call_stack]

    def _index_scopes(self):
        for i, token in enumerate(self.tokens):
            if token.is_word(*CLASS_KEYWORDS):
                self._add_class(i)
        for i, token in enumerate(self.tokens):
            if token.is_word("function", "fn"):
                self._add_function(i)

    def _add_class(self, keyword: int):
        prev = self.prev_code(keyword)
        if prev is not None and self.tokens[prev].is_op("::", "->", "?->"):
            return  # Foo::class
        if self.tokens[keyword].is_word("enum"):
            nxt = self.next_code(keyword)
            if nxt is None or self.tokens[nxt].type != TokenType.IDENTIFIER:
                return
        name = self.next_code(keyword)
        if name is not None and self.tokens[name].type != TokenType.IDENTIFIER:
            name = None
        i = keyword
        while i < len(self.tokens) and not self.tokens[i].is_op("{", ";"):
            i += 1
        if i >= len(self.tokens) or not self.tokens[i].is_op("{") or i not in self.pairs:
            return
        self.classes.append(ClassScope(keyword, name, i, self.pairs[i]))

    def _add_function(self, keyword: int):
        prev = self.prev_code(keyword)
        if prev is not None and self.tokens[prev].is_op("->", "?->", "::"):
            return
        nxt = self.next_code(keyword)
        if nxt is None:
            return
        if self.tokens[nxt].is_op("&"):
            nxt = self.next_code(nxt)
            if nxt is None:
                return
        name = None
        if self.tokens[nxt].type == TokenType.IDENTIFIER:
            name = nxt
            nxt = self.next_code(nxt)
        if nxt is None or not self.tokens[nxt].is_op("(") or nxt not in self.pairs:
            return
        params_open, params_close = nxt, self.pairs[nxt]

        body_open = body_close = None
        i = params_close + 1
        while i < len(self.tokens):
            token = self.tokens[i]
            if token.is_op("{"):
                if i in self.pairs:
                    body_open, body_close = i, self.pairs[i]
                break
            if token.is_op(";", "=>"):
                break
            i += 1

        class_scope = self.class_at(keyword) if name is not None else None
        if class_scope is not None:
            # A named function inside a method body is still a global function.
            enclosing = self.function_at(keyword)
            if enclosing is not None and enclosing.body_open > class_scope.body_open:
                class_scope = None
        self.functions.append(
            FunctionScope(keyword, name, params_open, params_close, body_open, body_close, class_scope))
