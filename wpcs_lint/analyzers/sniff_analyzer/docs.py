"""PHPDoc sniffs: file, class and function doc comments."""

import re
from typing import List, Optional

from wpcs_lint.core.finding import Finding

from .php_file import FunctionScope
from .sniff import Sniff
from .tokenizer import TokenType

FILE_COMMENT = "Squiz.Commenting.FileComment.Missing"
CLASS_COMMENT = "Squiz.Commenting.ClassComment.Missing"
FUNCTION_COMMENT = "Squiz.Commenting.FunctionComment"

_PARAM_TAG_RE = re.compile(r"@param\s+(?:\S+\s+)?&?(?:\.\.\.)?(\$\w+)")
_INHERITDOC_RE = re.compile(r"\{?@inheritdoc\}?", re.IGNORECASE)


class DocsSniff(Sniff):
    """Checks doc comments on files, classes and functions."""

    def run(self) -> List[Finding]:
        file_doc = self._check_file_comment()
        self._check_classes(file_doc)
        self._check_functions(file_doc)
        return self.findings

    def _check_file_comment(self) -> Optional[int]:
        """Report a missing file docblock; return the index of the one found."""
        open_tags = [i for i, t in enumerate(self.file.tokens) if t.type == TokenType.OPEN_TAG]
        if not open_tags:
            return None
        first = None
        for i in range(open_tags[0] + 1, len(self.file)):
            if self.file[i].type != TokenType.WHITESPACE:
                first = i
                break
        if first is None:
            return None
        if self.file[first].type == TokenType.DOC_COMMENT:
            return first
        self.add(FILE_COMMENT, first, "Missing file doc comment",
                 suggestion="Start the file with a /** ... */ block describing it, with @package")
        return None

    def _check_classes(self, file_doc: Optional[int]):
        for scope in self.file.classes:
            if scope.name is None:
                continue
            doc = self.file.preceding_doc_comment(scope.keyword)
            if doc is None or doc == file_doc:
                kind = self.file[scope.keyword].lower
                self.add(CLASS_COMMENT, scope.keyword,
                         f"Missing doc comment for {kind} {self.file[scope.name].text}")

    def _check_functions(self, file_doc: Optional[int]):
        for scope in self.file.functions:
            if scope.name is None:
                continue
            name = self.file[scope.name].text
            doc = self.file.preceding_doc_comment(scope.keyword)
            if doc is None or doc == file_doc:
                self.add(f"{FUNCTION_COMMENT}.Missing", scope.keyword, f"Missing doc comment for function {name}()")
                continue
            text = self.file[doc].text
            if _INHERITDOC_RE.search(text):
                continue
            documented = set(_PARAM_TAG_RE.findall(text))
            for param in self._parameters(scope):
                if param not in documented:
                    self.add(
                        f"{FUNCTION_COMMENT}.MissingParamTag",
                        doc,
                        f"Doc comment for parameter \"{param}\" missing",
                        suggestion=f"Add \"@param type {param} Description.\" to the doc comment of {name}()",
                    )

    def _parameters(self, scope: FunctionScope) -> List[str]:
        params = []
        i = scope.params_open + 1
        while i < scope.params_close:
            token = self.file[i]
            if token.is_op("(", "[", "{") and i in self.file.pairs:
                i = self.file.pairs[i] + 1
                continue
            if token.type == TokenType.VARIABLE:
                params.append(token.text)
            i += 1
        return params
