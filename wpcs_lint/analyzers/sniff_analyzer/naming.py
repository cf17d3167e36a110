"""Naming convention sniffs: functions, methods, variables, classes and files."""

import re
from pathlib import PurePath
from typing import List, Set

from wpcs_lint.core.finding import Finding

from .sniff import Sniff, to_snake_case
from .tokenizer import TokenType

FUNCTION_NAME = "WordPress.NamingConventions.ValidFunctionName"
VARIABLE_NAME = "WordPress.NamingConventions.ValidVariableName.VariableNotSnakeCase"
CLASS_NAME = "PEAR.NamingConventions.ValidClassName.Invalid"
FILE_NAME = "WordPress.Files.FileName"
PREFIX = "WordPress.NamingConventions.PrefixAllGlobals"

_CLASS_NAME_RE = re.compile(r"[A-Z][A-Za-z0-9]*(?:_[A-Z0-9][A-Za-z0-9]*)*")
_FILE_NAME_RE = re.compile(r"[a-z0-9-]+(?:\.[a-z0-9-]+)*")

IGNORED_VARIABLES = frozenset({
    "$this", "$GLOBALS", "$_SERVER", "$_GET", "$_POST", "$_FILES", "$_COOKIE",
    "$_SESSION", "$_REQUEST", "$_ENV", "$HTTP_RAW_POST_DATA", "$php_errormsg",
    "$http_response_header", "$argc", "$argv",
})


class NamingSniff(Sniff):
    """Checks WordPress naming conventions."""

    def run(self) -> List[Finding]:
        self._check_functions()
        self._check_variables()
        self._check_classes()
        self._check_file_name()
        if self.config.prefixes:
            self._check_prefixes()
        return self.findings

    def _check_functions(self):
        for scope in self.file.functions:
            if scope.name is None:
                continue
            name = self.file[scope.name].text
            if scope.is_method and name.startswith("__"):
                continue  # magic methods
            if name == name.lower():
                continue
            code = "MethodNameInvalid" if scope.is_method else "FunctionNameInvalid"
            kind = "Method" if scope.is_method else "Function"
            expected = to_snake_case(name)
            self.add(
                f"{FUNCTION_NAME}.{code}",
                scope.name,
                f"{kind} name \"{name}\" is not in snake case format, try \"{expected}\"",
                suggestion=f"Rename to {expected}",
            )

    def _check_variables(self):
        seen: Set[str] = set()
        for i, token in enumerate(self.file.tokens):
            if token.type != TokenType.VARIABLE or token.text in IGNORED_VARIABLES:
                continue
            prev = self.file.prev_code(i)
            if prev is not None and self.file[prev].is_op("::"):
                continue  # static property of another class
            name = token.text
            if name == name.lower() or name in seen:
                continue
            seen.add(name)
            expected = "$" + to_snake_case(name[1:])
            self.add(
                VARIABLE_NAME,
                i,
                f"Variable \"{name}\" is not in valid snake_case format, try \"{expected}\"",
                suggestion=f"Rename to {expected}",
            )

    def _check_classes(self):
        for scope in self.file.classes:
            if scope.name is None:
                continue
            name = self.file[scope.name].text
            if _CLASS_NAME_RE.fullmatch(name):
                continue
            expected = "_".join(part[:1].upper() + part[1:] for part in name.split("_") if part)
            kind = self.file[scope.keyword].lower.capitalize()
            self.add(
                CLASS_NAME,
                scope.name,
                f"{kind} name \"{name}\" is not in PascalCase_With_Underscores format, try \"{expected}\"",
            )

    def _check_file_name(self):
        path = PurePath(self.file.filename)
        if path.suffix.lower() != ".php" or not self.file.tokens:
            return
        stem = path.name[:-len(path.suffix)]
        if not _FILE_NAME_RE.fullmatch(stem):
            expected = stem.lower().replace("_", "-") + ".php"
            self.add(
                f"{FILE_NAME}.NotHyphenatedLowercase",
                0,
                f"Filenames should be all lowercase with hyphens as word separators. "
                f"Expected {expected}, but found {path.name}.",
                line=1,
                col=1,
            )
            return

        named = [s for s in self.file.classes if s.name is not None and self.file[s.keyword].is_word("class")]
        if not named:
            return
        class_name = self.file[named[0].name].text
        expected = "class-" + class_name.lower().replace("_", "-") + ".php"
        if path.name != expected:
            self.add(
                f"{FILE_NAME}.InvalidClassFileName",
                0,
                f"Class file names should be based on the class name with \"class-\" prepended. "
                f"Expected {expected}, but found {path.name}.",
                line=1,
                col=1,
            )

    def _has_prefix(self, name: str) -> bool:
        lowered = name.lower().lstrip("\\")
        return any(lowered.startswith(prefix.lower()) for prefix in self.config.prefixes)

    def _check_prefixes(self):
        prefixes = ", ".join(self.config.prefixes)
        namespaced = any(t.is_word("namespace") for t in self.file.tokens)

        if not namespaced:
            for scope in self.file.functions:
                if scope.name is None or scope.is_method:
                    continue
                name = self.file[scope.name].text
                if not self._has_prefix(name):
                    self.add(
                        f"{PREFIX}.NonPrefixedFunctionFound",
                        scope.name,
                        "Functions declared in the global namespace by a theme/plugin should start with "
                        f"the theme/plugin prefix ({prefixes}). Found: \"{name}\".",
                    )
            for scope in self.file.classes:
                if scope.name is None:
                    continue
                name = self.file[scope.name].text
                if not self._has_prefix(name):
                    self.add(
                        f"{PREFIX}.NonPrefixedClassFound",
                        scope.name,
                        "Classes declared by a theme/plugin should start with "
                        f"the theme/plugin prefix ({prefixes}). Found: \"{name}\".",
                    )

        for i, token in enumerate(self.file.tokens):
            if not token.is_op("(") or self.file.call_name(i) != "define":
                continue
            args = self.file.call_arguments(i)
            if not args or len(args[0]) != 1 or self.file[args[0][0]].type != TokenType.STRING:
                continue
            name = self.file[args[0][0]].text[1:-1]
            if not self._has_prefix(name):
                self.add(
                    f"{PREFIX}.NonPrefixedConstantFound",
                    args[0][0],
                    "Global constants defined by a theme/plugin should start with "
                    f"the theme/plugin prefix ({prefixes}). Found: \"{name}\".",
                )
