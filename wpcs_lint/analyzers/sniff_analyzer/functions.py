"""Sniffs for restricted, discouraged and misused PHP/WordPress functions."""

from typing import List

from wpcs_lint.core.finding import Finding
from wpcs_lint.rules import RESTRICTED_FUNCTION_GROUPS, restricted_function_code

from .sniff import Sniff

STRICT_IN_ARRAY = "WordPress.PHP.StrictInArray.MissingTrueStrict"
EXTRACT = "WordPress.PHP.DontExtract.extract_extract"
DATE = "WordPress.DateTime.RestrictedFunctions.date_date"

# Function name -> number of arguments once the strict flag is passed.
STRICT_FUNCTIONS = {"in_array": 3, "array_search": 3, "array_keys": 3}

_RESTRICTED = {
    name: sniff
    for sniff, spec in RESTRICTED_FUNCTION_GROUPS.items()
    for name in spec["functions"]
}


class FunctionsSniff(Sniff):
    """Checks calls against the restricted and discouraged function lists."""

    def run(self) -> List[Finding]:
        for i, token in enumerate(self.file.tokens):
            if not token.is_op("("):
                continue
            name = self.file.call_name(i)
            if name is None:
                continue
            name_index = self.file.prev_code(i)

            if name in _RESTRICTED:
                sniff = _RESTRICTED[name]
                self.add(
                    restricted_function_code(sniff, name),
                    name_index,
                    RESTRICTED_FUNCTION_GROUPS[sniff]["message"].format(name=name),
                )
            elif name == "extract":
                self.add(
                    EXTRACT,
                    name_index,
                    "extract() usage is highly discouraged, due to the complexity and unintended issues it might cause.",
                    suggestion="Assign the needed array keys to variables explicitly",
                )
            elif name == "date":
                self.add(
                    DATE,
                    name_index,
                    "date() is affected by runtime timezone changes which can cause date/time to be "
                    "incorrectly displayed. Use gmdate() instead.",
                    suggestion="Use gmdate() for UTC or wp_date() for the site timezone",
                )
            elif name in STRICT_FUNCTIONS:
                self._check_strict(i, name, name_index)
        return self.findings

    def _check_strict(self, open_paren: int, name: str, name_index: int):
        args = self.file.call_arguments(open_paren)
        if any(self.file[t].is_op("...") for arg in args for t in arg):
            return
        if name == "array_keys" and len(args) < 2:
            return  # no search value, nothing to compare
        strict_position = STRICT_FUNCTIONS[name]
        if len(args) >= strict_position:
            flag = args[strict_position - 1]
            if not (len(flag) == 1 and self.file[flag[0]].is_word("false")):
                return
        self.add(
            STRICT_IN_ARRAY,
            name_index,
            f"Not using strict comparison for {name}; supply true for $strict argument.",
            suggestion=f"{name}( ..., true )",
        )
