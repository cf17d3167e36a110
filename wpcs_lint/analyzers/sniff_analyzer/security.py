"""
Security sniffs: output escaping, nonce verification, input sanitization
and prepared SQL.
"""

import re
from dataclasses import replace
from typing import List, Optional, Sequence

from wpcs_lint.core.finding import Finding

from .sniff import Sniff
from .tokenizer import Token, TokenType, has_interpolation

ESCAPE_OUTPUT = "WordPress.Security.EscapeOutput"
NONCE = "WordPress.Security.NonceVerification"
INPUT = "WordPress.Security.ValidatedSanitizedInput"
PREPARED_SQL = "WordPress.DB.PreparedSQL"

ESCAPING_FUNCTIONS = frozenset({
    "absint", "esc_attr", "esc_attr__", "esc_attr_x", "esc_html", "esc_html__",
    "esc_html_x", "esc_js", "esc_sql", "esc_textarea", "esc_url", "esc_url_raw",
    "esc_xml", "floatval", "intval", "boolval", "like_escape", "tag_escape",
    "wp_json_encode", "wp_kses", "wp_kses_data", "wp_kses_one_attr", "wp_kses_post",
    "sanitize_key", "sanitize_html_class",
})

# Functions whose return value WordPress already escapes.
AUTO_ESCAPED_FUNCTIONS = frozenset({
    "allowed_tags", "checked", "count", "current_time", "disabled",
    "get_avatar", "get_calendar", "get_current_user_id", "get_search_form",
    "get_the_author_link", "get_the_date", "get_the_id", "get_the_post_thumbnail",
    "get_the_term_list", "get_the_time", "number_format", "number_format_i18n",
    "paginate_links", "selected", "single_post_title", "tag_description",
    "term_description", "wp_dropdown_categories", "wp_generate_tag_cloud",
    "wp_get_attachment_image", "wp_link_pages", "wp_list_categories",
    "wp_login_form", "wp_nav_menu", "wp_nonce_field", "wp_readonly", "wp_tag_cloud",
})

UNSAFE_PRINTING_FUNCTIONS = {"_e": "esc_html_e() or esc_attr_e()", "_ex": "echo esc_html_x() or echo esc_attr_x()"}

SAFE_CASTS = frozenset({"int", "integer", "float", "double", "bool", "boolean"})

# Table names interpolated into a query: "{$wpdb->posts}" or "$wpdb->posts".
WPDB_TABLE_RE = re.compile(r"\{\$wpdb->\w+\}|\$wpdb->\w+(?![\w(])")


def _interpolates_query_data(token: Token) -> bool:
    return has_interpolation(replace(token, text=WPDB_TABLE_RE.sub("", token.text)))

NONCE_FUNCTIONS = frozenset({"wp_verify_nonce", "check_admin_referer", "check_ajax_referer"})

SUPERGLOBALS = frozenset({"$_POST", "$_GET", "$_REQUEST", "$_FILES", "$_COOKIE", "$_SERVER"})
NONCE_MISSING_SUPERGLOBALS = frozenset({"$_POST", "$_FILES"})
NONCE_RECOMMENDED_SUPERGLOBALS = frozenset({"$_GET", "$_REQUEST"})

VALIDATION_FUNCTIONS = frozenset({"isset", "empty", "array_key_exists", "unset", "filter_has_var"})

SANITIZING_FUNCTIONS = frozenset({
    "esc_url_raw", "filter_input", "filter_var", "floatval", "hash_equals",
    "is_email", "number_format", "sanitize_email", "sanitize_file_name",
    "sanitize_hex_color", "sanitize_hex_color_no_hash", "sanitize_html_class",
    "sanitize_meta", "sanitize_mime_type", "sanitize_option", "sanitize_sql_orderby",
    "sanitize_term", "sanitize_term_field", "sanitize_text_field",
    "sanitize_textarea_field", "sanitize_title", "sanitize_title_for_query",
    "sanitize_title_with_dashes", "sanitize_url", "sanitize_user",
    "sanitize_user_field", "wp_handle_sideload", "wp_handle_upload", "wp_kses",
    "wp_kses_allowed_html", "wp_kses_data", "wp_kses_post", "wp_parse_id_list",
    "wp_redirect", "wp_safe_redirect", "wp_strip_all_tags",
})

# Sanitizers that make unslashing unnecessary.
UNSLASHING_SANITIZING_FUNCTIONS = frozenset({
    "absint", "boolval", "count", "intval", "sanitize_key", "sanitize_locale_name",
})

COMPARISON_OPERATORS = ("==", "===", "!=", "!==", "<>")

WPDB_QUERY_METHODS = frozenset({"query", "get_results", "get_row", "get_var", "get_col"})


class SecuritySniff(Sniff):
    """Checks the WordPress security rules."""

    def run(self) -> List[Finding]:
        for i, token in enumerate(self.file.tokens):
            if token.type == TokenType.OPEN_TAG_WITH_ECHO:
                self._check_output(i + 1, self.file.statement_end(i + 1))
            elif token.is_word("echo", "print"):
                self._check_output(i + 1, self.file.statement_end(i + 1))
            elif token.is_word("exit", "die"):
                self._check_exit(i)
            elif token.type == TokenType.VARIABLE and token.text in SUPERGLOBALS:
                self._check_superglobal(i)
            elif token.type == TokenType.VARIABLE and token.text == "$wpdb":
                self._check_wpdb_call(i)
            elif token.is_op("("):
                name = self.file.call_name(i)
                if name in UNSAFE_PRINTING_FUNCTIONS:
                    self.add(
                        f"{ESCAPE_OUTPUT}.UnsafePrintingFunction",
                        self.file.prev_code(i),
                        f"All output should be run through an escaping function "
                        f"(like {UNSAFE_PRINTING_FUNCTIONS[name]}), found '{name}'.",
                        suggestion=f"Replace {name}() with {UNSAFE_PRINTING_FUNCTIONS[name]}",
                    )
        return self.findings

    # Output escaping

    def _check_output(self, start: int, end: int):
        if not self.enabled(f"{ESCAPE_OUTPUT}.OutputNotEscaped"):
            return
        indices = self.file.code_indices(start, end)
        for component in self._split(indices, (",", )):
            for unsafe in self._unescaped(component):
                self.add(
                    f"{ESCAPE_OUTPUT}.OutputNotEscaped",
                    unsafe,
                    "All output should be run through an escaping function (see the Security sections "
                    f"in the WordPress Developer Handbooks), found '{self.file[unsafe].text}'.",
                    suggestion="Wrap the output in esc_html(), esc_attr(), esc_url() or wp_kses_post()",
                )

    def _check_exit(self, index: int):
        open_paren = self.file.next_code(index)
        if open_paren is None or not self.file[open_paren].is_op("(") or open_paren not in self.file.pairs:
            return
        inner = self.file.code_indices(open_paren + 1, self.file.pairs[open_paren])
        if len(inner) == 1 and self.file[inner[0]].type == TokenType.NUMBER:
            return  # exit status, not output
        self._check_output(open_paren + 1, self.file.pairs[open_paren])

    def _split(self, indices: Sequence[int], separators) -> List[List[int]]:
        """Split code indices at top-level separator operators."""
        parts: List[List[int]] = [[]]
        pos = 0
        while pos < len(indices):
            i = indices[pos]
            token = self.file[i]
            if token.type == TokenType.OPERATOR and token.text in separators:
                parts.append([])
                pos += 1
                continue
            parts[-1].append(i)
            if token.is_op("(", "[", "{") and i in self.file.pairs:
                close = self.file.pairs[i]
                pos += 1
                while pos < len(indices) and indices[pos] <= close:
                    parts[-1].append(indices[pos])
                    pos += 1
                continue
            pos += 1
        return parts

    def _unescaped(self, component: List[int]) -> List[int]:
        """Token indices where an unescaped output component starts."""
        if not component:
            return []

        ternary = self._split(component, ("?", ))
        if len(ternary) > 1:
            condition = ternary[0]
            rest = [i for part in ternary[1:] for i in part]
            branches = self._split(rest, (":", ))
            if branches and not branches[0]:
                branches[0] = condition  # short ternary outputs the condition
            return [i for branch in branches for i in self._unescaped(branch)]

        parts = self._split(component, (".", "??"))
        if len(parts) > 1:
            return [i for part in parts for i in self._unescaped(part)]

        first = self.file[component[0]]
        if first.is_op("@"):
            return self._unescaped(component[1:])

        if first.is_op("(") and self.file.pairs.get(component[0]) == component[-1]:
            return self._unescaped(component[1:-1])
        if (len(component) >= 3 and first.is_op("(") and self.file[component[1]].lower in SAFE_CASTS
                and self.file[component[2]].is_op(")")):
            return []

        if len(component) == 1:
            if first.type in (TokenType.STRING, TokenType.HEREDOC):
                return [component[0]] if has_interpolation(first) else []
            if first.type == TokenType.NUMBER:
                return []
            if first.type == TokenType.IDENTIFIER:
                return []  # constant
            return [component[0]]

        if first.type == TokenType.IDENTIFIER and self.file[component[1]].is_op("("):
            if self.file.pairs.get(component[1]) == component[-1]:
                name = first.lower.lstrip("\\")
                if name in ESCAPING_FUNCTIONS or name in AUTO_ESCAPED_FUNCTIONS:
                    return []
            return [component[0]]

        # Class constants: Foo::BAR
        if all(self.file[i].type == TokenType.IDENTIFIER or self.file[i].is_op("::") for i in component):
            return []

        return [component[0]]

    # Superglobals

    def _access_end(self, index: int) -> int:
        """Last token index of a superglobal access including its [...] subscripts."""
        end = index
        nxt = self.file.next_code(end)
        while nxt is not None and self.file[nxt].is_op("[") and nxt in self.file.pairs:
            end = self.file.pairs[nxt]
            nxt = self.file.next_code(end)
        return end

    def _is_cast(self, index: int) -> bool:
        close = self.file.prev_code(index)
        if close is None or not self.file[close].is_op(")"):
            return False
        word = self.file.prev_code(close)
        opener = self.file.prev_code(word) if word is not None else None
        return (opener is not None and self.file[opener].is_op("(")
                and self.file[word].lower in SAFE_CASTS)

    def _check_superglobal(self, index: int):
        name = self.file[index].text
        calls = self.file.enclosing_calls(index)
        if NONCE_FUNCTIONS.intersection(calls):
            return

        end = self._access_end(index)
        after = self.file.next_code(end)
        before = self.file.prev_code(index)
        if after is not None and self.file[after].is_op("="):
            return  # assignment, not a read
        if calls and calls[0] in VALIDATION_FUNCTIONS:
            return

        access = self.file.text(index, end)
        scope_start, _ = self.file.scope_range(index)

        if name in NONCE_MISSING_SUPERGLOBALS or name in NONCE_RECOMMENDED_SUPERGLOBALS:
            if not self._nonce_verified_before(scope_start, index):
                code = "Missing" if name in NONCE_MISSING_SUPERGLOBALS else "Recommended"
                self.add(
                    f"{NONCE}.{code}",
                    index,
                    f"Processing form data without nonce verification: {access}",
                    suggestion="Call check_admin_referer(), check_ajax_referer() or wp_verify_nonce() first",
                )

        if end != index and not self._validated_before(name, scope_start, index):
            if after is None or not self.file[after].is_op("??"):
                self.add(
                    f"{INPUT}.InputNotValidated",
                    index,
                    f"Detected usage of a possibly undefined superglobal array index: {access}. "
                    "Check that the array index exists before using it.",
                )

        if name == "$_FILES":
            return
        comparison = ((before is not None and self.file[before].is_op(*COMPARISON_OPERATORS))
                      or (after is not None and self.file[after].is_op(*COMPARISON_OPERATORS)))
        if comparison or "in_array" in calls or "array_search" in calls:
            return

        if self._is_cast(index) or UNSLASHING_SANITIZING_FUNCTIONS.intersection(calls):
            return
        if not SANITIZING_FUNCTIONS.intersection(calls):
            self.add(
                f"{INPUT}.InputNotSanitized",
                index,
                f"Detected usage of a non-sanitized input variable: {access}",
                suggestion="Wrap the value in a sanitizing function such as sanitize_text_field()",
            )
        elif "wp_unslash" not in calls:
            self.add(
                f"{INPUT}.MissingUnslash",
                index,
                f"{access} not unslashed before sanitization. Use wp_unslash() or similar",
                suggestion=f"sanitize_text_field( wp_unslash( {access} ) )",
            )

    def _nonce_verified_before(self, start: int, index: int) -> bool:
        for i in range(start, index):
            if self.file[i].is_op("(") and self.file.call_name(i) in NONCE_FUNCTIONS:
                return True
        return False

    def _validated_before(self, name: str, start: int, index: int) -> bool:
        for i in range(start, index):
            token = self.file[i]
            if token.type == TokenType.VARIABLE and token.text == name:
                if VALIDATION_FUNCTIONS.intersection(self.file.enclosing_calls(i)):
                    return True
        return False

    # Database

    def _check_wpdb_call(self, index: int):
        arrow = self.file.next_code(index)
        if arrow is None or not self.file[arrow].is_op("->"):
            return
        method = self.file.next_code(arrow)
        if method is None or self.file[method].lower not in WPDB_QUERY_METHODS:
            return
        open_paren = self.file.next_code(method)
        if open_paren is None or not self.file[open_paren].is_op("("):
            return
        args = self.file.call_arguments(open_paren)
        if not args:
            return
        query = args[0]
        if self._is_prepare_call(query[0]):
            return

        pos = 0
        while pos < len(query):
            i = query[pos]
            token = self.file[i]
            if token.type == TokenType.VARIABLE:
                if token.text == "$wpdb":
                    skip_to = self._wpdb_safe_end(i)
                    if skip_to is not None:
                        while pos < len(query) and query[pos] <= skip_to:
                            pos += 1
                        continue
                self.add(
                    f"{PREPARED_SQL}.NotPrepared",
                    i,
                    f"Use placeholders and $wpdb->prepare(); found {token.text}",
                    suggestion="$wpdb->prepare( 'SELECT ... WHERE id = %d', $id )",
                )
            elif _interpolates_query_data(token):
                self.add(
                    f"{PREPARED_SQL}.InterpolatedNotPrepared",
                    i,
                    f"Use placeholders and $wpdb->prepare(); found interpolated variable in {token.text[:40]}",
                    suggestion="$wpdb->prepare( 'SELECT ... WHERE id = %d', $id )",
                )
            pos += 1

    def _is_prepare_call(self, index: int) -> bool:
        return self._wpdb_safe_end(index) is not None and self.file[self.file.next_code(
            self.file.next_code(index))].lower == "prepare"

    def _wpdb_safe_end(self, index: int) -> Optional[int]:
        """
        End index of "$wpdb->table" or "$wpdb->prepare( ... )" starting at index,
        None if the $wpdb use is anything else.
        """
        if self.file[index].text != "$wpdb":
            return None
        arrow = self.file.next_code(index)
        if arrow is None or not self.file[arrow].is_op("->"):
            return None
        member = self.file.next_code(arrow)
        if member is None or self.file[member].type != TokenType.IDENTIFIER:
            return None
        after = self.file.next_code(member)
        if after is not None and self.file[after].is_op("("):
            if self.file[member].lower == "prepare" and after in self.file.pairs:
                return self.file.pairs[after]
            return None
        return member
