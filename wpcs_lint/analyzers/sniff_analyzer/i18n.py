"""Internationalization sniffs for the WordPress translation functions."""

from typing import List

from wpcs_lint.core.finding import Finding

from .sniff import Sniff
from .tokenizer import TokenType, has_interpolation

I18N = "WordPress.WP.I18n"

# Translation function -> 1-based position of its $domain argument.
TEXT_DOMAIN_POSITION = {
    "__": 2,
    "_e": 2,
    "esc_html__": 2,
    "esc_html_e": 2,
    "esc_attr__": 2,
    "esc_attr_e": 2,
    "_x": 3,
    "_ex": 3,
    "esc_html_x": 3,
    "esc_attr_x": 3,
    "_n_noop": 3,
    "_n": 4,
    "_nx_noop": 4,
    "_nx": 5,
}


class I18nSniff(Sniff):
    """Checks that translation calls pass the right text domain."""

    def run(self) -> List[Finding]:
        for i, token in enumerate(self.file.tokens):
            if not token.is_op("("):
                continue
            name = self.file.call_name(i)
            if name not in TEXT_DOMAIN_POSITION:
                continue
            self._check_call(i, name)
        return self.findings

    def _check_call(self, open_paren: int, name: str):
        args = self.file.call_arguments(open_paren)
        if any(self.file[t].is_op("...") for arg in args for t in arg):
            return
        position = TEXT_DOMAIN_POSITION[name]
        if len(args) < position:
            self.add(
                f"{I18N}.MissingTextDomain",
                self.file.prev_code(open_paren),
                f"Missing $domain parameter in function call to {name}().",
                suggestion=f"Pass the text domain as argument {position}",
            )
            return

        if not self.config.text_domains:
            return
        domain = args[position - 1]
        if len(domain) != 1:
            return
        token = self.file[domain[0]]
        if token.type != TokenType.STRING or has_interpolation(token):
            return
        value = token.text[1:-1]
        if value not in self.config.text_domains:
            expected = "' or '".join(self.config.text_domains)
            self.add(
                f"{I18N}.TextDomainMismatch",
                domain[0],
                f"Mismatched text domain. Expected '{expected}' but got '{value}'.",
            )
