"""
Rules for detecting WordPress coding-standard violations.

Rule ids are phpcs sniff codes, so suppressions and ruleset excludes
written for phpcs apply unchanged. Rules are organized by category
(security, naming, formatting, etc.)
"""

RULE_REGISTRY = {
    # Security rules
    "WordPress.Security.EscapeOutput.OutputNotEscaped": {
        "category": "security",
        "severity": "error",
        "description": "All output should be run through an escaping function",
        "fixable": False,
    },
    "WordPress.Security.EscapeOutput.UnsafePrintingFunction": {
        "category": "security",
        "severity": "error",
        "description": "Translation functions that echo must be the escaping variants",
        "fixable": False,
    },
    "WordPress.Security.NonceVerification.Missing": {
        "category": "security",
        "severity": "error",
        "description": "Processing form data without nonce verification",
        "fixable": False,
    },
    "WordPress.Security.NonceVerification.Recommended": {
        "category": "security",
        "severity": "warning",
        "description": "Processing query data without nonce verification",
        "fixable": False,
    },
    "WordPress.Security.ValidatedSanitizedInput.InputNotSanitized": {
        "category": "security",
        "severity": "error",
        "description": "Superglobal input must be sanitized before use",
        "fixable": False,
    },
    "WordPress.Security.ValidatedSanitizedInput.MissingUnslash": {
        "category": "security",
        "severity": "error",
        "description": "Superglobal input must be unslashed with wp_unslash() before sanitizing",
        "fixable": False,
    },
    "WordPress.Security.ValidatedSanitizedInput.InputNotValidated": {
        "category": "security",
        "severity": "warning",
        "description": "Superglobal index read without isset()/empty() validation",
        "fixable": False,
    },
    "WordPress.DB.PreparedSQL.NotPrepared": {
        "category": "security",
        "severity": "error",
        "description": "SQL containing variables must go through $wpdb->prepare()",
        "fixable": False,
    },
    "WordPress.DB.PreparedSQL.InterpolatedNotPrepared": {
        "category": "security",
        "severity": "error",
        "description": "SQL with interpolated variables must go through $wpdb->prepare()",
        "fixable": False,
    },

    # Naming rules
    "WordPress.NamingConventions.ValidFunctionName.FunctionNameInvalid": {
        "category": "naming",
        "severity": "error",
        "description": "Function names must be lowercase words separated by underscores",
        "fixable": False,
    },
    "WordPress.NamingConventions.ValidFunctionName.MethodNameInvalid": {
        "category": "naming",
        "severity": "error",
        "description": "Method names must be lowercase words separated by underscores",
        "fixable": False,
    },
    "WordPress.NamingConventions.ValidVariableName.VariableNotSnakeCase": {
        "category": "naming",
        "severity": "error",
        "description": "Variable names must be lowercase words separated by underscores",
        "fixable": False,
    },
    "PEAR.NamingConventions.ValidClassName.Invalid": {
        "category": "naming",
        "severity": "error",
        "description": "Class names must be capitalized words separated by underscores",
        "fixable": False,
    },
    "WordPress.Files.FileName.NotHyphenatedLowercase": {
        "category": "naming",
        "severity": "error",
        "description": "File names must be lowercase with hyphens as word separators",
        "fixable": False,
    },
    "WordPress.Files.FileName.InvalidClassFileName": {
        "category": "naming",
        "severity": "error",
        "description": "Class files must be named class-{class-name}.php",
        "fixable": False,
    },
    "WordPress.NamingConventions.PrefixAllGlobals.NonPrefixedFunctionFound": {
        "category": "naming",
        "severity": "error",
        "description": "Global functions must start with a configured prefix",
        "fixable": False,
    },
    "WordPress.NamingConventions.PrefixAllGlobals.NonPrefixedClassFound": {
        "category": "naming",
        "severity": "error",
        "description": "Global classes must start with a configured prefix",
        "fixable": False,
    },
    "WordPress.NamingConventions.PrefixAllGlobals.NonPrefixedConstantFound": {
        "category": "naming",
        "severity": "error",
        "description": "Global constants must start with a configured prefix",
        "fixable": False,
    },

    # Formatting rules
    "WordPress.PHP.YodaConditions.NotYoda": {
        "category": "formatting",
        "severity": "error",
        "description": "Use Yoda conditions when checking a variable against a literal",
        "fixable": False,
    },
    "Universal.Arrays.DisallowShortArraySyntax.Found": {
        "category": "formatting",
        "severity": "error",
        "description": "Short array syntax is not allowed, use array()",
        "fixable": True,
    },
    "Universal.Lists.DisallowShortListSyntax.Found": {
        "category": "formatting",
        "severity": "error",
        "description": "Short list syntax is not allowed, use list()",
        "fixable": True,
    },
    "PSR2.ControlStructures.ElseIfDeclaration.NotAllowed": {
        "category": "formatting",
        "severity": "warning",
        "description": "Usage of ELSE IF is discouraged; use ELSEIF instead",
        "fixable": True,
    },
    "Generic.WhiteSpace.DisallowSpaceIndent.SpacesUsed": {
        "category": "formatting",
        "severity": "error",
        "description": "Tabs must be used to indent lines; spaces are not allowed",
        "fixable": True,
    },
    "Squiz.WhiteSpace.SuperfluousWhitespace.EndLine": {
        "category": "formatting",
        "severity": "error",
        "description": "Whitespace found at end of line",
        "fixable": True,
    },
    "WordPress.WhiteSpace.ControlStructureSpacing.NoSpaceBeforeOpenParenthesis": {
        "category": "formatting",
        "severity": "error",
        "description": "Space after control structure keyword is required",
        "fixable": True,
    },
    "WordPress.WhiteSpace.ControlStructureSpacing.NoSpaceAfterOpenParenthesis": {
        "category": "formatting",
        "severity": "error",
        "description": "No space after opening parenthesis of a control structure",
        "fixable": True,
    },
    "WordPress.WhiteSpace.ControlStructureSpacing.NoSpaceBeforeCloseParenthesis": {
        "category": "formatting",
        "severity": "error",
        "description": "No space before closing parenthesis of a control structure",
        "fixable": True,
    },
    "PEAR.Functions.FunctionCallSignature.SpaceAfterOpenBracket": {
        "category": "formatting",
        "severity": "error",
        "description": "Space after opening parenthesis of function call is required",
        "fixable": True,
    },
    "PEAR.Functions.FunctionCallSignature.SpaceBeforeCloseBracket": {
        "category": "formatting",
        "severity": "error",
        "description": "Space before closing parenthesis of function call is required",
        "fixable": True,
    },
    "Generic.PHP.LowerCaseConstant.Found": {
        "category": "formatting",
        "severity": "error",
        "description": "TRUE, FALSE and NULL must be lowercase",
        "fixable": True,
    },
    "Generic.PHP.DisallowShortOpenTag.Found": {
        "category": "formatting",
        "severity": "error",
        "description": "Short PHP opening tag used; expected <?php",
        "fixable": True,
    },
    "Generic.ControlStructures.InlineControlStructure.NotAllowed": {
        "category": "formatting",
        "severity": "error",
        "description": "Inline control structures are not allowed; use braces",
        "fixable": False,
    },
    "Generic.CodeAnalysis.AssignmentInCondition.Found": {
        "category": "formatting",
        "severity": "warning",
        "description": "Variable assignment found within a condition",
        "fixable": False,
    },

    # PHP usage rules
    "WordPress.PHP.StrictInArray.MissingTrueStrict": {
        "category": "php",
        "severity": "warning",
        "description": "Array search functions must be called with strict comparison",
        "fixable": False,
    },
    "WordPress.PHP.DontExtract.extract_extract": {
        "category": "php",
        "severity": "error",
        "description": "extract() usage is highly discouraged",
        "fixable": False,
    },
    "WordPress.DateTime.RestrictedFunctions.date_date": {
        "category": "php",
        "severity": "error",
        "description": "date() is affected by runtime timezone changes; use gmdate() or wp_date()",
        "fixable": False,
    },

    # Documentation rules
    "Squiz.Commenting.FileComment.Missing": {
        "category": "docs",
        "severity": "error",
        "description": "Missing file doc comment",
        "fixable": False,
    },
    "Squiz.Commenting.ClassComment.Missing": {
        "category": "docs",
        "severity": "error",
        "description": "Missing doc comment for class",
        "fixable": False,
    },
    "Squiz.Commenting.FunctionComment.Missing": {
        "category": "docs",
        "severity": "error",
        "description": "Missing doc comment for function",
        "fixable": False,
    },
    "Squiz.Commenting.FunctionComment.MissingParamTag": {
        "category": "docs",
        "severity": "error",
        "description": "Doc comment must have an @param tag for every parameter",
        "fixable": False,
    },

    # Internationalization rules
    "WordPress.WP.I18n.MissingTextDomain": {
        "category": "i18n",
        "severity": "error",
        "description": "Translation function call is missing the text domain",
        "fixable": False,
    },
    "WordPress.WP.I18n.TextDomainMismatch": {
        "category": "i18n",
        "severity": "error",
        "description": "Text domain does not match the configured text domain",
        "fixable": False,
    },

    # Internal rules
    "Internal.Tokenizer.Exception": {
        "category": "internal",
        "severity": "error",
        "description": "The file could not be tokenized",
        "fixable": False,
    },
}

# Functions banned as a group share one sniff; each function gets its own code.
RESTRICTED_FUNCTION_GROUPS = {
    "WordPress.PHP.RestrictedPHPFunctions": {
        "category": "php",
        "severity": "error",
        "message": "{name}() is forbidden",
        "functions": ("eval", "create_function"),
    },
    "WordPress.PHP.DevelopmentFunctions": {
        "category": "php",
        "severity": "warning",
        "group": "error_log",
        "message": "{name}() found. Debug code should not normally be used in production",
        "functions": (
            "var_dump",
            "var_export",
            "print_r",
            "error_log",
            "debug_print_backtrace",
            "debug_zval_dump",
        ),
    },
    "WordPress.WP.DiscouragedFunctions": {
        "category": "php",
        "severity": "warning",
        "message": "{name}() is discouraged; use WP_Query or the main query instead",
        "functions": ("query_posts", "wp_reset_query"),
    },
    "WordPress.DB.RestrictedFunctions": {
        "category": "security",
        "severity": "error",
        "group": "mysql",
        "message": "Accessing the database directly with {name}() is not allowed; use $wpdb",
        "functions": (
            "mysql_query",
            "mysql_connect",
            "mysql_real_escape_string",
            "mysqli_query",
            "mysqli_connect",
            "mysqli_real_escape_string",
        ),
    },
}


def restricted_function_code(sniff: str, name: str) -> str:
    """Sniff code for a restricted function, e.g. ``...DevelopmentFunctions.error_log_var_dump``."""
    group = RESTRICTED_FUNCTION_GROUPS[sniff].get("group", name)
    return f"{sniff}.{group}_{name}"


def _register_function_groups():
    for sniff, spec in RESTRICTED_FUNCTION_GROUPS.items():
        for name in spec["functions"]:
            RULE_REGISTRY[restricted_function_code(sniff, name)] = {
                "category": spec["category"],
                "severity": spec["severity"],
                "description": spec["message"].format(name=name),
                "fixable": False,
            }


_register_function_groups()


def get_rule_info(rule_id: str) -> dict:
    """Get information about a specific rule."""
    return RULE_REGISTRY.get(rule_id, {
        "category": "unknown",
        "severity": "warning",
        "description": "No description available",
        "fixable": False,
    })


def list_rules() -> dict:
    """List all available rules."""
    return RULE_REGISTRY


def list_categories() -> list:
    """List the categories rules are grouped in."""
    return sorted({info["category"] for info in RULE_REGISTRY.values()})
