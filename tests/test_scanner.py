"""Tests for file discovery, checking and fixing on disk."""

from pathlib import Path

from wpcs_lint.core.config import Config
from wpcs_lint.scanner import check_paths, fix_paths, iter_files

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


def test_good_example_is_clean():
    results = check_paths([EXAMPLES / "good-plugin.php"], Config())

    assert results.files_checked == 1
    assert results.findings == []


def test_bad_example_findings():
    """Test that the bad example trips the main sniffs of every group."""
    results = check_paths([EXAMPLES / "Bad_Plugin.php"], Config())
    codes = {f.rule_id for f in results.findings}

    expected = {
        "WordPress.Files.FileName.NotHyphenatedLowercase",
        "Squiz.Commenting.FileComment.Missing",
        "Squiz.Commenting.FunctionComment.Missing",
        "WordPress.NamingConventions.ValidFunctionName.FunctionNameInvalid",
        "WordPress.NamingConventions.ValidVariableName.VariableNotSnakeCase",
        "WordPress.Security.NonceVerification.Missing",
        "WordPress.Security.NonceVerification.Recommended",
        "WordPress.Security.ValidatedSanitizedInput.InputNotSanitized",
        "WordPress.Security.EscapeOutput.OutputNotEscaped",
        "WordPress.Security.EscapeOutput.UnsafePrintingFunction",
        "WordPress.DB.PreparedSQL.InterpolatedNotPrepared",
        "WordPress.PHP.YodaConditions.NotYoda",
        "WordPress.PHP.StrictInArray.MissingTrueStrict",
        "WordPress.PHP.DontExtract.extract_extract",
        "WordPress.PHP.DevelopmentFunctions.error_log_error_log",
        "WordPress.PHP.DevelopmentFunctions.error_log_print_r",
        "WordPress.DateTime.RestrictedFunctions.date_date",
        "WordPress.WhiteSpace.ControlStructureSpacing.NoSpaceBeforeOpenParenthesis",
        "Generic.ControlStructures.InlineControlStructure.NotAllowed",
        "Generic.PHP.LowerCaseConstant.Found",
        "Generic.WhiteSpace.DisallowSpaceIndent.SpacesUsed",
        "PSR2.ControlStructures.ElseIfDeclaration.NotAllowed",
        "Universal.Arrays.DisallowShortArraySyntax.Found",
    }
    assert expected <= codes
    assert results.error_count > 0


def test_iter_files(tmp_path):
    """Test extension filtering and default/pattern excludes."""
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.php").write_text("<?php\n")
    (tmp_path / "src" / "notes.txt").write_text("notes")
    (tmp_path / "src" / "part.inc").write_text("<?php\n")
    (tmp_path / "vendor" / "lib").mkdir(parents=True)
    (tmp_path / "vendor" / "lib" / "dep.php").write_text("<?php\n")
    (tmp_path / "build").mkdir()
    (tmp_path / "build" / "out.php").write_text("<?php\n")

    found = list(iter_files([tmp_path], ["php"], ["*/build/*"]))
    assert found == [tmp_path / "src" / "main.php"]

    found = list(iter_files([tmp_path], ["php", "inc"], ["*/build/*"]))
    assert found == [tmp_path / "src" / "main.php", tmp_path / "src" / "part.inc"]


def test_explicit_file_always_scanned(tmp_path):
    target = tmp_path / "template.inc"
    target.write_text("<?php\n")

    assert list(iter_files([target], ["php"])) == [target]


def test_missing_path_skipped(tmp_path):
    assert list(iter_files([tmp_path / "nope.php"], ["php"])) == []


def test_undecodable_file_skipped(tmp_path):
    bad = tmp_path / "latin.php"
    bad.write_bytes(b"<?php\n$a = '\xff\xfe';\n")

    results = check_paths([tmp_path], Config())
    assert results.files_checked == 0


def test_tokenizer_error_reported(tmp_path):
    broken = tmp_path / "broken.php"
    broken.write_text("<?php\n$a = 'unterminated;\n")

    results = check_paths([broken], Config())
    assert [f.rule_id for f in results.findings] == ["Internal.Tokenizer.Exception"]
    assert results.findings[0].is_error


def test_max_errors_stops_early(tmp_path):
    for name in ("a.php", "b.php", "c.php"):
        (tmp_path / name).write_text("<?php\necho $a;\n")

    results = check_paths([tmp_path], Config(max_errors=1))
    assert results.files_checked == 1


def test_fix_paths_rewrites_files(tmp_path):
    target = tmp_path / "fixme.php"
    target.write_text("<?php\n$a = [ 1 ];\n")
    clean = tmp_path / "clean.php"
    clean.write_text("<?php\n$a = array( 1 );\n")

    results = fix_paths([tmp_path], Config())

    assert results.files_fixed == 1
    assert results.fixes_applied == 1
    assert target.read_text() == "<?php\n$a = array( 1 );\n"
    assert clean.read_text() == "<?php\n$a = array( 1 );\n"
