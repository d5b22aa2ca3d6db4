"""Tests for the C-family line lexer"""

import pytest

from c0diff.coverage.lexer import LexMode, scan_line


class TestScanLine:
    @pytest.mark.parametrize(
        "line",
        [
            'var s = "{ \\" }";',
            "if (a) { // trailing }",
            "char c = '}'; /* { */ x();",
            'var p = @"C:\\dir\\";',
            "var t = `${a}`;",
            'end "\\',
        ],
    )
    def test_code_keeps_column_layout(self, line):
        assert len(scan_line(line).code) == len(line)

    def test_plain_code_is_unchanged(self):
        scanned = scan_line("if (x > 0) {")
        assert scanned.code == "if (x > 0) {"
        assert scanned.brace_delta == 1
        assert scanned.mode_after == LexMode.CODE

    def test_braces_in_strings_are_blanked(self):
        scanned = scan_line('var s = "{";')
        assert scanned.code == 'var s = " ";'
        assert scanned.brace_delta == 0

    def test_escaped_quote_stays_in_string(self):
        scanned = scan_line('var s = "a\\"{";')
        assert scanned.brace_delta == 0
        assert scanned.mode_after == LexMode.CODE

    def test_line_comment_ends_with_line(self):
        scanned = scan_line("x(); // }")
        assert scanned.code.rstrip() == "x();"
        assert scanned.mode_after == LexMode.CODE

    def test_block_comment_carries_over(self):
        first = scan_line("x(); /* {")
        assert first.mode_after == LexMode.BLOCK_COMMENT
        assert first.brace_delta == 0

        second = scan_line("} */ {", first.mode_after)
        assert second.code == "     {"
        assert second.brace_delta == 1
        assert second.mode_after == LexMode.CODE

    def test_unterminated_string_carries_over(self):
        scanned = scan_line('var s = "abc')
        assert scanned.mode_after == LexMode.STRING

    def test_verbatim_string_backslash_is_literal(self):
        """In @"..." a backslash does not escape; a doubled quote does"""
        scanned = scan_line('var p = @"C:\\dir\\"; {')
        assert scanned.mode_after == LexMode.CODE
        assert scanned.brace_delta == 1

        quoted = scan_line('var q = @"say ""{"" now";')
        assert quoted.brace_delta == 0
        assert quoted.mode_after == LexMode.CODE

    def test_interpolated_verbatim_prefix(self):
        scanned = scan_line('var p = $@"{path}\\";')
        assert scanned.brace_delta == 0
        assert scanned.mode_after == LexMode.CODE

    def test_raw_string_spans_lines(self):
        first = scan_line('var json = """')
        assert first.mode_after == LexMode.RAW_STRING

        middle = scan_line('{ "a": 1 }', first.mode_after)
        assert middle.brace_delta == 0
        assert middle.mode_after == LexMode.RAW_STRING

        last = scan_line('""";', middle.mode_after)
        assert last.mode_after == LexMode.CODE

    def test_template_string(self):
        scanned = scan_line("const s = `${a} {`;")
        assert scanned.brace_delta == 0
        assert scanned.mode_after == LexMode.CODE

    def test_char_literals(self):
        assert scan_line("if (c == '{') {").brace_delta == 1
        assert scan_line("if (c == '\\'') {").brace_delta == 1

    def test_unclosed_apostrophe_is_code(self):
        scanned = scan_line("it's {")
        assert scanned.brace_delta == 1
        assert scanned.mode_after == LexMode.CODE

    def test_directive_line(self):
        scanned = scan_line("    #region Helpers {")
        assert scanned.is_directive is True
        assert scanned.code.strip() == ""
        assert scanned.brace_delta == 0

    def test_hash_inside_block_comment_is_not_directive(self):
        scanned = scan_line("# not a directive */ {", LexMode.BLOCK_COMMENT)
        assert scanned.is_directive is False
        assert scanned.brace_delta == 1

    def test_trimmed_aligns_code_and_raw(self):
        code, raw = scan_line('    if (s == ")") // note').trimmed()
        assert code == 'if (s == " ")'
        assert raw.startswith('if (s == ")")')
