"""Tests for branch construct detection"""

import logging

import pytest

from c0diff.coverage.branches import (
    BranchHeader,
    BranchKind,
    changed_methods,
    extract_branches,
    extract_condition,
    find_branch,
    match_branch,
)
from c0diff.coverage.lexer import scan_line
from c0diff.coverage.scope import ScopeEntry, extract_scopes


def _branches(source: str, changed):
    lines = source.split("\n")
    return list(extract_branches(lines, extract_scopes(lines), changed))


class TestMatchBranch:
    @pytest.mark.parametrize(
        "line, kind, condition",
        [
            ("if (x > 0)", BranchKind.IF, "if (x > 0)"),
            ("if(ready) {", BranchKind.IF, "if (ready)"),
            ("else if (y)", BranchKind.ELSE_IF, "else if (y)"),
            ("else", BranchKind.ELSE, "else"),
            ("else {", BranchKind.ELSE, "else"),
            ("switch (mode)", BranchKind.SWITCH, "switch (mode)"),
            ("case Color.Red:", BranchKind.CASE, "case Color.Red:"),
            ("case 1: return x;", BranchKind.CASE, "case 1:"),
            ("default:", BranchKind.DEFAULT, "default:"),
        ],
    )
    def test_recognised_headers(self, line, kind, condition):
        assert match_branch(line, line) == BranchHeader(kind, condition)

    @pytest.mark.parametrize(
        "line",
        ["} else {", "elsewhere();", "ifReady(x);", "return x;", "var cases = 2;", ""],
    )
    def test_other_lines(self, line):
        assert match_branch(line, line) is None

    def test_nested_parentheses(self):
        line = "if (Check(a) && (b || c)) {"
        assert match_branch(line, line).condition == "if (Check(a) && (b || c))"

    def test_parenthesis_inside_string(self):
        code = 'if (s == " ")'
        raw = 'if (s == ")")'
        assert match_branch(code, raw).condition == 'if (s == ")")'

    def test_case_label_with_colon_in_string(self):
        code = 'case "   ":'
        raw = 'case "a:b":'
        assert match_branch(code, raw).condition == 'case "a:b":'

    @pytest.mark.parametrize(
        "line, placeholder",
        [
            ("if (a &&", "if (...)"),
            ("else if (b ||", "else if (...)"),
            ("switch (Pick(", "switch (...)"),
        ],
    )
    def test_unbalanced_parenthesis_falls_back(self, line, placeholder, caplog):
        with caplog.at_level(logging.DEBUG, logger="c0diff.coverage.branches"):
            header = match_branch(line, line)
        assert header.condition == placeholder
        assert "Unbalanced parenthesis" in caplog.text

    def test_extract_condition(self):
        line = "if (a(b)) x();"
        assert extract_condition(line, line, 4) == "a(b)"
        assert extract_condition("if (a(b", "if (a(b", 4) is None


class TestChangedMethods:
    def test_only_named_methods_count(self):
        scopes = [
            ScopeEntry(None, None),
            ScopeEntry("C", None),
            ScopeEntry("C", "M"),
            ScopeEntry("C", "N"),
        ]
        assert changed_methods(scopes, [1, 2, 3, 99]) == {("C", "M")}


class TestExtractBranches:
    def test_branch_records_position(self, branchy_source):
        (branch,) = _branches(branchy_source, [9])

        assert branch.kind == BranchKind.IF
        assert branch.class_name == "Order"
        assert branch.method_name == "Label"
        assert branch.start_line == 7
        assert branch.brace_depth == 3

    def test_changed_header_is_reported_once(self, branchy_source):
        branches = _branches(branchy_source, [11, 13])
        assert [b.condition for b in branches] == ["else if (kind > 3)"]

    def test_untouched_siblings_are_skipped(self, branchy_source):
        branches = _branches(branchy_source, [17])
        assert [b.kind for b in branches] == [BranchKind.ELSE]

    def test_unchanged_methods_are_not_inspected(self, branchy_source):
        assert all(b.method_name == "Name" for b in _branches(branchy_source, [29]))

    def test_no_changed_lines(self, branchy_source):
        assert _branches(branchy_source, []) == []

    def test_changes_outside_methods(self, branchy_source):
        assert _branches(branchy_source, [1, 3, 20]) == []

    def test_brace_less_body_closes_with_enclosing_block(self):
        source = "\n".join(
            [
                "class C",
                "{",
                "    void M()",
                "    {",
                "        if (a)",
                "            Go();",
                "    }",
                "}",
            ]
        )
        (branch,) = _branches(source, [6])
        assert branch.condition == "if (a)"

    def test_unclosed_branch_is_flushed_at_end_of_file(self):
        source = "\n".join(
            [
                "class C",
                "{",
                "    void M()",
                "    {",
                "        if (a)",
                "        {",
                "            Go();",
            ]
        )
        (branch,) = _branches(source, [7])
        assert branch.condition == "if (a)"

    def test_commented_out_branch_is_ignored(self):
        source = "\n".join(
            [
                "class C",
                "{",
                "    void M()",
                "    {",
                "        // if (legacy)",
                "        Go();",
                "    }",
                "}",
            ]
        )
        assert _branches(source, [5, 6]) == []


class TestFindBranch:
    def test_line_start_wins(self):
        header, nesting = find_branch(scan_line("    if (x > 0) { return 1; } else { return 0; }"))
        assert header == BranchHeader(BranchKind.IF, "if (x > 0)")
        assert nesting == 0

    def test_header_after_opening_brace(self):
        header, nesting = find_branch(scan_line('    int F(int x) { if (x > "{") { return 1; } return 0; }'))
        assert header == BranchHeader(BranchKind.IF, 'if (x > "{")')
        assert nesting == 1

    def test_no_header(self):
        assert find_branch(scan_line("    int One() { return 1; }")) is None
        assert find_branch(scan_line("    Go();")) is None
