"""Tests for configuration management"""

from c0diff.config import DiffConfig, LanguageConfig


class TestLanguageConfig:
    """Test LanguageConfig class"""

    def test_csharp_extensions(self):
        assert ".cs" in LanguageConfig.BRACE_LANGUAGES["csharp"]

    def test_get_all_extensions(self):
        extensions = LanguageConfig.get_all_extensions()
        assert {".cs", ".java", ".ts", ".go"} <= extensions
        assert ".py" not in extensions

    def test_detect_language(self):
        assert LanguageConfig.detect_language("src/Order.cs") == "csharp"
        assert LanguageConfig.detect_language("web/App.TSX") == "typescript"
        assert LanguageConfig.detect_language("src\\Legacy.java") == "java"
        assert LanguageConfig.detect_language("README.md") is None
        assert LanguageConfig.detect_language("Makefile") is None

    def test_is_supported(self):
        assert LanguageConfig.is_supported("lib/util.cpp")
        assert not LanguageConfig.is_supported("scripts/run.py")


class TestDiffConfig:
    """Test DiffConfig class"""

    def test_default_context_lines(self, monkeypatch):
        monkeypatch.delenv("C0DIFF_CONTEXT_LINES", raising=False)
        assert DiffConfig.get_context_lines() == 3

    def test_context_lines_override(self, monkeypatch):
        monkeypatch.setenv("C0DIFF_CONTEXT_LINES", "0")
        assert DiffConfig.get_context_lines() == 0

    def test_invalid_context_lines_fall_back(self, monkeypatch):
        monkeypatch.setenv("C0DIFF_CONTEXT_LINES", "lots")
        assert DiffConfig.get_context_lines() == 3

        monkeypatch.setenv("C0DIFF_CONTEXT_LINES", "-2")
        assert DiffConfig.get_context_lines() == 3

    def test_encoding(self, monkeypatch):
        monkeypatch.delenv("C0DIFF_ENCODING", raising=False)
        assert DiffConfig.get_encoding() == "utf-8"

        monkeypatch.setenv("C0DIFF_ENCODING", "cp1252")
        assert DiffConfig.get_encoding() == "cp1252"
