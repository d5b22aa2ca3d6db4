"""Configuration management for c0diff"""

import os
from pathlib import PurePosixPath
from typing import Optional, Set


class LanguageConfig:
    """Languages whose sources can be analysed with brace-depth tracking"""

    # Brace-delimited languages and their file extensions
    BRACE_LANGUAGES = {
        'csharp': ['.cs'],
        'java': ['.java'],
        'javascript': ['.js', '.jsx', '.mjs'],
        'typescript': ['.ts', '.tsx'],
        'c': ['.c', '.h'],
        'cpp': ['.cpp', '.cc', '.cxx', '.hpp', '.hh'],
        'go': ['.go'],
        'kotlin': ['.kt', '.kts'],
        'swift': ['.swift'],
        'rust': ['.rs'],
        'php': ['.php'],
        'scala': ['.scala'],
        'dart': ['.dart'],
    }

    @classmethod
    def get_all_extensions(cls) -> Set[str]:
        """Get all supported file extensions"""
        extensions = set()
        for exts in cls.BRACE_LANGUAGES.values():
            extensions.update(exts)
        return extensions

    @classmethod
    def detect_language(cls, file_path: str) -> Optional[str]:
        """
        Detect the language of a file from its extension.

        Args:
            file_path: Repository-relative path

        Returns:
            Language name, or None for unsupported files
        """
        ext = PurePosixPath(file_path.replace("\\", "/")).suffix.lower()
        for lang, extensions in cls.BRACE_LANGUAGES.items():
            if ext in extensions:
                return lang
        return None

    @classmethod
    def is_supported(cls, file_path: str) -> bool:
        """Check whether C0 cases can be generated for a file"""
        return cls.detect_language(file_path) is not None


class DiffConfig:
    """Configuration for fetching and decoding diffs"""

    # Context lines requested from git diff
    DEFAULT_CONTEXT_LINES = 3

    DEFAULT_ENCODING = "utf-8"

    @classmethod
    def get_context_lines(cls) -> int:
        """
        Get the number of diff context lines.

        Can be overridden via C0DIFF_CONTEXT_LINES environment variable.

        Returns:
            Number of context lines (default: 3)
        """
        try:
            value = int(os.getenv("C0DIFF_CONTEXT_LINES", cls.DEFAULT_CONTEXT_LINES))
        except ValueError:
            # If invalid value provided, return default
            return cls.DEFAULT_CONTEXT_LINES
        return value if value >= 0 else cls.DEFAULT_CONTEXT_LINES

    @classmethod
    def get_encoding(cls) -> str:
        """Get the encoding used to decode file contents (C0DIFF_ENCODING)"""
        return os.getenv("C0DIFF_ENCODING") or cls.DEFAULT_ENCODING
