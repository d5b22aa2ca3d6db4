"""Shared test fixtures."""

from types import SimpleNamespace
from typing import List

import pytest


FOO_BAR_SOURCE = """public class Foo
{
    public int Bar(int x)
    {
        if (x > 0)
        {
            return 1;
        }
        return 0;
    }
}
"""


def _lines(text: str) -> List[str]:
    return text.split("\n")[:-1]


@pytest.fixture
def foo_bar_source():
    """Class Foo whose method Bar spans lines 3-10"""
    return FOO_BAR_SOURCE


@pytest.fixture
def foo_bar_lines(foo_bar_source):
    return _lines(foo_bar_source)


@pytest.fixture
def branchy_source():
    """A method exercising if / else if / else and switch constructs"""
    return """namespace Shop
{
    public class Order
    {
        public string Label(int kind, bool rush)
        {
            if (rush)
            {
                return "rush";
            }
            else if (kind > 3)
            {
                return "big";
            }
            else
            {
                return "small";
            }
        }

        public string Name(int kind)
        {
            switch (kind)
            {
                case 1:
                    return "one";
                case 2:
                default:
                    return "many";
            }
        }
    }
}
"""


class FakeGit:
    """Records git invocations and replays canned results in order"""

    def __init__(self):
        self.calls = []
        self.results = []

    def respond(self, stdout="", stderr="", returncode=0):
        self.results.append(
            SimpleNamespace(stdout=stdout, stderr=stderr, returncode=returncode)
        )

    def run(self, args, **kwargs):
        self.calls.append((args, kwargs))
        if self.results:
            return self.results.pop(0)
        return SimpleNamespace(stdout="", stderr="", returncode=0)


@pytest.fixture
def fake_git(monkeypatch):
    """Patch subprocess.run in the git helpers"""
    git = FakeGit()
    monkeypatch.setattr("c0diff.diff.extractor.subprocess.run", git.run)
    return git
