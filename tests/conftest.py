"""Test configuration and fixtures for timemachine-exclude."""

from typing import Iterable, List

import pytest

from tmexclude.prompts import Prompter


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


class ScriptedPrompter(Prompter):
    """Prompter that replays canned answers and records everything it was asked or told."""

    def __init__(self, answers: Iterable[str] = (), confirmations: Iterable[bool] = ()) -> None:
        self.answers = list(answers)
        self.confirmations = list(confirmations)
        self.questions: List[str] = []
        self.messages: List[str] = []

    def ask(self, question: str) -> str:
        self.questions.append(question)
        # Running out of answers behaves like end-of-input
        return self.answers.pop(0) if self.answers else ""

    def confirm(self, question: str, default: bool = False) -> bool:
        self.questions.append(question)
        return self.confirmations.pop(0) if self.confirmations else default

    def say(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def scripted_prompter():
    """Factory for ScriptedPrompter instances."""
    return ScriptedPrompter


@pytest.fixture
def projects_tree(tmp_path):
    """Create the sample layout from the README: an app with dependencies, build output and sources."""
    root = tmp_path / "Projects"
    (root / "app" / "node_modules" / "left-pad").mkdir(parents=True)
    (root / "app" / "node_modules" / "left-pad" / "index.js").write_text("module.exports = {}\n")
    (root / "app" / "dist").mkdir()
    (root / "app" / "dist" / "bundle.js").write_text("console.log('built')\n")
    (root / "app" / "src").mkdir()
    (root / "app" / "src" / "index.js").write_text("console.log('hi')\n")
    return root
