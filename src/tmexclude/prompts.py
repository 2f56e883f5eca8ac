"""Input providers for interactive setup.

Setup talks to the user only through a Prompter, so the setup flow can be driven by a real
terminal or by a scripted sequence of answers.
"""

from abc import ABC, abstractmethod

from humanfriendly.prompts import prompt_for_confirmation, prompt_for_input


class Prompter(ABC):
    """Interface for asking the user questions during setup."""

    @abstractmethod
    def ask(self, question: str) -> str:
        """Block until the user answers ``question``.

        Returns:
            The answer with surrounding whitespace removed; an empty string signals the end
            of a list of answers, as does end-of-input.
        """
        pass

    @abstractmethod
    def confirm(self, question: str, default: bool = False) -> bool:
        """Ask a yes/no question, returning ``default`` when the user just presses enter."""
        pass

    def say(self, message: str) -> None:
        """Show an informational message to the user."""
        print(message)


class TerminalPrompter(Prompter):
    """Prompter reading answers from the controlling terminal."""

    def ask(self, question: str) -> str:
        return str(prompt_for_input(question, default="", padding=False))

    def confirm(self, question: str, default: bool = False) -> bool:
        return bool(prompt_for_confirmation(question, default=default, padding=False))
