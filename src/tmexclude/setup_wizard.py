"""Interactive creation of the configuration file (``timemachine-exclude init``)."""

import os
from typing import List, Optional

from tmexclude.config import ConfigStore, Configuration, defaults, normalize_root
from tmexclude.prompts import Prompter
from tmexclude.types import PathType


def _collect(prompter: Prompter, question: str) -> List[str]:
    """Ask ``question`` repeatedly until an empty answer."""
    answers: List[str] = []
    while True:
        answer = prompter.ask(question)
        if not answer:
            return answers
        answers.append(answer)


def prompt_for_roots(prompter: Prompter, home: Optional[PathType] = None) -> List[str]:
    prompter.say("Enter parent directories to search in.")
    prompter.say("Enter each directory path followed by [ENTER]. When done, enter an empty line.")

    roots: List[str] = []
    for answer in _collect(prompter, "Directory: "):
        root = normalize_root(answer, home)
        if os.path.isdir(root):
            roots.append(root)
        else:
            prompter.say(f"Directory does not exist: {root}. Skipping.")
    return roots


def prompt_for_patterns(prompter: Prompter) -> List[str]:
    prompter.say("")
    prompter.say("Enter directory names or patterns to exclude.")
    prompter.say("Enter each pattern followed by [ENTER]. When done, enter an empty line.")
    prompter.say("Example patterns: node_modules, dist, build, *.cache")
    return _collect(prompter, "Pattern: ")


def run_setup(
    prompter: Prompter,
    config_store: ConfigStore,
    home: Optional[PathType] = None,
) -> Optional[Configuration]:
    """Interactively build and save a configuration.

    An existing configuration is only replaced after the user confirms. When the user enters
    no roots or no patterns, the corresponding defaults are used instead.

    Args:
        prompter: Source of user input.
        config_store: Where the configuration is saved.
        home: Directory substituted for ``~``. Defaults to the current user's home.

    Returns:
        The saved configuration, or None if the user declined to overwrite an existing one.
    """
    if config_store.exists():
        if not prompter.confirm("Configuration already exists. Overwrite?", default=False):
            prompter.say("Initialization canceled.")
            return None

    prompter.say("Initializing timemachine-exclude...")
    roots = prompt_for_roots(prompter, home)
    patterns = prompt_for_patterns(prompter)

    fallback = defaults(home)
    config = Configuration(
        roots=tuple(roots) if roots else fallback.roots,
        patterns=tuple(patterns) if patterns else fallback.patterns,
    )
    config_store.save(config)
    prompter.say(f"Configuration saved to {config_store.path}")
    return config
