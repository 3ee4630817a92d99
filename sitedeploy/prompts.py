"""Interactive prompts for SiteDeploy."""

from __future__ import annotations

import questionary


class QuestionaryPrompter:
    """Prompter that asks on the terminal using questionary."""

    def confirm(self, message: str, default: bool = True) -> bool | None:
        # ask() returns None when the prompt is interrupted with ctrl-c
        return questionary.confirm(
            message,
            default=default,
            style=questionary_style(),
        ).ask()


def questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:yellow bold"),
            ("question", "fg:yellow"),
            ("answer", "fg:blue bold"),
        ]
    )
