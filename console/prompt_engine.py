"""Render one argument prompt and read a validated response."""

from __future__ import annotations

from actions.schemas import ArgumentSchema
from common.reporting import Reporter
from config.defaults import DISPLAY_LIST
from console.prompting import LineProvider

INVALID_OPTION = "Invalid option"


def render_prompt(info: ArgumentSchema) -> tuple[str, list[str]]:
    """Return the prompt text and the accepted values (empty means anything)."""
    text = info.prompt
    accepted = info.accepted_values()
    if not accepted:
        return text, accepted
    if info.display_type == DISPLAY_LIST:
        text += "\n" + "\n".join(info.labels())
    else:
        text += " [" + "|".join(accepted) + "]"
    return text, accepted


class PromptEngine:
    def __init__(self, lines: LineProvider, reporter: Reporter) -> None:
        self._lines = lines
        self._reporter = reporter

    def ask(self, info: ArgumentSchema) -> str:
        text, accepted = render_prompt(info)
        # No retry limit: only a valid or empty answer ends the loop.
        while True:
            response = self._lines.read_line(f"{text} - ").strip()
            if info.select_by_index:
                response = _select_by_index(response, accepted)
            if response and accepted and response not in accepted:
                self._reporter(INVALID_OPTION)
                continue
            return response


def _select_by_index(response: str, accepted: list[str]) -> str:
    try:
        position = int(response)
    except ValueError:
        return response
    if 1 <= position <= len(accepted):
        return accepted[position - 1]
    return response
