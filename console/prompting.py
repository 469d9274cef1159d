from collections import deque
from typing import Any, Iterable, Protocol

from InquirerPy.resolver import prompt


class LineProvider(Protocol):
    def read_line(self, message: str) -> str: ...


def ask_text(message: str, default: str = "") -> str:
    return str(
        prompt(
            [
                {
                    "type": "input",
                    "name": "value",
                    "message": message,
                    "default": default,
                }
            ]
        )["value"]
    )


class InquirerLineProvider:
    """Interactive terminal input."""

    def read_line(self, message: str) -> str:
        return ask_text(message)


class ScriptedLineProvider:
    """Canned responses for tests and non-interactive runs."""

    def __init__(self, responses: Iterable[Any]) -> None:
        self._responses = deque(str(item) for item in responses)
        self.prompts: list[str] = []

    def read_line(self, message: str) -> str:
        self.prompts.append(message)
        if not self._responses:
            raise EOFError(f"no scripted response left for prompt: {message}")
        return self._responses.popleft()
