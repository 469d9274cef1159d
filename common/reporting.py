"""Console output for dispatch banners, results, errors and help tables."""

from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence, TypeAlias

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from config.defaults import SEPARATOR_MAX_WIDTH

Reporter = Callable[[Any], None]
Renderable: TypeAlias = Any


class PanelPrinter(Protocol):
    def __call__(self, message: Renderable, title: str | None = None, style: str | None = None) -> None: ...


class TableBuilder(Protocol):
    def __call__(self, columns: Sequence[str], rows: Sequence[Sequence[str]], title: str | None = None) -> Renderable: ...


def echo_message(reporter: Reporter, message: str, *, separator: bool = False) -> None:
    """Report `message`, optionally underlined with a dashed separator."""
    if separator:
        message += "\n" + "-" * min(SEPARATOR_MAX_WIDTH, len(message))
    reporter(message)


def show_error(reporter: Reporter, paneler: PanelPrinter | None, message: str, title: str) -> None:
    if paneler is None:
        reporter(f"[{title}] {message}")
        return
    paneler(message, title, "red")


def render_table(
    table_builder: TableBuilder | None,
    *,
    title: str | None,
    columns: Sequence[str],
    rows: Sequence[Sequence[str]],
) -> Renderable:
    """Rich table when available, else a ` | ` separated text block."""
    if table_builder is not None:
        return table_builder(columns, rows, title=title)

    header = " | ".join(columns)
    lines = [title] if title else []
    lines += [header, "-" * len(header)]
    lines += [" | ".join(row) for row in rows]
    return "\n".join(lines)


def _plain_reporter(message: Any) -> None:
    print(message)


def _escaped(message: Renderable) -> Renderable:
    # Strings carrying closing tags are treated as intentional rich markup.
    if isinstance(message, str) and "[/" not in message:
        return escape(message)
    return message


def make_reporter(use_rich: bool = True) -> tuple[Reporter, PanelPrinter | None, TableBuilder | None]:
    if not use_rich:
        return _plain_reporter, None, None

    console = Console()

    def reporter(message: Any) -> None:
        console.print(_escaped(message), highlight=False)

    def panel(message: Renderable, title: str | None = None, style: str | None = None) -> None:
        console.print(Panel(_escaped(message), title=title, box=box.ROUNDED, style=style or ""))

    def table_builder(columns: Sequence[str], rows: Sequence[Sequence[str]], title: str | None = None) -> Renderable:
        table = Table(title=title, box=box.SIMPLE_HEAD, header_style="bold cyan")
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*row)
        return table

    return reporter, panel, table_builder
