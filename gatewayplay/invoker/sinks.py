"""Output sinks standing in for the page's result element."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape

from gatewayplay.invoker.models import RenderedResult, ResultStyle

_STYLE_COLORS = {
    ResultStyle.SUCCESS: "green",
    ResultStyle.WARNING: "yellow",
    ResultStyle.DANGER: "red",
}


@runtime_checkable
class OutputSink(Protocol):
    def write(self, element_id: str, result: RenderedResult) -> None: ...


class MemorySink:
    """Keeps the current inner HTML per element id; every write replaces the previous one."""

    def __init__(self) -> None:
        self.elements: dict[str, str] = {}
        self.results: dict[str, RenderedResult] = {}
        self.history: list[tuple[str, RenderedResult]] = []

    def write(self, element_id: str, result: RenderedResult) -> None:
        self.elements[element_id] = result.html
        self.results[element_id] = result
        self.history.append((element_id, result))

    def html(self, element_id: str) -> str:
        return self.elements.get(element_id, "")


class ConsoleSink:
    """Prints outcomes to the terminal, coloured by style."""

    def __init__(self, console: Console | None = None, show_html: bool = False) -> None:
        self.console = console or Console()
        self.show_html = show_html

    def write(self, element_id: str, result: RenderedResult) -> None:
        color = _STYLE_COLORS.get(result.style, "white")
        body = result.html if self.show_html else result.text
        self.console.print(f"[{color}]#{escape(element_id)} ({result.style.value})[/{color}]")
        self.console.print(escape(body))
