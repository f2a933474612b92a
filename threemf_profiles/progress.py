"""Progress reporting for batch CLI runs."""

from __future__ import annotations

from typing import Protocol


class ProgressReporter(Protocol):
    """Protocol for batch progress reporting."""

    def update_status(self, message: str) -> None: ...
    def step(self, step_name: str, current: int, total: int) -> None: ...
    def warn(self, message: str) -> None: ...


class RichProgressReporter:
    """Rich-based reporter printing status lines and per-file steps."""

    def __init__(self) -> None:
        from rich.console import Console

        self.console = Console(stderr=True)

    def update_status(self, message: str) -> None:
        self.console.print(f"[bold blue]>>>[/] {message}")

    def step(self, step_name: str, current: int, total: int) -> None:
        self.console.print(f"  [dim]\\[{current}/{total}][/] {step_name}")

    def warn(self, message: str) -> None:
        self.console.print(f"  [yellow]![/] {message}")


class NullProgressReporter:
    """No-op reporter for --json mode or testing."""

    def update_status(self, message: str) -> None:
        pass

    def step(self, step_name: str, current: int, total: int) -> None:
        pass

    def warn(self, message: str) -> None:
        pass
