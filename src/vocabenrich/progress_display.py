"""
Rich-based live progress panel for enrichment runs.

Shows the scheduler's status snapshot (processed/total, current word,
run state, elapsed time, rate) and the tail of its event log, redrawn in
place without scrolling the terminal.
"""

import time
from typing import Dict, Optional, Sequence

from rich import box
from rich.console import Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from vocabenrich.enrich.scheduler import EventLevel, LogEvent, RunPhase, RunStatus

LEVEL_STYLES: Dict[EventLevel, str] = {
    EventLevel.INFO: "grey70",
    EventLevel.SUCCESS: "green",
    EventLevel.ERROR: "red",
}

PHASE_STYLES: Dict[RunPhase, str] = {
    RunPhase.IDLE: "grey50",
    RunPhase.RUNNING: "bright_cyan",
    RunPhase.PAUSED: "yellow",
    RunPhase.COMPLETED: "green",
    RunPhase.CANCELLED: "red",
}


class ProgressDisplay:
    """
    Context manager for displaying a live-updating run status.

    Usage:
        with ProgressDisplay("Enriching") as progress:
            while running:
                progress.refresh(scheduler.status(), scheduler.events)
    """

    def __init__(
        self,
        title: str = "Progress",
        refresh_per_second: int = 10,
        log_lines: int = 8,
    ):
        """
        Args:
            title: Title for the progress panel
            refresh_per_second: How many times per second to refresh the display
            log_lines: Number of recent log events shown under the metrics
        """
        self.title = title
        self.refresh_per_second = refresh_per_second
        self.log_lines = log_lines

        self.live: Optional[Live] = None
        self.start_time: float = 0
        self.status: Optional[RunStatus] = None
        self.events: Sequence[LogEvent] = ()

    def __enter__(self):
        """Start the live display."""
        self.start_time = time.time()
        self.live = Live(
            self._make_panel(),
            refresh_per_second=self.refresh_per_second
        )
        self.live.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Stop the live display."""
        if self.live:
            # Final update
            self.live.update(self._make_panel())
            self.live.__exit__(exc_type, exc_val, exc_tb)
        return False

    def refresh(self, status: RunStatus, events: Sequence[LogEvent] = ()):
        """Redraw with a new status snapshot and event log."""
        self.status = status
        self.events = events
        if self.live:
            self.live.update(self._make_panel())

    def _make_panel(self) -> Panel:
        """Create a Rich panel with the current status and recent events."""
        grid = Table.grid(padding=(0, 2))
        grid.add_column(justify="left", no_wrap=True)   # Label
        grid.add_column(justify="right", no_wrap=True)  # Value

        elapsed = time.time() - self.start_time if self.start_time else 0.0
        status = self.status

        if status is not None:
            percent = 100 * status.current / status.total if status.total else 0.0
            self._add_row(grid, "Words", f"{status.current:,} / {status.total:,} ({percent:.0f}%)")
            self._add_row(grid, "Current", status.current_headword or "-")
            self._add_row(grid, "State", status.state.value,
                          style=PHASE_STYLES.get(status.state, "bright_cyan"))
            if elapsed > 0:
                self._add_row(grid, "Rate", f"{status.current / elapsed:,.1f}/s")
        self._add_row(grid, "Elapsed", format_elapsed(elapsed))

        log = Text()
        for event in list(self.events)[-self.log_lines:]:
            log.append(event.message + "\n", style=LEVEL_STYLES.get(event.level, "grey70"))

        return Panel(
            Group(grid, log) if self.events else grid,
            title=self.title,
            box=box.SIMPLE,
            border_style="bright_black"
        )

    @staticmethod
    def _add_row(grid: Table, label: str, value: str, style: str = "bright_cyan"):
        grid.add_row(Text(f"{label}:", style="bold grey50"), Text(value, style=style))


def format_elapsed(seconds: float) -> str:
    """Format as HH:MM:SS or MM:SS."""
    if seconds >= 3600:
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        secs = int(seconds % 60)
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"
