"""pyfree - Textual watch view."""

from dataclasses import replace
from queue import Empty, Queue

from textual.app import App, ComposeResult
from textual.widgets import Footer, Static

from pyfree.models import Config, MemInfo, Unit
from pyfree.monitor import MemoryMonitor, StatsSource
from pyfree.report import render_table


def next_unit(unit: Unit) -> Unit:
    """Return the unit following ``unit``, wrapping from TiB back to bytes."""
    units = list(Unit)
    return units[(units.index(unit) + 1) % len(units)]


class MemoryTable(Static):
    """Widget showing the memory table for the latest snapshot."""

    DEFAULT_CSS = """
    MemoryTable {
        height: auto;
        padding: 1;
        background: $surface;
    }
    """

    def __init__(self, config: Config, **kwargs) -> None:
        """Initialize MemoryTable."""
        super().__init__("Loading memory info...", markup=False, **kwargs)
        self._config = config
        self._info: MemInfo | None = None
        self._text = "Loading memory info..."

    @property
    def config(self) -> Config:
        """Get the active display configuration."""
        return self._config

    @property
    def text(self) -> str:
        """Get the text currently displayed."""
        return self._text

    def set_config(self, config: Config) -> None:
        """Switch display mode and redraw."""
        self._config = config
        self._refresh_display()

    def update_info(self, info: MemInfo) -> None:
        """Show a new snapshot."""
        self._info = info
        self._refresh_display()

    def _refresh_display(self) -> None:
        """Redraw the table for the current snapshot and configuration."""
        if self._info is None:
            return
        self._text = render_table(self._info, self._config).rstrip("\n")
        self.update(self._text)


class FreeApp(App):
    """Main pyfree watch application."""

    TITLE = "pyfree"
    SUB_TITLE = "Memory Usage"

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("u", "cycle_unit", "Unit"),
        ("h", "toggle_human", "Human"),
    ]

    def __init__(
        self,
        config: Config,
        source: StatsSource,
        poll_rate: float = 2.0,
        initial: MemInfo | None = None,
    ) -> None:
        """
        Initialize the FreeApp.

        Args:
            config: Display configuration to start with.
            source: Where the raw statistics are read from.
            poll_rate: How often to poll (in seconds).
            initial: Snapshot shown until the first poll completes.
        """
        super().__init__()
        self._config = config
        self._initial = initial
        self._update_queue: Queue[MemInfo] = Queue()
        self._monitor = MemoryMonitor(self._update_queue, source, poll_rate=poll_rate)

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield MemoryTable(self._config, id="memory-table")
        yield Footer()

    def on_mount(self) -> None:
        """Start the memory monitor when the app is mounted."""
        if self._initial is not None:
            self.query_one(MemoryTable).update_info(self._initial)
        self._monitor.start()
        self.set_interval(0.5, self._check_for_updates)

    def _check_for_updates(self) -> None:
        """Show the most recent snapshot from the queue, if any."""
        snapshot = None
        while True:
            try:
                snapshot = self._update_queue.get_nowait()
            except Empty:
                break

        if snapshot is not None:
            self.query_one(MemoryTable).update_info(snapshot)

    def _set_config(self, config: Config) -> None:
        """Apply a new display configuration."""
        self._config = config
        self.query_one(MemoryTable).set_config(config)

    def action_cycle_unit(self) -> None:
        """Switch to the next fixed unit."""
        unit = self._config.unit if self._config.human else next_unit(self._config.unit)
        self._set_config(replace(self._config, unit=unit, human=False))
        self.notify(f"Unit: {unit.name}")

    def action_toggle_human(self) -> None:
        """Toggle the human-readable display."""
        self._set_config(replace(self._config, human=not self._config.human))

    def action_quit(self) -> None:
        """Handle quit action with graceful cleanup."""
        self._monitor.stop()
        self.exit()
