# src/ui/app.py

"""Terminal UI for the ConsulteJá barcode lookup."""

import asyncio
import logging
from typing import cast

from rich.table import Table
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Static,
)

from src.config.settings import Settings
from src.models.product import ProductRecord
from src.scanner.barcode_scanner import BarcodeScanner, ScannerError
from src.services.lookup_orchestrator import LookupOrchestrator
from src.storage.local_storage import LocalStorage
from src.storage.preferences import Preferences
from src.storage.search_history import SearchHistory

logger = logging.getLogger("consulteja.ui")

DARK_THEME = "textual-dark"
LIGHT_THEME = "textual-light"
COLOR_BLIND_CLASS = "color-blind-mode"

# Source badge colours; the second palette avoids red/green pairs
_SOURCE_STYLES: dict[str, str] = {
    "Barcode Lookup": "bold white on purple",
    "UPC Item DB": "bold white on dark_orange",
    "Open Food Facts": "bold white on green",
    "Cosmos": "bold white on blue",
}
_COLOR_BLIND_SOURCE_STYLES: dict[str, str] = {
    "Barcode Lookup": "bold black on bright_white",
    "UPC Item DB": "bold black on orange1",
    "Open Food Facts": "bold white on dodger_blue2",
    "Cosmos": "bold black on yellow",
}


class ConsulteJaApp(App[object]):
    """Terminal UI for the ConsulteJá barcode lookup."""

    CSS_PATH = "styles.tcss"
    TITLE = "ConsulteJá"
    SUB_TITLE = "Product lookup by barcode"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("d", "toggle_dark", "Theme"),
        Binding("b", "toggle_color_blind", "Colour-blind"),
        Binding("s", "scan", "Scan"),
        Binding("x", "clear_history", "Clear history"),
    ]

    def __init__(self, storage: LocalStorage | None = None) -> None:
        super().__init__()
        self.settings = Settings()
        self.storage = storage or LocalStorage()
        self.preferences = Preferences(self.storage)
        self.history = SearchHistory(self.storage)
        self.orchestrator = LookupOrchestrator(history=self.history)
        self.scanner = BarcodeScanner()
        self.product: ProductRecord | None = None
        self.loading: bool = False

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static(
                "📦 Quick product lookup: type or scan a barcode",
                id="title",
            ),

            # Search Bar
            Horizontal(
                Input(
                    placeholder="Enter the barcode",
                    id="barcode_input",
                ),
                Button("Search", variant="primary", id="search_btn"),
                Button("📷 Scan", id="scan_btn"),
                id="search_bar",
            ),

            Static("Ready", id="status"),
            Static("", id="result"),

            # History
            Horizontal(
                Static("Recent lookups", id="history_title"),
                Button(
                    "🗑️ Clear history",
                    variant="error",
                    id="clear_history_btn",
                ),
                id="history_bar",
            ),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="history_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Apply saved preferences and load the history table."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#history_table", DataTable),
        )
        table.add_columns("#", "Name", "Barcode", "Source")
        self._apply_theme()
        self._apply_color_blind()
        self.populate_history()

    # ── Preferences ─────────────────────────────────────

    def _apply_theme(self) -> None:
        self.theme = (
            DARK_THEME if self.preferences.dark_mode else LIGHT_THEME
        )

    def _apply_color_blind(self) -> None:
        self.screen.set_class(
            self.preferences.color_blind_mode, COLOR_BLIND_CLASS
        )
        if self.product is not None:
            self.show_product(self.product)

    def _storage_failed(self, what: str, exc: OSError) -> None:
        logger.error("Could not %s: %s", what, exc, exc_info=True)
        self.notify(f"Could not {what}: {exc}", severity="error")

    def action_toggle_dark(self) -> None:
        """Switch between dark and light theme and remember it."""
        try:
            self.preferences.toggle_dark_mode()
        except OSError as exc:
            self._storage_failed("save the theme", exc)
        self._apply_theme()

    def action_toggle_color_blind(self) -> None:
        """Switch colour-blind mode and remember it."""
        try:
            self.preferences.toggle_color_blind_mode()
        except OSError as exc:
            self._storage_failed("save colour-blind mode", exc)
        enabled = self.preferences.color_blind_mode
        self._apply_color_blind()
        self.notify(
            "Colour-blind mode on" if enabled else "Colour-blind mode off"
        )

    # ── Events ──────────────────────────────────────────

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "search_btn":
            await self.perform_search()
        elif event.button.id == "scan_btn":
            await self.action_scan()
        elif event.button.id == "clear_history_btn":
            self.action_clear_history()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter key in the barcode input."""
        if event.input.id == "barcode_input":
            await self.perform_search()

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Show a history entry without querying the providers again."""
        entries = self.history.entries
        if 0 <= event.cursor_row < len(entries):
            entry = entries[event.cursor_row]
            self.query_one("#barcode_input", Input).value = entry.barcode
            self.show_product(entry)

    # ── Lookup ──────────────────────────────────────────

    def _set_loading(self, loading: bool) -> None:
        self.loading = loading
        self.query_one("#search_btn", Button).disabled = loading
        self.query_one("#scan_btn", Button).disabled = loading

    async def perform_search(self, barcode: str | None = None) -> None:
        """Run the provider chain for the typed (or given) barcode."""
        search_input = self.query_one("#barcode_input", Input)
        code = (barcode if barcode is not None else search_input.value).strip()
        if not code:
            self.notify("Please enter a barcode", severity="warning")
            return
        if self.loading:
            return

        status = self.query_one("#status", Static)
        self.product = None
        self.query_one("#result", Static).update("")
        status.update(f"🔍 Searching '{code}'...")
        self._set_loading(True)
        try:
            result = await self.orchestrator.lookup(code)
        finally:
            self._set_loading(False)

        if result.product is None:
            status.update(f"❌ {result.message}")
            self.notify(result.message, severity="error")
            return

        self.show_product(result.product)
        self.populate_history()
        status.update(
            f"✅ Found via {result.product.source}"
        )
        if result.warning:
            self.notify(result.warning, severity="warning")

    async def action_scan(self) -> None:
        """Scan a barcode with the camera and search it."""
        if self.loading:
            return
        status = self.query_one("#status", Static)
        status.update("📷 Point a barcode at the camera...")
        self._set_loading(True)
        try:
            code = await asyncio.to_thread(self.scanner.scan)
        except ScannerError as exc:
            logger.error("Camera scan failed: %s", exc)
            status.update(f"❌ {exc}")
            self.notify(str(exc), severity="error")
            return
        finally:
            self._set_loading(False)

        if not code:
            status.update("No barcode detected")
            self.notify("No barcode detected", severity="warning")
            return

        self.query_one("#barcode_input", Input).value = code
        await self.perform_search(code)

    # ── Rendering ───────────────────────────────────────

    def _source_badge(self, source: str) -> Text:
        palette = (
            _COLOR_BLIND_SOURCE_STYLES
            if self.preferences.color_blind_mode
            else _SOURCE_STYLES
        )
        return Text(f" {source} ", style=palette.get(source, "bold reverse"))

    def show_product(self, product: ProductRecord) -> None:
        """Render ``product`` into the result panel."""
        self.product = product
        table = Table(
            title="Lookup result",
            show_header=False,
            expand=True,
            title_style="bold",
        )
        table.add_column("Field", style="bold", no_wrap=True)
        table.add_column("Value", overflow="fold")
        for label, value in product.details():
            if label == "Source":
                table.add_row(label, self._source_badge(value))
            else:
                table.add_row(label, value)
        if product.image:
            table.add_row("Image", product.image)
        else:
            table.add_row("Image", Text("no image", style="dim"))
        self.query_one("#result", Static).update(table)

    def populate_history(self) -> None:
        """Fill the history table from the stored entries."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#history_table", DataTable),
        )
        table.clear()
        for idx, entry in enumerate(self.history, 1):
            table.add_row(
                str(idx),
                entry.name[:60],
                entry.barcode,
                entry.source,
            )

    def action_clear_history(self) -> None:
        """Delete every history entry."""
        if not len(self.history):
            self.notify("History is already empty", severity="warning")
            return
        try:
            self.history.clear()
        except OSError as exc:
            self._storage_failed("clear the history", exc)
        else:
            self.notify("History cleared")
        self.populate_history()
