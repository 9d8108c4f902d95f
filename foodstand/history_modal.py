"""History modal: previous days, filtered by date and payment status."""

from __future__ import annotations

from pathlib import Path

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from foodstand.aggregate import STATUS_ALL, query_history
from foodstand.config import EXPORT_DIR
from foodstand.constant import HISTORY_STATUS_FILTERS, HISTORY_STATUS_LABELS
from foodstand.exports import write_history_csv
from foodstand.ledger import Ledger
from foodstand.models import HistoryResult
from foodstand.rendering import format_order_row, format_totals


class HistoryModal(ModalScreen[None]):
    """Read-only view over every day except today."""

    CSS = """
    HistoryModal {
        align: center middle;
        background: $background 60%;
    }

    #history-dialog {
        width: 100;
        height: 90%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #history-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #history-filters {
        margin-bottom: 1;
    }

    #history-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #history-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    _PAGE_SIZE = 8

    def __init__(self, ledger: Ledger, export_dir: str | Path = EXPORT_DIR) -> None:
        super().__init__()
        self.ledger = ledger
        self.export_dir = export_dir
        self.status = STATUS_ALL
        self.date_filter = ""
        self.offset = 0
        self.message = ""

    def compose(self) -> ComposeResult:
        with Container(id="history-dialog"):
            yield Static("Historial", id="history-title")
            yield Static(id="history-totals")
            yield Static(id="history-filters")
            yield Static(id="history-list")
            yield Static(id="history-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def current_result(self) -> HistoryResult:
        date = self.date_filter if len(self.date_filter) == 10 else None
        return query_history(self.ledger.snapshot(), self.ledger.today_key(), date=date, status=self.status)

    def on_key(self, event: Key) -> None:
        event.stop()
        key = event.key
        if key in {"escape", "q"}:
            self.dismiss(None)
            return
        if key == "f":
            idx = HISTORY_STATUS_FILTERS.index(self.status)
            self.status = HISTORY_STATUS_FILTERS[(idx + 1) % len(HISTORY_STATUS_FILTERS)]
            self.offset = 0
        elif key == "c":
            self.date_filter = ""
            self.offset = 0
        elif key == "backspace":
            self.date_filter = self.date_filter[:-1]
            self.offset = 0
        elif key in {"j", "down"}:
            self.offset += 1
        elif key in {"k", "up"}:
            self.offset = max(0, self.offset - 1)
        elif key == "x":
            self._export(all_days=False)
        elif key == "a":
            self._export(all_days=True)
        elif event.character and (event.character.isdigit() or event.character == "-"):
            if len(self.date_filter) < 10:
                self.date_filter += event.character
                self.offset = 0
        self._refresh_content()

    def _export(self, all_days: bool) -> None:
        if all_days:
            result = query_history(self.ledger.snapshot(), self.ledger.today_key())
            filename = "historial_completo.csv"
        else:
            result = self.current_result()
            filename = "historial_filtrado.csv"
        try:
            path = write_history_csv(result.entries, filename, self.export_dir)
        except OSError as exc:
            self.message = f"Export failed: {exc}"
            return
        self.message = f"CSV: {path} ({result.count} pedidos)"

    def _refresh_content(self) -> None:
        result = self.current_result()
        self.offset = min(self.offset, max(0, result.count - 1))

        self.query_one("#history-totals", Static).update(
            format_totals(result.totals, title="Total (historial)")
        )

        filters = Text()
        for status in HISTORY_STATUS_FILTERS:
            style = "bold #ffffff on #2f6db5" if status == self.status else "dim"
            filters.append(f" {HISTORY_STATUS_LABELS[status]} ", style=style)
            filters.append(" ")
        filters.append(f"  Fecha: {self.date_filter or 'todas'}")
        filters.append(f"  Pedidos: {result.count}")
        self.query_one("#history-filters", Static).update(filters)

        lines = Text()
        if not result.entries:
            lines.append("Sin resultados para los filtros seleccionados.", style="dim")
        visible = result.entries[self.offset : self.offset + self._PAGE_SIZE]
        if self.offset > 0:
            lines.append("⋮\n", style="dim")
        for idx, entry in enumerate(visible):
            if idx > 0:
                lines.append("\n")
            lines.append_text(format_order_row(entry.order, day_key=entry.day_key))
        if self.offset + self._PAGE_SIZE < result.count:
            lines.append("\n⋮", style="dim")
        self.query_one("#history-list", Static).update(lines)

        help_text = "f status, type YYYY-MM-DD date, c clear date, j/k scroll, x CSV (view), a CSV (all), Esc close"
        if self.message:
            help_text = f"{self.message}\n{help_text}"
        self.query_one("#history-help", Static).update(help_text)
