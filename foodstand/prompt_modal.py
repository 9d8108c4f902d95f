"""Small text-entry and yes/no modal screens."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

_PROMPT_CSS = """
{name} {{
    align: center middle;
    background: $background 60%;
}}

.prompt-dialog {{
    width: 64;
    height: auto;
    border: round $secondary;
    background: $panel;
    padding: 1 2;
}}

.prompt-title {{
    text-style: bold;
    margin-bottom: 1;
    color: white;
}}

.prompt-value {{
    border: heavy $secondary;
    padding: 0 1;
    color: white;
    margin-bottom: 1;
}}

.prompt-help {{
    color: #dddddd;
}}
"""


class TextPromptModal(ModalScreen[str | None]):
    """Prompt for one line of free text. Dismisses with the text, or None on cancel."""

    CSS = _PROMPT_CSS.format(name="TextPromptModal")

    def __init__(self, title: str, initial: str = "", max_length: int = 120) -> None:
        super().__init__()
        self.title_text = title
        self.value = initial
        self.max_length = max_length

    def compose(self) -> ComposeResult:
        with Container(classes="prompt-dialog"):
            yield Static(self.title_text, classes="prompt-title")
            yield Static(id="prompt-value", classes="prompt-value")
            yield Static("Enter confirm. Backspace delete. Esc cancel.", classes="prompt-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        event.stop()
        if event.key == "escape":
            self.dismiss(None)
            return
        if event.key == "enter":
            self.dismiss(self.value)
            return
        if event.key == "backspace":
            self.value = self.value[:-1]
        elif event.is_printable and event.character and len(self.value) < self.max_length:
            self.value += event.character
        self._refresh_content()

    def _refresh_content(self) -> None:
        self.query_one("#prompt-value", Static).update(f"{self.value}|")


class ConfirmModal(ModalScreen[bool]):
    """Ask before a destructive action. Only ``y`` confirms."""

    CSS = _PROMPT_CSS.format(name="ConfirmModal")

    def __init__(self, question: str) -> None:
        super().__init__()
        self.question = question

    def compose(self) -> ComposeResult:
        with Container(classes="prompt-dialog"):
            yield Static(self.question, classes="prompt-title")
            yield Static("y confirm. n / Esc cancel.", classes="prompt-help")

    def on_key(self, event: Key) -> None:
        if event.character in {"y", "Y"}:
            self.dismiss(True)
        elif event.key in {"escape", "n", "N"}:
            self.dismiss(False)
        event.stop()
