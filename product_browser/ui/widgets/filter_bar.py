"""
Per-column filter inputs, debounced into settled filter values
"""

from __future__ import annotations

from typing import Dict, Optional

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.timer import Timer
from textual.widgets import Input

from product_browser.models.product import COLUMNS

INPUT_PREFIX = "filter-"


class FilterBar(Horizontal):
    """
    One input per column. Keystrokes are debounced; only settled values are
    posted.
    """

    DEFAULT_CSS = """
    FilterBar {
        height: 3;
    }

    FilterBar > Input {
        width: 1fr;
        min-width: 8;
    }
    """

    class Changed(Message):
        """Settled filter values changed"""
        def __init__(self, filters: Dict[str, str]) -> None:
            super().__init__()
            self.filters = filters

    def __init__(
        self,
        *,
        debounce_ms: int = 300,
        id: Optional[str] = None,
        classes: Optional[str] = None,
    ) -> None:
        super().__init__(id=id, classes=classes)
        self._delay = max(0, debounce_ms) / 1000.0
        self._timer: Optional[Timer] = None
        self._settled: Dict[str, str] = {}

    def compose(self) -> ComposeResult:
        for key, label in COLUMNS:
            yield Input(placeholder=f"{label}...", id=f"{INPUT_PREFIX}{key}")

    @property
    def values(self) -> Dict[str, str]:
        """Current input values, settled or not"""
        return {
            (inp.id or "")[len(INPUT_PREFIX):]: inp.value
            for inp in self.query(Input)
        }

    def focus_first(self) -> None:
        self.query(Input).first().focus()

    def clear(self) -> None:
        """Empty every input and publish immediately"""
        for inp in self.query(Input):
            inp.value = ""
        self._settle()

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        if self._timer is not None:
            self._timer.stop()
        if self._delay == 0:
            self._settle()
        else:
            self._timer = self.set_timer(self._delay, self._settle)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter settles without waiting for the timer"""
        event.stop()
        if self._timer is not None:
            self._timer.stop()
        self._settle()

    def _settle(self) -> None:
        self._timer = None
        current = {k: v for k, v in self.values.items() if v}
        if current != self._settled:
            self._settled = current
            self.post_message(self.Changed(dict(current)))
