from __future__ import annotations

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

FILLER_CALLBACK = "empty"


class InlineKeyboardBuilder:
    """Collects inline buttons into rows of at most ``max_buttons_per_row``.

    ``add_row`` appends a closed row; the next ``add_button`` always starts a
    fresh one after it.
    """

    def __init__(self, max_buttons_per_row: int) -> None:
        if max_buttons_per_row < 1:
            raise ValueError("max_buttons_per_row must be positive")
        self.max_buttons_per_row = max_buttons_per_row
        self.rows: list[list[InlineKeyboardButton]] = []
        self._row_open = False

    def add_button(self, text: str, callback_data: str) -> None:
        if not self._row_open or len(self.rows[-1]) >= self.max_buttons_per_row:
            self.rows.append([])
            self._row_open = True
        self.rows[-1].append(InlineKeyboardButton(text, callback_data=callback_data))

    def add_row(self, *buttons: InlineKeyboardButton) -> None:
        self.rows.append(list(buttons))
        self._row_open = False

    def fill_last_row(self) -> None:
        """Pad the trailing row with inert buttons so the grid stays rectangular."""
        if not self.rows:
            return
        last = self.rows[-1]
        while len(last) < self.max_buttons_per_row:
            last.append(InlineKeyboardButton(" ", callback_data=FILLER_CALLBACK))

    def markup(self) -> InlineKeyboardMarkup | None:
        if not self.rows:
            return None
        return InlineKeyboardMarkup(self.rows)
