"""Interactive input helpers for the menu.

Returns already-trimmed text and already-parsed numbers; the store never
sees raw input.
"""

from __future__ import annotations

from typing import Callable


class Prompter:
    """Read and parse single lines of user input.

    Args:
        input_fn: Callable reading one line (default: builtin input)
        output: Callable printing one message (default: builtin print)

    EOFError from input_fn propagates so callers can stop cleanly.
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] | None = None,
        output: Callable[[str], None] | None = None,
    ):
        self._input = input_fn or input
        self.output = output or print

    def text(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def integer(self, prompt: str) -> int | None:
        """Parse an integer, or return None if the input is not one."""
        raw = self.text(prompt)
        try:
            return int(raw)
        except ValueError:
            return None

    def decimal(self, prompt: str) -> float | None:
        """Parse a number such as 19.90, or return None."""
        raw = self.text(prompt).replace(",", ".")
        try:
            return float(raw)
        except ValueError:
            return None

    def choice(self, prompt: str) -> int | None:
        return self.integer(prompt)
