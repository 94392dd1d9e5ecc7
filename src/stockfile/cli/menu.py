"""Interactive menu translating user choices into store calls."""

from __future__ import annotations

import logging
from pathlib import Path

from ..components.codec import NAME_CAPACITY
from ..components.report import ReportGenerator
from ..core.errors import StockFileError
from ..core.types import Product
from ..interfaces.store import RecordStore
from .prompts import Prompter

logger = logging.getLogger(__name__)

MENU_TEXT = """
=== Inventory Manager ===
1 - Register product
2 - Look up by index
3 - Show number of records
4 - List all
5 - Delete by index
6 - Generate report
0 - Quit"""


def format_product(index: int, product: Product) -> str:
    return f"[{index}] Name: {product.name} | Code: {product.code} | Price: {product.price:.2f}"


def format_record_block(index: int, product: Product) -> str:
    return "\n".join(
        [
            f"--- Record {index} ---",
            f"Name : {product.name}",
            f"Code : {product.code}",
            f"Price: {product.price:.2f}",
            "-------------------",
        ]
    )


class InventoryMenu:
    """Menu loop over any RecordStore.

    Args:
        store: Open record store
        prompter: Source of parsed user input
        report_path: Where option 6 writes the report
    """

    def __init__(self, store: RecordStore, prompter: Prompter, report_path: str | Path):
        self.store = store
        self.prompter = prompter
        self.report_path = Path(report_path)
        self.say = prompter.output
        self._actions = {
            1: self.register,
            2: self.look_up,
            3: self.show_count,
            4: self.list_all,
            5: self.delete,
            6: self.generate_report,
        }

    def run(self) -> None:
        """Loop until the user picks 0 or input ends."""
        while True:
            self.say(MENU_TEXT)
            try:
                choice = self.prompter.choice("Choice: ")
            except EOFError:
                self.say("")
                break
            if choice == 0:
                self.say("Exiting...")
                break
            action = self._actions.get(choice)
            if action is None:
                self.say("Invalid option.")
                continue
            try:
                action()
            except EOFError:
                break
            except StockFileError as e:
                logger.error(f"Menu option {choice} failed: {e}")
                self.say(f"Error: {e}")

    def register(self) -> None:
        name = self.prompter.text(f"Product name (max {NAME_CAPACITY} chars): ")
        code = self.prompter.integer("Code (integer): ")
        if code is None:
            self.say("Invalid input for code.")
            return
        price = self.prompter.decimal("Price (e.g. 19.90): ")
        if price is None:
            self.say("Invalid input for price.")
            return
        try:
            index = self.store.append(Product(name=name, code=code, price=price))
        except ValueError as e:
            self.say(f"Invalid product: {e}")
            return
        self.say(f"Product registered at index {index}.")

    def _ask_index(self, verb: str) -> int | None:
        """Ask for an index within the current range, or return None."""
        total = self.store.count()
        if total == 0:
            self.say("Store is empty. No records to " + verb + ".")
            return None
        index = self.prompter.integer(
            f"There are {total} records. Enter the index to {verb} (0 .. {total - 1}): "
        )
        if index is None:
            self.say("Invalid index.")
            return None
        if not 0 <= index < total:
            self.say("Index out of range.")
            return None
        return index

    def look_up(self) -> None:
        index = self._ask_index("look up")
        if index is None:
            return
        self.say(format_record_block(index, self.store.read_at(index)))

    def show_count(self) -> None:
        self.say(f"Total records in file: {self.store.count()}")

    def list_all(self) -> None:
        total = self.store.count()
        if total == 0:
            self.say("Store is empty.")
            return
        self.say(f"=== Listing all records ({total}) ===")
        for index, product in enumerate(self.store.read_all()):
            self.say(format_product(index, product))
        self.say("=" * 41)

    def delete(self) -> None:
        index = self._ask_index("delete")
        if index is None:
            return
        self.store.delete_at(index)
        self.say(f"Record {index} deleted.")

    def generate_report(self) -> None:
        if self.store.count() == 0:
            self.say("Store is empty. Nothing to report.")
            return
        written = ReportGenerator(self.store).generate(self.report_path)
        self.say(f"Report with {written} records written to '{self.report_path}'.")
