"""Unit tests for the interactive menu and input helpers."""

import shutil
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from stockfile.cli.menu import InventoryMenu, format_product
from stockfile.cli.prompts import Prompter
from stockfile.core.errors import StoreIOError
from stockfile.core.store import FixedRecordStore
from stockfile.core.types import Product
from stockfile.interfaces.store import RecordStore


class Script:
    """Feeds scripted answers to a Prompter and records everything shown."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.lines = []

    def read(self, prompt):
        self.lines.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)

    def show(self, message):
        self.lines.append(message)

    @property
    def text(self):
        return "\n".join(self.lines)


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def store(temp_dir):
    store = FixedRecordStore.open_or_create(Path(temp_dir) / "inventory.dat", fsync_every_write=False)
    yield store
    store.close()


def run_menu(store, temp_dir, *answers):
    script = Script(*answers)
    menu = InventoryMenu(store, Prompter(script.read, script.show), Path(temp_dir) / "report.txt")
    menu.run()
    return script


def test_prompter_parsing():
    script = Script("  Hammer  ", "42", "abc", "19,90", "x")
    prompter = Prompter(script.read, script.show)
    assert prompter.text("Name: ") == "Hammer"
    assert prompter.integer("Code: ") == 42
    assert prompter.integer("Code: ") is None
    assert prompter.decimal("Price: ") == pytest.approx(19.9)
    assert prompter.decimal("Price: ") is None
    with pytest.raises(EOFError):
        prompter.text("More: ")


def test_register_and_count(store, temp_dir):
    script = run_menu(store, temp_dir, "1", "Hammer", "10", "19.5", "3", "0")
    assert store.read_at(0) == Product("Hammer", 10, 19.5)
    assert "Product registered at index 0." in script.text
    assert "Total records in file: 1" in script.text
    assert script.lines[-1] == "Exiting..."


def test_register_invalid_code(store, temp_dir):
    script = run_menu(store, temp_dir, "1", "Hammer", "ten", "0")
    assert store.count() == 0
    assert "Invalid input for code." in script.text


def test_register_invalid_price(store, temp_dir):
    script = run_menu(store, temp_dir, "1", "Hammer", "10", "cheap", "0")
    assert store.count() == 0
    assert "Invalid input for price." in script.text


def test_register_code_out_of_range(store, temp_dir):
    script = run_menu(store, temp_dir, "1", "Hammer", str(2**40), "1", "0")
    assert store.count() == 0
    assert "Invalid product" in script.text


def test_look_up(store, temp_dir):
    store.append(Product("Saw", 5, 25.0))
    script = run_menu(store, temp_dir, "2", "0", "0")
    assert "--- Record 0 ---" in script.text
    assert "Name : Saw" in script.text
    assert "Price: 25.00" in script.text


def test_look_up_empty_store(store, temp_dir):
    script = run_menu(store, temp_dir, "2", "0")
    assert "Store is empty. No records to look up." in script.text


def test_look_up_out_of_range(store, temp_dir):
    store.append(Product("Saw", 5, 25.0))
    script = run_menu(store, temp_dir, "2", "7", "0")
    assert "(0 .. 0)" in script.text
    assert "Index out of range." in script.text


def test_list_all(store, temp_dir):
    store.append(Product("Saw", 5, 25.0))
    store.append(Product("Nail", 6, 0.5))
    script = run_menu(store, temp_dir, "4", "0")
    assert "=== Listing all records (2) ===" in script.text
    assert format_product(1, Product("Nail", 6, 0.5)) in script.lines


def test_delete(store, temp_dir):
    for name in ("A", "B", "C"):
        store.append(Product(name, 1, 1.0))
    script = run_menu(store, temp_dir, "5", "1", "0")
    assert "Record 1 deleted." in script.text
    assert [p.name for p in store.read_all()] == ["A", "C"]


def test_delete_invalid_index(store, temp_dir):
    store.append(Product("A", 1, 1.0))
    script = run_menu(store, temp_dir, "5", "one", "0")
    assert "Invalid index." in script.text
    assert store.count() == 1


def test_generate_report(store, temp_dir):
    store.append(Product("Saw", 5, 25.0))
    script = run_menu(store, temp_dir, "6", "0")
    report = Path(temp_dir) / "report.txt"
    assert report.exists()
    assert "[0] Name: Saw" in report.read_text(encoding="utf-8")
    assert "Report with 1 records written" in script.text


def test_generate_report_empty_store(store, temp_dir):
    script = run_menu(store, temp_dir, "6", "0")
    assert "Nothing to report." in script.text
    assert not (Path(temp_dir) / "report.txt").exists()


def test_invalid_option(store, temp_dir):
    script = run_menu(store, temp_dir, "9", "x", "0")
    assert script.text.count("Invalid option.") == 2


def test_end_of_input_exits(store, temp_dir):
    """Running out of input ends the loop instead of raising."""
    run_menu(store, temp_dir, "1", "Hammer")
    assert store.count() == 0


def test_store_errors_are_reported_and_loop_continues(temp_dir):
    store = MagicMock()
    store.count.side_effect = [StoreIOError("disk gone"), 4]
    script = run_menu(store, temp_dir, "3", "3", "0")
    assert "Error: disk gone" in script.text
    assert "Total records in file: 4" in script.text


class ListStore:
    """In-memory RecordStore used to drive the menu without a file."""

    def __init__(self):
        self.products = []

    def count(self):
        return len(self.products)

    def read_all(self):
        yield from list(self.products)

    def append(self, product):
        self.products.append(product)
        return len(self.products) - 1

    def read_at(self, index):
        return self.products[index]

    def delete_at(self, index):
        del self.products[index]

    def close(self):
        pass


def test_file_store_satisfies_protocol(store):
    assert isinstance(store, RecordStore)


def test_menu_runs_over_any_record_store(temp_dir):
    """The menu depends only on the RecordStore operations."""
    store = ListStore()
    assert isinstance(store, RecordStore)

    script = run_menu(
        store, temp_dir,
        "1", "Saw", "5", "25", "1", "Nail", "6", "0.5", "5", "0", "6", "0",
    )

    assert store.products == [Product("Nail", 6, 0.5)]
    assert "Record 0 deleted." in script.text
    report = (Path(temp_dir) / "report.txt").read_text(encoding="utf-8")
    assert "[0] Name: Nail" in report
