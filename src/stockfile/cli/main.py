# Command line entry point: interactive menu by default, or one-shot subcommands.
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from stockfile.components.report import ReportGenerator
from stockfile.core.config import StoreConfig, load_config
from stockfile.core.errors import ConfigError, StockFileError
from stockfile.core.store import FixedRecordStore
from stockfile.core.types import Product
from stockfile.interfaces.store import RecordStore
from stockfile.cli.menu import InventoryMenu, format_product, format_record_block
from stockfile.cli.prompts import Prompter

logger = logging.getLogger(__name__)


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Setup logging to stderr and, optionally, a file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s | %(levelname)s | %(message)s",
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="stockfile", description="Manage product records in a fixed-record binary file"
    )
    p.add_argument("--config", type=Path, help="TOML config file with a [stockfile] table")
    p.add_argument("--data", type=str, help="Backing data file (default: inventory.dat)")
    p.add_argument("--report", type=str, help="Report output file (default: report.txt)")
    p.add_argument("--log-level", type=str, help="Logging level (default: WARNING)")
    p.add_argument("--log-file", type=str, help="Also write logs to this file")

    sub = p.add_subparsers(dest="command")
    sub.add_parser("menu", help="Interactive menu (default)")

    add = sub.add_parser("add", help="Append a product")
    add.add_argument("name", type=str)
    add.add_argument("code", type=int)
    add.add_argument("price", type=float)

    get = sub.add_parser("get", help="Show the record at INDEX")
    get.add_argument("index", type=int)

    sub.add_parser("count", help="Print the number of records")
    sub.add_parser("list", help="List all records")

    delete = sub.add_parser("delete", help="Delete the record at INDEX")
    delete.add_argument("index", type=int)

    report = sub.add_parser("report", help="Write the text report")
    report.add_argument("--output", type=str, help="Override the report path")
    return p


def resolve_config(args: argparse.Namespace) -> StoreConfig:
    overrides = {
        "data_path": args.data,
        "report_path": args.report,
        "log_level": args.log_level,
        "log_file": args.log_file,
    }
    if args.config is not None:
        return load_config(args.config, **overrides)
    return StoreConfig(**{k: v for k, v in overrides.items() if v is not None})


def run_command(args: argparse.Namespace, store: RecordStore, config: StoreConfig) -> None:
    command = args.command or "menu"
    if command == "menu":
        InventoryMenu(store, Prompter(), config.report_path).run()
    elif command == "add":
        index = store.append(Product(name=args.name, code=args.code, price=args.price))
        print(f"Product registered at index {index}.")
    elif command == "get":
        print(format_record_block(args.index, store.read_at(args.index)))
    elif command == "count":
        print(store.count())
    elif command == "list":
        for index, product in enumerate(store.read_all()):
            print(format_product(index, product))
    elif command == "delete":
        store.delete_at(args.index)
        print(f"Record {args.index} deleted.")
    elif command == "report":
        destination = args.output or config.report_path
        written = ReportGenerator(store).generate(destination)
        print(f"Report with {written} records written to '{destination}'.")


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
    except ConfigError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 2

    setup_logging(config.log_level, config.log_file)

    try:
        with FixedRecordStore.from_config(config) as store:
            run_command(args, store, config)
    except ValueError as e:
        print(f"Invalid product: {e}", file=sys.stderr)
        return 2
    except StockFileError as e:
        logger.error(f"{args.command or 'menu'} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
