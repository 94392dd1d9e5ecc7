"""Plain-text inventory report rendered with Jinja2.

One text block per record, preceded by a count header.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from jinja2 import Environment, PackageLoader

from ..core.errors import StoreIOError
from ..core.types import Product
from ..interfaces.store import RecordSource

logger = logging.getLogger(__name__)

REPORT_TEMPLATE = "report.txt.j2"


def get_jinja_env() -> Environment:
    return Environment(
        loader=PackageLoader("stockfile", "templates"),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


class ReportGenerator:
    """Render every record of a source into one text block each.

    Args:
        source: Anything providing count() and read_all()
        template_name: Template file under stockfile/templates
    """

    def __init__(self, source: RecordSource, template_name: str = REPORT_TEMPLATE):
        self.source = source
        self.template_name = template_name
        self.entries_written = 0

    def _records(self) -> Iterator[tuple[int, Product]]:
        self.entries_written = 0
        for index, product in enumerate(self.source.read_all()):
            self.entries_written = index + 1
            yield index, product

    def render(self) -> str:
        """Return the report text."""
        template = get_jinja_env().get_template(self.template_name)
        return template.render(count=self.source.count(), records=self._records())

    def generate(self, destination: str | Path) -> int:
        """Write the report to destination.

        The text is written to a sibling temp file first and moved into
        place, so a failed read never leaves a partial report.

        Returns:
            Number of entries written
        """
        destination = Path(destination)
        text = self.render()
        temp_path = destination.with_name(destination.name + ".part")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(temp_path, destination)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise StoreIOError(f"Writing report {destination} failed: {e}") from e
        logger.info(f"Wrote report with {self.entries_written} entries to {destination}")
        return self.entries_written
