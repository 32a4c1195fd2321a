"""CSV output for extracted sections."""

from __future__ import annotations

import csv
from pathlib import Path
from types import TracebackType
from typing import IO, Any

from rfcsections.lib.errors import OutputError
from rfcsections.lib.logging_config import get_logger
from rfcsections.models.section import SECTION_FIELDS, Section

logger = get_logger(__name__)


class SectionCsvWriter:
    """Writes Section records to a CSV file.

    The header row is written when the file is opened. Rows use minimal
    quoting (fields containing the delimiter, a quote, or a line break are
    quoted, embedded quotes doubled) and "\\n" line endings.

    Example:
        >>> with SectionCsvWriter(Path("rfc5280.csv")) as writer:
        ...     writer.write(section)
    """

    def __init__(self, path: Path) -> None:
        """Initialize the writer without touching the filesystem.

        Args:
            path: Destination CSV path
        """
        self.path = Path(path)
        self.rows_written = 0
        self._file: IO[str] | None = None
        self._writer: Any = None

    def open(self) -> None:
        """Create the file and write the header row.

        Raises:
            OutputError: If the file cannot be created or written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.path, "w", encoding="utf-8", newline="")
            self._writer = csv.writer(self._file, lineterminator="\n")
            self._writer.writerow(SECTION_FIELDS)
        except (OSError, csv.Error) as e:
            self._discard()
            raise OutputError(str(self.path), str(e)) from e
        logger.debug(f"Opened {self.path} for writing")

    def write(self, section: Section) -> None:
        """Append one section row.

        Raises:
            OutputError: If the writer is not open or the write fails
        """
        if self._writer is None:
            raise OutputError(str(self.path), "writer is not open")
        try:
            self._writer.writerow(section.as_row())
        except (OSError, csv.Error) as e:
            raise OutputError(str(self.path), str(e)) from e
        self.rows_written += 1

    def close(self) -> None:
        """Flush and close the file. Safe to call more than once.

        Raises:
            OutputError: If flushing fails
        """
        if self._file is None:
            return
        try:
            self._file.flush()
        except OSError as e:
            raise OutputError(str(self.path), str(e)) from e
        finally:
            self._discard()
        logger.debug(f"Closed {self.path} after {self.rows_written} rows")

    def _discard(self) -> None:
        if self._file is not None:
            self._file.close()
        self._file = None
        self._writer = None

    def __enter__(self) -> SectionCsvWriter:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
