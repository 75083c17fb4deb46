"""
Response File Reader
Extracts feedback lines from the first column of a delimited file
"""

import csv
from pathlib import Path
from typing import Iterator, Union

import structlog

from shared.errors import InputReadError

logger = structlog.get_logger()


class ResponseReader:
    """
    Reads free-text responses from a CSV export.

    The first row is a header. For every following row the first cell is
    kept unless it is blank after trimming. Rows the csv module cannot parse,
    rows with a different field count than the header, and rows holding
    invalid UTF-8 are skipped rather than aborting the whole read.
    """

    def __init__(self, delimiter: str = ",", encoding: str = "utf-8-sig"):
        self.delimiter = delimiter
        self.encoding = encoding

    def read(self, path: Union[str, Path]) -> list[str]:
        """
        Read all non-blank first-column values.

        Args:
            path: Path to the delimited file

        Returns:
            Values in file order, untrimmed

        Raises:
            InputReadError: if the file cannot be opened
        """
        path = Path(path)
        try:
            # Undecodable bytes survive as surrogates so the row can be skipped alone
            with open(path, "r", encoding=self.encoding, errors="surrogateescape", newline="") as f:
                lines = list(self._first_column(f))
        except OSError as e:
            logger.error("Failed to read input file", path=str(path), error=str(e))
            raise InputReadError(f"cannot read {path}: {e}") from e

        logger.info("Loaded lines", path=str(path), count=len(lines))
        return lines

    def _first_column(self, f) -> Iterator[str]:
        reader = csv.reader(f, delimiter=self.delimiter, strict=True)
        header_seen = False
        header_width = None
        skipped = 0
        while True:
            try:
                row = next(reader)
            except StopIteration:
                break
            except csv.Error as e:
                header_seen = True
                skipped += 1
                logger.warning("Skipping malformed row", line=reader.line_num, error=str(e))
                continue

            if not header_seen:
                header_seen = True
                header_width = len(row)
                continue
            if not row:
                continue
            if header_width is not None and len(row) != header_width:
                skipped += 1
                logger.warning(
                    "Skipping malformed row",
                    line=reader.line_num,
                    error=f"expected {header_width} fields, got {len(row)}",
                )
                continue
            if not _is_valid_text(row):
                skipped += 1
                logger.warning("Skipping malformed row", line=reader.line_num, error="invalid UTF-8")
                continue

            value = row[0]
            if value.strip():
                yield value

        if skipped:
            logger.info("Malformed rows skipped", count=skipped)


def _is_valid_text(row: list[str]) -> bool:
    try:
        for cell in row:
            cell.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def extract_first_column(path: Union[str, Path], delimiter: str = ",") -> list[str]:
    """Convenience function to read non-blank first-column values"""
    return ResponseReader(delimiter=delimiter).read(path)
