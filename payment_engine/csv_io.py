"""
CSV Input/Output

Thin adapters between CSV text and the engine: rows in, client snapshots
out. Input columns are ``type,client,tx,amount``; whitespace around fields
is ignored and the amount column may be missing on referencing rows.
"""

import csv
from typing import Iterable, Iterator, List, TextIO

from .engine import ClientSnapshot
from .records import RecordFormatError, RowRecord
from .logging_config import get_logger

INPUT_COLUMNS = ["type", "client", "tx", "amount"]
OUTPUT_COLUMNS = ["client", "available", "held", "total", "locked"]

logger = get_logger("payment_engine.csv_io")


def _trim(fields: List[str]) -> List[str]:
    values = [value.strip() for value in fields]
    # Trailing empty cells past the amount column carry nothing
    while len(values) > len(INPUT_COLUMNS) and not values[-1]:
        values.pop()
    return values


def read_rows(stream: TextIO, strict: bool = False) -> Iterator[RowRecord]:
    """
    Yield raw rows from CSV text, in order
    
    Args:
        stream: Text stream positioned at the header row
        strict: Raise on rows with the wrong number of columns instead of skipping them
        
    Raises:
        RecordFormatError: If the header is missing or wrong, or (strict) a row
            has the wrong number of columns
    """
    reader = csv.reader(stream, skipinitialspace=True)
    header = None
    for line_number, fields in enumerate(reader, start=1):
        values = _trim(fields)
        if not any(values):
            continue
        
        if header is None:
            header = [value.lower() for value in values]
            if header not in (INPUT_COLUMNS, INPUT_COLUMNS[:3]):
                raise RecordFormatError(
                    f"Expected header {','.join(INPUT_COLUMNS)}, got {','.join(values)}"
                )
            continue
        
        if len(values) == 3:
            values.append("")
        if len(values) != len(INPUT_COLUMNS):
            message = f"Line {line_number}: expected {len(INPUT_COLUMNS)} columns, got {len(values)}"
            if strict:
                raise RecordFormatError(message)
            logger.warning(f"Skipping row. {message}")
            continue
        
        yield RowRecord(**dict(zip(INPUT_COLUMNS, values)))
    
    if header is None:
        raise RecordFormatError("Input has no header row")


def write_snapshots(snapshots: Iterable[ClientSnapshot], stream: TextIO) -> None:
    """Write one CSV line per client snapshot, header first"""
    writer = csv.DictWriter(stream, fieldnames=OUTPUT_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for snapshot in snapshots:
        writer.writerow(snapshot.to_dict())
