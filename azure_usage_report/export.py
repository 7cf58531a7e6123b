import os
import logging
from typing import Callable, List, Sequence

import pandas as pd
from openpyxl.utils import get_column_letter

from .config import BATCH_SIZE
from .models import Record


def reset_output_file(path: str) -> bool:
    """Deletes a workbook left over from a previous run. Returns True if one was removed."""
    logger = logging.getLogger()
    if os.path.exists(path):
        os.remove(path)
        logger.info(f"Removed existing output file '{path}'.")
        return True
    return False


def _auto_adjust_columns(worksheet, min_width: int = 10, max_width: int = 60):
    """Sizes each column to its longest value."""
    for column in worksheet.columns:
        max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        column_letter = get_column_letter(column[0].column)
        worksheet.column_dimensions[column_letter].width = min(max(max_length + 2, min_width), max_width)


def append_records(path: str, sheet_name: str, records: Sequence[Record]) -> int:
    """Appends records as rows to a worksheet, creating the workbook or sheet if needed.

    The header row is only written when the sheet is created. An empty batch
    does not touch the file. Returns the number of rows written.
    """
    if not records:
        return 0

    logger = logging.getLogger()
    columns = list(records[0].columns)
    df = pd.DataFrame([record.as_row() for record in records], columns=columns)

    if os.path.exists(path):
        writer_kwargs = {"mode": "a", "if_sheet_exists": "overlay"}
    else:
        writer_kwargs = {"mode": "w"}

    with pd.ExcelWriter(path, engine="openpyxl", **writer_kwargs) as writer:
        sheet_exists = sheet_name in writer.book.sheetnames
        startrow = writer.book[sheet_name].max_row if sheet_exists else 0
        df.to_excel(writer, sheet_name=sheet_name, index=False, header=not sheet_exists, startrow=startrow)

        worksheet = writer.book[sheet_name]
        _auto_adjust_columns(worksheet)
        worksheet.freeze_panes = "A2"

    logger.debug(f"Wrote {len(df)} row(s) to sheet '{sheet_name}' in '{path}'.")
    return len(df)


class RecordBatcher:
    """Buffers records for one sheet and flushes them every ``batch_size`` records."""

    def __init__(self, sheet_writer: Callable[[str, List[Record]], int], sheet_name: str, batch_size: int = BATCH_SIZE):
        self.sheet_writer = sheet_writer
        self.sheet_name = sheet_name
        self.batch_size = batch_size
        self.rows_written = 0
        self._buffer: List[Record] = []

    def __len__(self):
        return len(self._buffer)

    def add(self, record: Record):
        self._buffer.append(record)
        if len(self._buffer) >= self.batch_size:
            self.flush()

    def flush(self):
        if not self._buffer:
            return
        batch = self._buffer
        self.sheet_writer(self.sheet_name, batch)
        self.rows_written += len(batch)
        # Fresh list; the flushed one is handed off, not reused
        self._buffer = []
        logging.getLogger().info(f"Flushed {len(batch)} record(s) to '{self.sheet_name}'.")
