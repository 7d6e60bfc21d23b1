import csv
import sys
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, TextIO

from . import config
from .models import FileRecord, FilterConfig


def human_size(size: int) -> str:
    """
    1023 -> '1023 B', 2048 -> '2.00 KB', 5 * 1024**2 -> '5.00 MB'.
    """
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit and exp < len(config.SIZE_UNITS) - 1:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.2f} {config.SIZE_UNITS[exp]}B"


def format_meta(meta: Optional[Dict[str, str]]) -> str:
    if not meta:
        return ""
    return ", ".join(f"{k}={v}" for k, v in sorted(meta.items()))


class TableReporter:
    """
    Renders FileRecords as a table: one row per record, one column per
    field enabled in the FilterConfig.
    """

    def columns(self, options: FilterConfig) -> List[str]:
        cols = ["#", "Name"]
        if options.compute_size:
            cols.append("Size")
        if options.compute_hash:
            cols.append("MD5")
        if options.compute_meta:
            cols.append("Meta")
        return cols

    def rows(self, records: Sequence[FileRecord], options: FilterConfig) -> List[List[str]]:
        rows = []
        for i, rec in enumerate(records, start=1):
            row = [str(i), rec.name]
            if options.compute_size:
                row.append(human_size(rec.size_bytes) if rec.size_bytes is not None else "")
            if options.compute_hash:
                row.append(rec.content_hash or "")
            if options.compute_meta:
                row.append(format_meta(rec.meta))
            rows.append(row)
        return rows

    def render(self, records: Sequence[FileRecord], options: FilterConfig, title: Optional[str] = None) -> str:
        header = self.columns(options)
        body = self.rows(records, options)

        widths = [len(h) for h in header]
        for row in body:
            for idx, cell in enumerate(row):
                widths[idx] = max(widths[idx], len(cell))

        sep = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

        def fmt(cells: List[str]) -> str:
            return "| " + " | ".join(c.ljust(w) for c, w in zip(cells, widths)) + " |"

        lines = []
        if title:
            lines.append(title)
        lines.extend([sep, fmt(header), sep])
        lines.extend(fmt(r) for r in body)
        lines.append(sep)
        return "\n".join(lines)

    def print_table(self,
                    records: Sequence[FileRecord],
                    options: FilterConfig,
                    title: Optional[str] = None,
                    stream: Optional[TextIO] = None):
        out = stream or sys.stdout
        out.write(self.render(records, options, title) + "\n")

    def write_csv(self, records: Sequence[FileRecord], options: FilterConfig, output_csv: Path):
        """Same columns as the console table, raw (unformatted) size in bytes."""
        header = self.columns(options)
        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(header)
            for i, rec in enumerate(records, start=1):
                row = [i, rec.name]
                if options.compute_size:
                    row.append(rec.size_bytes if rec.size_bytes is not None else "")
                if options.compute_hash:
                    row.append(rec.content_hash or "")
                if options.compute_meta:
                    row.append(format_meta(rec.meta))
                writer.writerow(row)
        logging.info(f"Wrote {len(records)} rows to {output_csv}")
