"""Structured game logging with categories and verbosity control."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Optional, TextIO


@dataclass
class LogEntry:
    """A single log entry."""

    year: int
    category: str
    message: str
    data: dict = field(default_factory=dict)


class SimLogger:
    """Buffered logging, flushed once per simulated year."""

    # Category constants
    TURN = "TURN"
    EVENT = "EVENT"
    LEDGER = "LEDGER"
    MARKET = "MARKET"
    GRID = "GRID"
    TRADE = "TRADE"

    _VERBOSITY_MAP = {
        TURN: 0,
        EVENT: 0,
        LEDGER: 1,
        GRID: 2,
        TRADE: 2,
        MARKET: 3,
    }

    def __init__(
        self,
        verbosity: int = 1,
        log_file: Optional[str] = None,
        stdout: bool = True,
    ) -> None:
        """
        verbosity levels:
            0 = only turn outcomes and events
            1 = + year-end ledger stages
            2 = + placements, liquidations and trades
            3 = everything (market ticks)
        """
        self.verbosity = verbosity
        self._buffer: list[LogEntry] = []
        self._all_entries: list[LogEntry] = []
        self._file: Optional[TextIO] = None
        self._stdout = stdout

        if log_file:
            os.makedirs(os.path.dirname(log_file) if os.path.dirname(log_file) else ".", exist_ok=True)
            self._file = open(log_file, "w", encoding="utf-8")

    @property
    def entries(self) -> list[LogEntry]:
        return list(self._all_entries) + list(self._buffer)

    def log(self, category: str, message: str, year: int = 0, **data) -> None:
        """Log an entry."""
        self._buffer.append(LogEntry(year=year, category=category, message=message, data=data))

    def flush(self) -> None:
        """Write buffered entries allowed by the verbosity level."""
        for entry in self._buffer:
            required_verbosity = self._VERBOSITY_MAP.get(entry.category, 1)
            if required_verbosity <= self.verbosity:
                line = f"[Year {entry.year:>3}] [{entry.category:<6}] {entry.message}"
                if self._stdout:
                    print(line)
                if self._file:
                    self._file.write(line + "\n")

        self._all_entries.extend(self._buffer)
        self._buffer.clear()

        if self._file:
            self._file.flush()

    def get_narrative(self, year: int) -> str:
        """Generate a human-readable summary of a specific year."""
        year_entries = [e for e in self.entries if e.year == year]
        if not year_entries:
            return f"Year {year}: Nothing notable happened."

        lines = [f"=== Year {year} ==="]
        for entry in year_entries:
            lines.append(f"  [{entry.category}] {entry.message}")
        return "\n".join(lines)

    def export_json(self, filepath: str) -> None:
        """Export all log entries to JSON."""
        os.makedirs(os.path.dirname(filepath) if os.path.dirname(filepath) else ".", exist_ok=True)
        data = [
            {
                "year": e.year,
                "category": e.category,
                "message": e.message,
                "data": e.data,
            }
            for e in self.entries
        ]
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)

    def close(self) -> None:
        """Close the log file."""
        if self._file:
            self._file.close()
            self._file = None
