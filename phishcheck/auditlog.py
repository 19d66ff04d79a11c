"""Append-only run log: one line per scored URL."""

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from .models import ScoreReport
from .utils import logger

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
ISSUE_SEPARATOR = ";"

def _one_line(text: str) -> str:
    return text.replace("\r", "\\r").replace("\n", "\\n")

def format_line(report: ScoreReport, when: datetime) -> str:
    stamp = when.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)
    issues = ISSUE_SEPARATOR.join(report.issues)
    return _one_line(
        f"{stamp} | {report.url} | score={report.total_score} | "
        f"risk={report.risk_level.label} | issues={issues}"
    ) + "\n"

class AuditLog:
    def __init__(self, log_file: Union[str, Path]):
        self.log_file = Path(log_file)

    @classmethod
    def from_config(cls, config) -> "AuditLog":
        return cls(config.log_file)

    def append(self, report: ScoreReport, when: Optional[datetime] = None) -> bool:
        """Append the summary line for ``report``; returns False if it could not be written."""
        # Undecodable argv bytes arrive as lone surrogates; keep them visible as \udcXX.
        line = format_line(report, when or datetime.now(timezone.utc)).encode("utf-8", "backslashreplace")
        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            # A single write on an O_APPEND descriptor keeps concurrent lines whole.
            fd = os.open(self.log_file, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o644)
            try:
                os.write(fd, line)
            finally:
                os.close(fd)
        except OSError as e:
            logger.warning(f"Unable to write log entry to {self.log_file}: {e}")
            return False
        return True
