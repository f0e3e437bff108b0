"""Injected collector for update notices and report lines.

Core functions never write to the console themselves; they hand everything
to a ReportSink. Tests read ``updates`` and ``lines`` directly, the CLI
passes a sink that also forwards to a logger.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from versioning.models import UpdateNotice


class ReportSink:
    """Records update notices and status lines, optionally logging them."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger
        self.updates: List[UpdateNotice] = []
        self.records: List[Tuple[int, str]] = []

    @property
    def lines(self) -> List[str]:
        """All emitted lines in order, regardless of level."""
        return [text for _, text in self.records]

    @property
    def warnings(self) -> List[str]:
        """Lines emitted at WARNING level or above."""
        return [text for level, text in self.records if level >= logging.WARNING]

    def emit(self, text: str, level: int = logging.INFO) -> None:
        """Record a status line and forward it to the logger, if any."""
        self.records.append((level, text))
        if self.logger is not None:
            self.logger.log(level, text)

    def warning(self, text: str) -> None:
        """Record an advisory line."""
        self.emit(text, logging.WARNING)

    def error(self, text: str) -> None:
        """Record a fatal-tier line."""
        self.emit(text, logging.ERROR)

    def notify_update(self, notice: UpdateNotice) -> None:
        """Record a rewritten dependency and emit its status line."""
        self.updates.append(notice)
        self.emit(f"Updated {notice.name}: {notice.old} -> {notice.new}")
