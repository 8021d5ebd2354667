from __future__ import annotations

"""Processing log and counters accumulated during one repair pass.

Written to by the grouping, merge and reference steps; never read by them.
"""

import logging
from dataclasses import dataclass, field
from typing import List

__all__ = ["RepairReport"]

logger = logging.getLogger(__name__)

LOG_HEADER = "=== BRD Library Fixer - Processing Log ==="
LOG_FOOTER = "=== Processing Complete ==="


@dataclass
class RepairReport:
    """Mutable accumulator for one pass."""

    original_library_count: int = 0
    final_library_count: int = 0
    libraries_merged: int = 0
    elements_updated: int = 0
    total_packages: int = 0
    lines: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.lines:
            self.lines.append(LOG_HEADER)

    def add(self, message: str, *args: object) -> None:
        """Append one trace line (``%``-style formatting, like logging)."""
        line = message % args if args else message
        self.lines.append(line)
        logger.debug(line.strip() or "-")

    def blank(self) -> None:
        self.lines.append("")

    def finish(self) -> None:
        self.blank()
        self.lines.append(LOG_FOOTER)
