from __future__ import annotations

"""High-level repair service for BRD board files.

Entry-point for any front-end (CLI, scripts, tests) that needs to repair a
board on disk. Reads the file, runs the in-memory pipeline with the configured
board format and writes the result next to the input.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from brd_fixer.core.exceptions import MalformedDocument
from brd_fixer.core.models import BrdFormat, RepairResult
from brd_fixer.core.pipeline import fix_brd_content

logger = logging.getLogger(__name__)

__all__ = ["RepairService"]


class RepairService:
    """Business-logic façade with zero UI dependencies."""

    def __init__(self, fmt: Optional[BrdFormat] = None) -> None:
        if fmt is None:
            # Imported lazily so that the core stays usable without PyYAML config files.
            from brd_fixer.config import ConfigManager

            fmt = BrdFormat.from_config(ConfigManager().get_brd_format())
        self.fmt = fmt
        self.logger = logger

    # ---------------------------------------------------------------------
    # PUBLIC API
    # ---------------------------------------------------------------------
    def repair_text(self, content: Union[str, bytes]) -> RepairResult:
        """Repair board text held in memory."""
        return fix_brd_content(content, self.fmt)

    def default_output_path(self, input_path: Union[str, Path]) -> Path:
        """Return ``<stem><suffix><ext>`` beside *input_path* (e.g. ``board_fixed.brd``)."""
        input_path = Path(input_path)
        return input_path.with_name(f"{input_path.stem}{self.fmt.output_suffix}{input_path.suffix}")

    def repair_file(
        self,
        input_path: Union[str, Path],
        output_path: Union[str, Path, None] = None,
        *,
        write_unchanged: bool = True,
    ) -> RepairResult:
        """Repair the board at *input_path* and write the result.

        Args:
            input_path: Board file to read.
            output_path: Destination; defaults to :meth:`default_output_path`.
            write_unchanged: When False, nothing is written if the board had
                no duplicated libraries.

        Returns:
            RepairResult for the processed board.

        Raises:
            FileNotFoundError: If *input_path* does not exist.
            ValueError: If *input_path* is not a file.
            MalformedDocument: If the board cannot be parsed.
        """
        input_path = Path(input_path)
        self.logger.info("Repair: reading board")
        self.logger.debug("Repairing board: %s", input_path)

        if not input_path.exists():
            raise FileNotFoundError(f"Input file not found: {input_path}")
        if not input_path.is_file():
            raise ValueError(f"Path is not a file: {input_path}")

        raw = input_path.read_bytes()
        try:
            result = fix_brd_content(raw, self.fmt)
        except MalformedDocument as e:
            self.logger.error("Board %s is malformed: %s", input_path, e)
            raise MalformedDocument(str(e), file_path=input_path, cause=e.cause) from e

        if not result.changed and not write_unchanged:
            self.logger.info("Board has no duplicate libraries; nothing written")
            return result

        target = Path(output_path) if output_path is not None else self.default_output_path(input_path)
        if result.changed:
            target.write_bytes(result.fixed_content.encode("utf-8"))
        else:
            # Passthrough keeps the exact input bytes.
            target.write_bytes(raw)
        self.logger.info("Repaired board written to %s", target)
        return result
