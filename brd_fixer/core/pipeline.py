from __future__ import annotations

"""Single-pass repair pipeline for boards with duplicated library names.

Stages run strictly in order::

    loaded -> grouped -> planned -> mutated -> repaired -> serialized

When grouping finds no duplicated name the pipeline jumps straight to
``serialized`` and hands back the input text untouched.

Examples
--------
Basic usage:

    result = fix_brd_content(Path("board.brd").read_text(encoding="utf-8"))
    if result.changed:
        Path("board_fixed.brd").write_text(result.fixed_content, encoding="utf-8")
    print("\\n".join(result.log))

"""

import logging
from enum import Enum
from typing import Optional, Union

from brd_fixer.core.grouping import count_packages, group_libraries
from brd_fixer.core.merge import apply_merge, plan_merges, select_duplicate_groups
from brd_fixer.core.models import BrdFormat, RepairResult
from brd_fixer.core.references import strip_reference_urns
from brd_fixer.core.report import RepairReport
from brd_fixer.core.xml_utils import (
    decode_board,
    ensure_xml_declaration,
    parse_board,
    serialize_board,
)

__all__ = ["PipelineStage", "BrdRepairPipeline", "fix_brd_content"]

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    NEW = "new"
    LOADED = "loaded"
    GROUPED = "grouped"
    PLANNED = "planned"
    MUTATED = "mutated"
    REPAIRED = "repaired"
    SERIALIZED = "serialized"


class BrdRepairPipeline:
    """Runs one repair pass over one board.

    An instance holds the state of a single pass and is not meant to be
    reused; :func:`fix_brd_content` creates a fresh one per call.
    """

    def __init__(self, fmt: Optional[BrdFormat] = None) -> None:
        self.fmt = fmt or BrdFormat()
        self.report = RepairReport()
        self.stage = PipelineStage.NEW

    def _advance(self, stage: PipelineStage) -> None:
        logger.debug("Pipeline stage: %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    def run(self, content: Union[str, bytes]) -> RepairResult:
        """Repair *content* and return the result record.

        Raises
        ------
        MalformedDocument
            If the content cannot be parsed or a library has no name.
        """
        fmt = self.fmt
        report = self.report

        text = decode_board(content)
        tree = parse_board(text)
        self._advance(PipelineStage.LOADED)
        report.add("Step 1: Parsed XML successfully")
        report.blank()

        groups = group_libraries(tree, fmt, report)
        self._advance(PipelineStage.GROUPED)

        duplicates = select_duplicate_groups(groups, report)
        if not duplicates:
            report.final_library_count = report.original_library_count
            report.total_packages = count_packages(tree, fmt)
            report.finish()
            self._advance(PipelineStage.SERIALIZED)
            logger.info("No duplicate libraries found; board left unchanged")
            return self._result(text)
        report.blank()

        plans = plan_merges(duplicates, fmt, report)
        self._advance(PipelineStage.PLANNED)

        for plan in plans:
            apply_merge(plan, fmt, report)
        report.final_library_count = report.original_library_count - sum(
            len(plan.discarded) for plan in plans
        )
        self._advance(PipelineStage.MUTATED)

        strip_reference_urns(tree, fmt, report)
        self._advance(PipelineStage.REPAIRED)

        fixed = ensure_xml_declaration(serialize_board(tree), fmt.xml_declaration)
        report.add("Step 6: Serialized fixed BRD file")
        report.finish()
        self._advance(PipelineStage.SERIALIZED)

        logger.info(
            "Merged %d library group(s): %d -> %d libraries, %d element(s) updated",
            report.libraries_merged,
            report.original_library_count,
            report.final_library_count,
            report.elements_updated,
        )
        return self._result(fixed)

    def _result(self, fixed_content: str) -> RepairResult:
        report = self.report
        return RepairResult(
            fixed_content=fixed_content,
            original_library_count=report.original_library_count,
            final_library_count=report.final_library_count,
            libraries_merged=report.libraries_merged,
            elements_updated=report.elements_updated,
            total_packages=report.total_packages,
            log=list(report.lines),
            stage=self.stage.value,
        )


def fix_brd_content(content: Union[str, bytes], fmt: Optional[BrdFormat] = None) -> RepairResult:
    """Merge same-named libraries in a board and drop stale URN references.

    Parameters
    ----------
    content
        Raw board text (``str``) or UTF-8 bytes.
    fmt
        Tag/attribute names; defaults to the EAGLE board layout.

    Returns
    -------
    RepairResult
        Repaired text, counters and the processing log. ``result.changed``
        is False when no library name was duplicated, in which case
        ``fixed_content`` is the input unchanged.
    """
    return BrdRepairPipeline(fmt).run(content)
