from __future__ import annotations

"""Group library definitions of a board by their ``name`` attribute."""

import logging
from typing import Dict, Union

from lxml import etree as ET  # type: ignore

from brd_fixer.core.exceptions import MalformedDocument
from brd_fixer.core.models import BrdFormat, LibraryGroup
from brd_fixer.core.report import RepairReport
from brd_fixer.core.xml_utils import find_all

__all__ = ["group_libraries", "count_packages"]

logger = logging.getLogger(__name__)


def group_libraries(
    document: Union[ET._Element, ET._ElementTree],
    fmt: BrdFormat,
    report: RepairReport,
) -> Dict[str, LibraryGroup]:
    """Return library groups keyed by name, in order of first appearance.

    Libraries are collected at any depth. Within a group the libraries keep
    document order, so the first entry is the one retained by a merge.

    Raises
    ------
    MalformedDocument
        If a library has no ``name`` attribute.
    """
    libraries = find_all(document, fmt.library_tag)
    report.original_library_count = len(libraries)

    report.add("Step 2: Analyzing libraries...")
    report.add("  Found %d total library definitions", len(libraries))

    groups: Dict[str, LibraryGroup] = {}
    for lib in libraries:
        name = lib.get(fmt.name_attr)
        if name is None:
            raise MalformedDocument(
                f"<{fmt.library_tag}> on line {lib.sourceline} has no '{fmt.name_attr}' attribute"
            )
        urn = lib.get(fmt.urn_attr) or fmt.no_urn_label
        groups.setdefault(name, LibraryGroup(name)).libraries.append(lib)
        report.add('  - "%s" [URN: %s]', name, urn)

    report.blank()
    logger.debug("Grouped %d libraries into %d names", len(libraries), len(groups))
    return groups


def count_packages(document: Union[ET._Element, ET._ElementTree], fmt: BrdFormat) -> int:
    """Count every package definition in the document."""
    return len(find_all(document, fmt.package_tag))
