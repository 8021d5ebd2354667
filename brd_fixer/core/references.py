from __future__ import annotations

"""Strip library URNs from element references after libraries are merged."""

import logging
from typing import Union

from lxml import etree as ET  # type: ignore

from brd_fixer.core.models import BrdFormat
from brd_fixer.core.report import RepairReport
from brd_fixer.core.xml_utils import find_all, remove_attribute

__all__ = ["strip_reference_urns"]

logger = logging.getLogger(__name__)


def strip_reference_urns(
    document: Union[ET._Element, ET._ElementTree],
    fmt: BrdFormat,
    report: RepairReport,
) -> int:
    """Remove ``library_urn`` from every element reference that carries one.

    ``library`` and ``package`` are left alone; whether the package still
    resolves in the merged library is up to the consumer.
    """
    report.add("Step 5: Updating element references...")
    updated = 0
    for el in find_all(document, fmt.element_tag):
        urn = el.get(fmt.library_urn_attr)
        if urn is None:
            continue
        remove_attribute(el, fmt.library_urn_attr)
        updated += 1
        report.add(
            "  %s: removed %s (was: %s)",
            el.get(fmt.name_attr, "?"),
            fmt.library_urn_attr,
            urn,
        )

    if updated == 0:
        report.add("  No elements had %s attributes", fmt.library_urn_attr)
    report.blank()

    report.elements_updated = updated
    logger.debug("Removed %s from %d element(s)", fmt.library_urn_attr, updated)
    return updated
