from __future__ import annotations

"""Library merge helpers: plan the package union, then apply it in place.

This module manipulates only the in-memory lxml tree. It must not perform any
file I/O so that it can be reused by CLI, scripts and tests.
"""

import logging
from copy import deepcopy
from typing import Dict, Iterable, List

from lxml import etree as ET  # type: ignore

from brd_fixer.core.exceptions import MalformedDocument
from brd_fixer.core.models import BrdFormat, LibraryGroup, MergePlan
from brd_fixer.core.report import RepairReport
from brd_fixer.core.xml_utils import detach, find_all, remove_attribute

__all__ = [
    "select_duplicate_groups",
    "plan_merge",
    "plan_merges",
    "apply_merge",
]

logger = logging.getLogger(__name__)


def select_duplicate_groups(
    groups: Dict[str, LibraryGroup], report: RepairReport
) -> List[LibraryGroup]:
    """Return the groups holding more than one library, in first-seen order."""
    selected: List[LibraryGroup] = []
    for group in groups.values():
        if group.needs_merge:
            selected.append(group)
            report.add(
                'Step 3: Library "%s" has %d variants - NEEDS CONSOLIDATION',
                group.name,
                len(group.libraries),
            )
    if not selected:
        report.add("Step 3: No duplicate library names found - no consolidation needed")
    return selected


def _library_packages(lib: ET._Element, fmt: BrdFormat) -> List[ET._Element]:
    return find_all(lib, f".//{fmt.packages_tag}/{fmt.package_tag}")


def plan_merge(group: LibraryGroup, fmt: BrdFormat, report: RepairReport) -> MergePlan:
    """Compute the package union for one group without touching the tree.

    Libraries are visited in document order and their packages in document
    order. A package name seen again replaces the stored element but keeps
    the position of its first occurrence (last-write-wins on content).
    """
    plan = MergePlan(
        name=group.name,
        retained=group.libraries[0],
        discarded=list(group.libraries[1:]),
    )

    report.add('Step 4: Merging "%s" libraries...', group.name)
    for index, lib in enumerate(group.libraries, start=1):
        urn = lib.get(fmt.urn_attr) or fmt.no_urn_label
        packages = _library_packages(lib, fmt)
        plan.variant_counts.append(len(packages))
        report.add("  Variant %d [URN: %s]: %d package(s)", index, urn, len(packages))

        for pkg in packages:
            pkg_name = pkg.get(fmt.name_attr)
            if pkg_name is None:
                raise MalformedDocument(
                    f"<{fmt.package_tag}> on line {pkg.sourceline} in library "
                    f"'{group.name}' has no '{fmt.name_attr}' attribute"
                )
            if pkg_name in plan.packages:
                report.add("    - %s (overrides earlier definition)", pkg_name)
            else:
                report.add("    - %s", pkg_name)
            plan.packages[pkg_name] = pkg

    report.add("  Total unique packages: %d", plan.unique_packages)
    return plan


def plan_merges(
    groups: Iterable[LibraryGroup], fmt: BrdFormat, report: RepairReport
) -> List[MergePlan]:
    plans = [plan_merge(group, fmt, report) for group in groups if group.needs_merge]
    report.total_packages = sum(plan.unique_packages for plan in plans)
    return plans


def _packages_wrapper(lib: ET._Element, fmt: BrdFormat) -> ET._Element:
    wrapper = lib.find(f".//{fmt.packages_tag}")
    if wrapper is None:
        wrapper = ET.SubElement(lib, fmt.packages_tag)
    return wrapper


def apply_merge(plan: MergePlan, fmt: BrdFormat, report: RepairReport) -> None:
    """Rewrite the tree so that only the retained library remains.

    The retained library loses its URN attribute, its first packages wrapper
    is emptied and refilled with the planned packages in plan order, packages
    held by its other wrappers are removed, and every other variant is
    detached from the document.
    """
    keep = plan.retained
    remove_attribute(keep, fmt.urn_attr)

    # Copies are taken before the wrapper is emptied: the plan may point at
    # packages that live inside it.
    merged = [deepcopy(pkg) for pkg in plan.packages.values()]

    wrapper = _packages_wrapper(keep, fmt)
    for child in list(wrapper):
        wrapper.remove(child)
    for pkg in merged:
        wrapper.append(pkg)

    # Packages in any further wrapper were folded into the first one above.
    for extra in find_all(keep, f".//{fmt.packages_tag}"):
        if extra is wrapper or wrapper in extra.iterancestors():
            continue
        for pkg in extra.findall(fmt.package_tag):
            detach(pkg)
            report.add("  Moved %s into the first %s wrapper", pkg.get(fmt.name_attr), fmt.packages_tag)

    for index, lib in enumerate(plan.discarded, start=2):
        detach(lib)
        report.add("  Removed duplicate library variant %d", index)

    report.libraries_merged += 1
    report.blank()
    logger.debug(
        "Merged library '%s': kept 1 of %d, %d packages",
        plan.name,
        len(plan.discarded) + 1,
        plan.unique_packages,
    )
