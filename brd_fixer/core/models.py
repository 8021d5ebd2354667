from __future__ import annotations

"""Shared data structures used across the BRD fixer core.

This module is intentionally free of UI / I/O code so that the contained
objects can be reused in any context (unit-tests, CLI, scripts, etc.).
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional

from lxml import etree as ET

__all__ = ["BrdFormat", "LibraryGroup", "MergePlan", "RepairResult"]


@dataclass(frozen=True)
class BrdFormat:
    """Tag and attribute names describing the board layout.

    Attributes
    ----------
    library_tag
        Container element grouping packages (``<library>``).
    packages_tag
        Wrapper element one level below a library holding its packages.
    package_tag
        Item element, keyed by its ``name`` attribute.
    element_tag
        Reference element pointing at a library/package pair.
    name_attr
        Key attribute on libraries and packages.
    urn_attr
        Secondary identifier on libraries.
    library_urn_attr
        Secondary identifier on references.
    no_urn_label
        Label used in the trace log for libraries without a URN.
    xml_declaration
        Declaration line guaranteed at the top of repaired output.
    output_suffix
        Suffix appended to the input file stem when writing repaired files.
    """

    library_tag: str = "library"
    packages_tag: str = "packages"
    package_tag: str = "package"
    element_tag: str = "element"
    name_attr: str = "name"
    urn_attr: str = "urn"
    library_urn_attr: str = "library_urn"
    no_urn_label: str = "(none)"
    xml_declaration: str = '<?xml version="1.0" encoding="utf-8"?>'
    output_suffix: str = "_fixed"

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> "BrdFormat":
        """Build a format from a config mapping, ignoring unknown keys."""
        if not config:
            return cls()
        known = {f.name for f in fields(cls)}
        values = {k: str(v) for k, v in config.items() if k in known and v is not None}
        return cls(**values)


@dataclass
class LibraryGroup:
    """All libraries sharing one ``name``, in document order."""

    name: str
    libraries: List[ET._Element] = field(default_factory=list)

    @property
    def needs_merge(self) -> bool:
        return len(self.libraries) > 1


@dataclass
class MergePlan:
    """Merge decision for one duplicated library name.

    ``packages`` keeps the position where a package name was first seen and
    the element from the last library that defined it.
    """

    name: str
    retained: ET._Element
    discarded: List[ET._Element] = field(default_factory=list)
    packages: Dict[str, ET._Element] = field(default_factory=dict)
    variant_counts: List[int] = field(default_factory=list)

    @property
    def unique_packages(self) -> int:
        return len(self.packages)


@dataclass(frozen=True)
class RepairResult:
    """Outcome of one repair pass.

    Attributes
    ----------
    fixed_content
        Repaired board text, or the untouched input when nothing changed.
    original_library_count
        Libraries present before merging.
    final_library_count
        Libraries remaining after merging.
    libraries_merged
        Number of duplicated library names that were consolidated.
    elements_updated
        Number of references whose ``library_urn`` was removed.
    total_packages
        Unique packages kept across merged groups; on the no-op path the
        number of packages in the board.
    log
        Ordered, human-readable trace of every decision.
    stage
        Last pipeline stage reached.
    """

    fixed_content: str
    original_library_count: int
    final_library_count: int
    libraries_merged: int
    elements_updated: int
    total_packages: int
    log: List[str] = field(default_factory=list)
    stage: str = "serialized"

    @property
    def changed(self) -> bool:
        """True when the board was mutated."""
        return self.libraries_merged > 0

    def summary(self) -> str:
        return (
            f"Libraries: {self.original_library_count} -> {self.final_library_count}, "
            f"groups merged: {self.libraries_merged}, "
            f"elements updated: {self.elements_updated}, "
            f"packages: {self.total_packages}"
        )
