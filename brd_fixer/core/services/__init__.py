from __future__ import annotations

"""High-level orchestration services (file repair, output naming)."""

from .repair_service import RepairService  # noqa: F401

__all__: list[str] = [
    "RepairService",
]
