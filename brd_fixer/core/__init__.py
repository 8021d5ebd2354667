"""GUI-agnostic repair logic for BRD board files.

Nothing in this package performs file I/O; see :mod:`brd_fixer.core.services`
for the file-level entry point.
"""
