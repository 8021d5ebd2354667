"""Top-level package for the BRD library fixer.

Front-ends (CLI, scripts, tests) should only depend on the public API exposed
here rather than importing internal modules directly.
"""

from .core.exceptions import BrdFixerError, MalformedDocument
from .core.models import BrdFormat, RepairResult
from .core.pipeline import fix_brd_content

__all__: list[str] = [
    "BrdFixerError",
    "BrdFormat",
    "MalformedDocument",
    "RepairResult",
    "fix_brd_content",
]
