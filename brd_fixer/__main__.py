"""Allow ``python -m brd_fixer board.brd``."""

import sys

from brd_fixer.cli import main

sys.exit(main())
