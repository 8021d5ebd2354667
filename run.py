# -*- coding: utf-8 -*-

"""
Main entry point for launching the BRD library fixer.
"""

import sys

from brd_fixer.cli import main

if __name__ == '__main__':
    sys.exit(main())
