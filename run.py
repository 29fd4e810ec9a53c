# -*- coding: utf-8 -*-

"""
Main entry point for inspecting sprite sheet documents from a checkout.
"""

import sys

from atlas_toolkit.cli import main

if __name__ == '__main__':
    sys.exit(main())
