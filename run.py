# -*- coding: utf-8 -*-

"""
Main entry point for launching the Scribe Toolkit command line.
"""

from scribe_toolkit.cli import main

if __name__ == '__main__':
    main()
