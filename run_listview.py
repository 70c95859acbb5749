#!/usr/bin/env python3
"""
ListView demo launcher.

Run this from the project root to start the demo window.
"""

import sys

if __name__ == '__main__':
    from listview.run_demo import main
    sys.exit(main())
