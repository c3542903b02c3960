# File: src/mstair/pp/__main__.py
"""
Entry point for `python -m mstair.pp`: runs the demonstration program.
"""

from __future__ import annotations

import sys

from mstair.pp.demo import main


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

# End of file: src/mstair/pp/__main__.py
