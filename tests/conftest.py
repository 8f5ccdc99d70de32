"""Make the in-tree ``sessionizer`` package and test helpers importable.

Running the ``pytest`` script directly may leave the checkout root off
``sys.path``; test modules also import ``fake_terminal`` from this folder.
"""

from __future__ import annotations

import sys
from pathlib import Path

TESTS_DIR = Path(__file__).resolve().parent

for path in (str(TESTS_DIR.parent), str(TESTS_DIR)):
    if path not in sys.path:
        sys.path.insert(0, path)
