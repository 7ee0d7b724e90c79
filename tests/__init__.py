"""Test package for auctiondesk."""

from __future__ import annotations

import sys
from pathlib import Path


# Lets ``pytest`` import auctiondesk from src/ without an editable install.
_SRC = Path(__file__).resolve().parents[1] / "src"
if _SRC.is_dir() and str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))
