"""
Root-level pytest configuration for the loglane repository.

The library lives under ``packages/core`` rather than at the repository
root, so that directory is put on ``sys.path`` here; tests then import
``loglane_core`` the same way with or without an editable install.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure packages/core is importable
root = Path(__file__).parent
core_path = root / "packages" / "core"
if str(core_path) not in sys.path:
    sys.path.insert(0, str(core_path))
