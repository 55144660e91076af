"""Application-level tests (settings, entry point wiring).

Draft component tests live next to the code in ``modules/drafts/tests``.
Running this package directly (outside the configured ``pythonpath``) still
needs ``utils`` and ``modules`` importable, so the repository root is put on
``sys.path`` here.
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))
