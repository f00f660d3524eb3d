import sys
from pathlib import Path


# Ensure backend/src and the shared test helpers are importable so that
# imports like `services.*` and `helpers` work.
ROOT = Path(__file__).resolve().parent
for path in (ROOT / "src", ROOT / "tests"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))
