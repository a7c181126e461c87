import sys
from pathlib import Path

# Ensure `craving_scout` and `testing` are importable when running pytest from the project root.
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
