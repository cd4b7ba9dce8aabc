import os
import sys
from pathlib import Path

# Ensure repo root on sys.path for imports from anywhere in tests tree.
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Tests assume the shipped defaults unless they set these explicitly.
for _name in ("STAGE_JSON_INDENT", "STAGE_DECODE_TIMEOUT_SECONDS", "STAGE_COMPATIBLE_VERSIONS"):
    os.environ.pop(_name, None)
