"""Test package initialisation for the numeric input engine."""

from pathlib import Path
import sys

# Ensure the repository root is importable when tests run from an isolated
# working directory. The engine lives in top-level modules such as
# ``numeric_input`` which are only importable with the project root on
# ``sys.path``.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
