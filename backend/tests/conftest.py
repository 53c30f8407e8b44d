"""
Root conftest for backend tests.

Adds the backend directory to sys.path so tests import the package as
``from hedgeboard.services...`` when run from either backend/ or the
project root.
"""
import sys
from pathlib import Path

# backend/ directory  (supports `from hedgeboard.services...`)
backend_dir = str(Path(__file__).resolve().parents[1])
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)
