import sys
from pathlib import Path

# Make the src/ layout importable when the package is not installed
SRC = Path(__file__).resolve().parent / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
