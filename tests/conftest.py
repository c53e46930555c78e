"""Top-level pytest configuration."""

import sys
from pathlib import Path

# Allow running the suite from a source checkout without installing.
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))
