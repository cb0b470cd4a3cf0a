"""
Pytest configuration for tangle tests.
Adds the src/tangle directory (flat imports) and the repository root
(`from tests.test_fixtures import ...`) to sys.path.
"""
import sys
from pathlib import Path

_repo_root = Path(__file__).parent.parent

# Add src/tangle to the path so imports like 'from tangle_engine import ...' work
src_path = _repo_root / "src" / "tangle"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))
