# pytest configuration for cosmic_sdk tests
import sys
from pathlib import Path

import pytest

# Ensure the package root is in sys.path for proper imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from cosmic_sdk.config import ENV_KEYS  # noqa: E402


@pytest.fixture(autouse=True)
def _clean_cosmic_env(monkeypatch):
    """Keep developer credentials in the environment out of unit tests."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
