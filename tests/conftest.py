import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from object_listeners.settings import Settings, set_settings  # noqa: E402


@pytest.fixture(autouse=True)
def default_settings():
    """Pin process settings to defaults so the host environment cannot leak in."""
    settings = Settings()
    set_settings(settings)
    yield settings
    set_settings(None)
