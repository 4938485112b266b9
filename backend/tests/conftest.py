"""
Pytest configuration and fixtures
"""
import sys
from pathlib import Path

import pytest

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from logtail.core.config import Settings, get_settings  # noqa: E402

RECORD_TEMPLATE = "Record '%s' (%s) was inserted on page '%s' (%s)"
RECORD_PAYLOAD = (
    'a:4:{i:0;s:21:"Legal compliance Docs";i:1;s:15:"tx_dam_cat:9930";'
    'i:2;s:5:"Media";i:3;s:1:"1";}'
)
RECORD_MESSAGE = "Record 'Legal compliance Docs' (tx_dam_cat:9930) was inserted on page 'Media' (1)"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test read settings from its own environment"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def utc_settings() -> Settings:
    """Settings printing timestamps in UTC"""
    return Settings(display_timezone="UTC")


@pytest.fixture
def record_row() -> dict:
    """A sys_log row as returned by the database driver"""
    return {
        "uid": 42,
        "details": RECORD_TEMPLATE,
        "tstamp": "1262304000",
        "IP": "192.168.1.10",
        "log_data": RECORD_PAYLOAD,
    }
