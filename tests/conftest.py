"""
Root conftest for tests.

Resets process-wide state between tests:
1. Cached platform settings, so monkeypatched environment variables apply
2. The trace ID context variable
"""

import pytest

from config.settings import get_settings
from libs.common.logging.context import clear_trace_id


@pytest.fixture(autouse=True)
def _reset_process_state():
    get_settings.cache_clear()
    clear_trace_id()
    yield
    get_settings.cache_clear()
    clear_trace_id()
