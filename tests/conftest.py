import base64

import pytest

from clairconfig.context import reset_app_config


@pytest.fixture(autouse=True)
def clean_app_config():
    """Ensure the process-wide config slot does not leak between tests."""
    reset_app_config()
    yield
    reset_app_config()


@pytest.fixture
def valid_key() -> str:
    return base64.urlsafe_b64encode(bytes(range(32))).decode("ascii")
