"""Root conftest: shared test configuration."""

import os

import pytest

# Tests never depend on a developer's .env or shell overrides
for _key in [k for k in os.environ if k.startswith("APIDOC_")]:
    del os.environ[_key]


@pytest.fixture(autouse=True)
def _fresh_settings():
    from apidoc_examples.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
