import pytest

from shortlink.constants import ENV


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Start every test without service or AppConfig environment variables."""
    for name in [*ENV.App, *ENV.AppConfig, *ENV.Service]:
        monkeypatch.delenv(name, raising=False)
