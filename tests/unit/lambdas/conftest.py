import pytest


@pytest.fixture(autouse=True)
def _deployed_env(monkeypatch):
    """Run handlers as if deployed, so unexpected errors become 500 responses."""
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.setenv('APP_NAME', 'shortlink')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)


@pytest.fixture()
def context():
    class _Context:
        function_name = 'pytest'

    return _Context()


@pytest.fixture()
def config():
    return {
        'redis': {'host': 'redis.test', 'port': 6379, 'links_db': 0, 'quota_db': 1},
        'app': {'domain': 'sho.rt', 'api_quota': 2, 'forbidden_domains': ['evil.example']},
    }
