"""In-memory data store fakes shared by service and handler tests

The fakes honor the same contracts as the Redis DAOs: link inserts never
overwrite a live mapping, keys expire after their TTL, and quota counters are
created lazily and decremented without going below zero. A lock stands in for
Redis' single-threaded command execution.
"""

import threading
from datetime import datetime, timedelta, UTC

import pytest

from shortlink.models import ShortLinkModel, QuotaModel
from shortlink.dao.base import ShortLinkBaseDAO, QuotaBaseDAO
from shortlink.dao.exceptions import ShortLinkAlreadyExistsError, ShortLinkNotFoundError, QuotaCounterNotFoundError


class InMemoryStore:
    def __init__(self):
        self.lock = threading.Lock()
        self.closed = False

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


class InMemoryShortLinkDAO(InMemoryStore, ShortLinkBaseDAO):
    def __init__(self):
        super().__init__()
        self.links: dict[str, tuple[str, datetime]] = {}

    def _live(self, shortcode):
        entry = self.links.get(shortcode)
        if entry is None or entry[1] <= datetime.now(UTC):
            self.links.pop(shortcode, None)
            return None
        return entry

    def insert(self, short_link, **kwargs):
        with self.lock:
            if self._live(short_link.shortcode) is not None:
                raise ShortLinkAlreadyExistsError(f"Short link with code '{short_link.shortcode}' already exists.")
            expires_at = datetime.now(UTC) + timedelta(seconds=short_link.ttl_seconds)
            self.links[short_link.shortcode] = (short_link.target, expires_at)
        return self

    def get(self, shortcode, **kwargs):
        with self.lock:
            entry = self._live(shortcode)
        if entry is None:
            raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.")
        target, expires_at = entry
        return ShortLinkModel(target=target, shortcode=shortcode, expires_at=expires_at)


class InMemoryQuotaDAO(InMemoryStore, QuotaBaseDAO):
    def __init__(self):
        super().__init__()
        self.counters: dict[str, tuple[int, datetime]] = {}

    def _live(self, client_key):
        entry = self.counters.get(client_key)
        if entry is None or entry[1] <= datetime.now(UTC):
            self.counters.pop(client_key, None)
            return None
        return entry

    def _model(self, client_key, remaining, expires_at):
        return QuotaModel(client_key=client_key, remaining=remaining, reset_in=expires_at - datetime.now(UTC))

    def reserve(self, client_key, quota, window, **kwargs):
        with self.lock:
            entry = self._live(client_key)
            if entry is None:
                entry = self.counters[client_key] = (quota, datetime.now(UTC) + timedelta(seconds=window))
        return self._model(client_key, *entry)

    def decrement(self, client_key, **kwargs):
        with self.lock:
            entry = self._live(client_key)
            if entry is None:
                raise QuotaCounterNotFoundError(f"Quota counter for client '{client_key}' does not exist.")
            remaining, expires_at = entry
            remaining = max(remaining - 1, 0)
            self.counters[client_key] = (remaining, expires_at)
        return self._model(client_key, remaining, expires_at)


@pytest.fixture
def link_dao():
    return InMemoryShortLinkDAO()


@pytest.fixture
def quota_dao():
    return InMemoryQuotaDAO()
