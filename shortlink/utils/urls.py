"""URL predicates and normalization

Functions:
    has_scheme(url) -> bool
        True if the URL starts with an explicit '<scheme>://'.
    enforce_https(url) -> str
        Prefix 'https://' to URLs without a scheme, leave the rest untouched.
    normalize_host(value) -> str
        Lowercased hostname without port and leading 'www.'.
    is_valid_url(url) -> bool
        Syntax check for http(s) URLs with or without an explicit scheme.
    is_forbidden_target(url, forbidden_domains) -> bool
        True if the URL's host is denylisted.

Example:
    >>> enforce_https('example.com/x')
    'https://example.com/x'
    >>> enforce_https('http://example.com/x')
    'http://example.com/x'
    >>> is_forbidden_target('www.sho.rt/abc123', {'sho.rt'})
    True
"""

import re
import ipaddress
from urllib.parse import urlsplit


MAX_URL_LENGTH = 2048
ALLOWED_SCHEMES = frozenset({'http', 'https'})

SCHEME_RE = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://')
LABEL = r'[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?'
HOSTNAME_RE = re.compile(rf'^(?:{LABEL}\.)+(?:[a-z]{{2,63}}|xn--[a-z0-9-]{{1,59}})$')


def has_scheme(url: str) -> bool:
    return SCHEME_RE.match(url) is not None


def enforce_https(url: str) -> str:
    """Prefix secure transport to a URL lacking a scheme. Idempotent."""
    return url if has_scheme(url) else f'https://{url}'


def normalize_host(value: str) -> str:
    """Extract a comparable hostname from a URL or bare domain

    Example:
        >>> normalize_host('https://WWW.Sho.rt:8443/abc')
        'sho.rt'
    """
    value = value.strip()
    try:
        host = urlsplit(enforce_https(value)).hostname or ''
    except ValueError:
        host = value.lower()
    return host.removeprefix('www.').rstrip('.')


def _is_valid_host(host: str) -> bool:
    if host == 'localhost':
        return True
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return HOSTNAME_RE.match(host) is not None
    else:
        return True


def is_valid_url(url: str) -> bool:
    """Check that a string is an http(s) URL with a plausible host

    URLs without a scheme are checked as if they used https, since they will be
    normalized that way before storage.
    """
    if not isinstance(url, str) or not url or len(url) > MAX_URL_LENGTH:
        return False
    if any(ch.isspace() for ch in url):
        return False

    try:
        parts = urlsplit(enforce_https(url))
        host, _ = parts.hostname, parts.port  # .port raises ValueError when malformed
    except ValueError:
        return False

    if parts.scheme.lower() not in ALLOWED_SCHEMES or not host:
        return False
    return _is_valid_host(host)


def is_forbidden_target(url: str, forbidden_domains: frozenset[str] | set[str]) -> bool:
    return normalize_host(url) in forbidden_domains
