"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if lambda is running in local SAM, False otherwise.

    get_client_ip(event) -> str | None:
        Client identity used for quota accounting.

Example:
    >>> from shortlink.utils.runtime import running_locally
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
"""

import os

from shortlink.types import LambdaEvent
from shortlink.constants import ENV


LOCAL_CLIENT_IP = '127.0.0.1'


def running_locally() -> bool:
    """Return True if running in SAM local invoke/api, False otherwise."""
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def get_client_ip(event: LambdaEvent) -> str | None:
    """Extract the caller's source IP from an API Gateway event

    Checks the REST API (v1) identity block, then the HTTP API (v2) block, then
    the last hop of X-Forwarded-For.

    Example:
        >>> get_client_ip({'requestContext': {'identity': {'sourceIp': '203.0.113.7'}}})
        '203.0.113.7'
    """
    request_context = event.get('requestContext') or {}
    source_ip = (request_context.get('identity') or {}).get('sourceIp') or (request_context.get('http') or {}).get('sourceIp')
    if source_ip:
        return source_ip

    headers = {k.lower(): v for k, v in (event.get('headers') or {}).items()}
    # Callers control every hop but the last one, which the proxy appends
    forwarded_for = headers.get('x-forwarded-for', '')
    last_hop = forwarded_for.split(',')[-1].strip()
    if last_hop:
        return last_hop

    # sam local doesn't always populate the identity block
    if running_locally():
        return LOCAL_CLIENT_IP
    return None
