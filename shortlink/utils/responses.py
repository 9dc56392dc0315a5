"""API Gateway (Lambda Proxy) response builders

All bodies are JSON. Error bodies carry a human-readable `message` and a stable
`error_code`; extra fields (e.g. `rate_limit_reset`) are merged in as given.
"""

import json
from typing import Any

from shortlink.types import LambdaResponse


CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET',
}


def json_response(status_code: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def error_response(status_code: int, message: str, error_code: str | None = None, **extra: Any) -> LambdaResponse:
    body = {'message': message}
    if error_code:
        body['error_code'] = error_code
    body.update(extra)
    return json_response(status_code, body)


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Bad Request'
    return error_response(400, base if not message else f'{base} ({message})', error_code)


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Internal Server Error'
    return error_response(500, base if not message else f'{base} ({message})', error_code)


def response_301(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 301,
        'headers': {'Location': location, **CORS_HEADERS},
        'body': json.dumps({}),  # no body needed for redirects
    }
