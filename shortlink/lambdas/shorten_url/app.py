import json
import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Any

from shortlink.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlink.dao.redis import ShortLinkRedisDAO, QuotaRedisDAO
from shortlink.dao.exceptions import DataStoreError
from shortlink.exceptions import (
    ConfigurationError,
    ForbiddenTargetError,
    IdentifierInUseError,
    InvalidInputError,
    RateLimitedError,
    ShortlinkError,
    StorageUnavailableError,
)
from shortlink.services import QuotaTracker, Shortener
from shortlink.utils import load_config, redis_kwargs, app_prefix, get_short_url, ShortenerSettings
from shortlink.utils.helpers import guarantee_500_response
from shortlink.utils.responses import json_response, error_response, response_400, response_500
from shortlink.utils.runtime import get_client_ip
from shortlink.lambdas.shorten_url.constants import (
    INVALID_JSON_BODY,
    INVALID_REQUEST_FIELD,
    MISSING_CLIENT_IDENTITY,
    CONFIGURATION_ERROR,
    LINK_CREATED,
    LINK_REJECTED,
)


logger = logging.getLogger(__name__)

# Terminal outcomes of Shortener.create() and their HTTP status codes
ERROR_STATUS_CODES: dict[type[ShortlinkError], int] = {
    InvalidInputError: 400,
    IdentifierInUseError: 403,
    RateLimitedError: 503,
    ForbiddenTargetError: 503,
    StorageUnavailableError: 500,
}


@dataclass(frozen=True)
class ShortenRequest:
    url: str
    short: str | None = None
    expiry: int | None = None


def parse_request(event: LambdaEvent) -> ShortenRequest:
    """Parse and type-check the JSON body of a shorten request

    Body: {"url": string, "short"?: string, "expiry"?: integer hours}

    Raises:
        json.JSONDecodeError:
            If the body isn't valid JSON.
        InvalidInputError:
            If the body isn't an object or a field has the wrong type.
    """
    raw_body = event.get('body') or '{}'
    if event.get('isBase64Encoded'):
        try:
            raw_body = base64.b64decode(raw_body).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError) as e:
            raise json.JSONDecodeError('Body is not valid base64 encoded UTF-8', str(raw_body), 0) from e

    body: Any = json.loads(raw_body)
    if not isinstance(body, dict):
        raise InvalidInputError('JSON body must be an object')

    url = body.get('url')
    if not isinstance(url, str) or not url:
        raise InvalidInputError("missing 'url' in JSON body")

    short = body.get('short')
    if short is not None and not isinstance(short, str):
        raise InvalidInputError("'short' must be a string")

    expiry = body.get('expiry')
    if expiry is not None and (isinstance(expiry, bool) or not isinstance(expiry, int)):
        raise InvalidInputError("'expiry' must be an integer number of hours")

    return ShortenRequest(url=url, short=short or None, expiry=expiry)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs (POST /api/v1)

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Load configuration
    - Step 2: Extract client identity (source IP) from Lambda event
    - Step 3: Parse request body
    - Step 4: Create the short link (quota check, validation, storage, quota decrement)
    - Step 5: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            url: normalized target URL
            short: <domain>/<shortcode>
            expiry: link lifetime in hours
            rate_limit: creations left in the current window
            rate_limit_reset: minutes until the window resets
        400: Bad client request (invalid JSON, invalid field, invalid URL)
        403: Custom short already in use
        503: Rate limit exceeded (with rate_limit_reset) or forbidden target
        500: Data store unavailable or internal error

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            JSON-serializable response following API Gateway Lambda Proxy
            output format. Includes status code, headers, and response body.

    Example:
        >>> event = {'body': '{"url": "example.com/x"}', 'requestContext': {'identity': {'sourceIp': '203.0.113.7'}}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['url']
        'https://example.com/x'
    """
    # 1- Get application's config
    try:
        app_config = load_config('shorten_url')
        settings = ShortenerSettings.from_config(app_config)
    except ConfigurationError:
        logger.exception('Failed to load configuration for shorten URL function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    # 2- Extract client identity
    client_key = get_client_ip(event)
    if client_key is None:
        logger.info('Missing client identity in request context. Responding with 400.', extra={'event': MISSING_CLIENT_IDENTITY})
        return response_400(message='missing client identity', error_code=MISSING_CLIENT_IDENTITY)

    # 3- Parse request body
    try:
        request = parse_request(event)
    except json.JSONDecodeError:
        logger.info('Request body is not valid JSON. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='cannot parse JSON', error_code=INVALID_JSON_BODY)
    except InvalidInputError as e:
        logger.info('Request body is invalid. Responding with 400.', extra={'event': INVALID_REQUEST_FIELD, 'reason': str(e)})
        return response_400(message=str(e), error_code=INVALID_REQUEST_FIELD)

    # 4- Create the short link
    try:
        with (
            QuotaRedisDAO(**redis_kwargs(app_config, 'quota_db'), prefix=app_prefix()) as quota_dao,
            ShortLinkRedisDAO(**redis_kwargs(app_config, 'links_db'), prefix=app_prefix()) as link_dao,
        ):
            tracker = QuotaTracker(quota_dao, quota=settings.api_quota, window=settings.quota_window)
            shortener = Shortener(link_dao, tracker, settings)
            result = shortener.create(client_key, request.url, custom_id=request.short, expiry_hours=request.expiry)
    except DataStoreError:
        logger.exception('Cannot connect to the data store. Responding with 500.', extra={'event': LINK_REJECTED})
        return response_500(message='cannot connect to the DB', error_code=StorageUnavailableError.error_code)
    except ShortlinkError as e:
        return _rejection_response(e, client_key)

    # 5- Return successful response to user
    short_url = get_short_url(result.short_link.shortcode, event, domain=settings.domain, port=settings.port)
    logger.info(
        'Short link created. Responding with 200.',
        extra={'event': LINK_CREATED, 'shortcode': result.short_link.shortcode, 'clientKey': client_key},
    )
    return json_response(
        200,
        {
            'message': f'Successfully shortened {result.short_link.target} to {short_url}',
            'url': result.short_link.target,
            'short': short_url,
            'expiry': result.short_link.expiry_hours,
            'rate_limit': result.quota.remaining,
            'rate_limit_reset': result.quota.reset_in_minutes,
        },
    )


def _rejection_response(error: ShortlinkError, client_key: str) -> LambdaResponse:
    status_code = next((code for cls, code in ERROR_STATUS_CODES.items() if isinstance(error, cls)), None)
    if status_code is None:
        raise error

    extra = {}
    if isinstance(error, RateLimitedError):
        extra['rate_limit_reset'] = error.reset_in_minutes

    log = logger.exception if isinstance(error, StorageUnavailableError) else logger.info
    log(
        'Short link request rejected. Responding with %s.',
        status_code,
        extra={'event': LINK_REJECTED, 'errorCode': error.error_code, 'clientKey': client_key},
    )
    return error_response(status_code, str(error), error.error_code, **extra)
