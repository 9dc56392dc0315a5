import logging

from shortlink.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlink.dao.redis import ShortLinkRedisDAO
from shortlink.dao.exceptions import DataStoreError
from shortlink.exceptions import ConfigurationError, NotFoundError, StorageUnavailableError
from shortlink.services import Shortener
from shortlink.utils import load_config, redis_kwargs, app_prefix, get_short_url, ShortenerSettings
from shortlink.utils.helpers import guarantee_500_response
from shortlink.utils.responses import error_response, response_301, response_400, response_500
from shortlink.lambdas.redirect_url.constants import (
    MISSING_SHORTCODE,
    SHORT_LINK_NOT_FOUND,
    CONFIGURATION_ERROR,
    STORAGE_UNAVAILABLE,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs (GET /{shortcode})

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Load configuration
    - Step 2: Extract shortcode from request path
    - Step 3: Resolve the shortcode (no quota check, no mutation)
    - Step 4: Redirect client to target URL

    HTTP responses:
        301: Successful redirect
            headers:
                Location: target URL destination
        400: Bad client request
            message: missing shortcode in path parameters
        404: Not found
            message: short link doesn't exist or expired
        500: Internal server error
            message: data store unavailable or internal error

    Args:
        event (LambdaEvent):
            API Gateway event payload containing the shortcode path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'shortcode': 'Gh71TC'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        301
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 1- Get application's config
    try:
        app_config = load_config('redirect_url')
        settings = ShortenerSettings.from_config(app_config)
    except ConfigurationError:
        logger.exception('Failed to load configuration for redirect URL function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    # 2- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)
    short_url = get_short_url(shortcode, event, domain=settings.domain, port=settings.port)
    logger.debug('Client requested short link %s.', short_url)

    # 3- Resolve the shortcode
    try:
        with ShortLinkRedisDAO(**redis_kwargs(app_config, 'links_db'), prefix=app_prefix()) as link_dao:
            target_url = Shortener(link_dao, settings=settings).resolve(shortcode)
    except NotFoundError as e:
        logger.info(
            'Short link not found in database. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_LINK_NOT_FOUND},
        )
        return error_response(404, f"Not Found (short link {short_url} doesn't exist)", e.error_code)
    except (DataStoreError, StorageUnavailableError):
        logger.exception('Cannot connect to the data store. Responding with 500.', extra={'shortcode': shortcode, 'event': STORAGE_UNAVAILABLE})
        return response_500(message='cannot connect to the DB', error_code=StorageUnavailableError.error_code)

    # 4- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 301.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_301(location=target_url)
