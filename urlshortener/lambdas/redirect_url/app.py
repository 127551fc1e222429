import json
import logging

from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.dao.redis import RedisStoreClient, ShortURLRedisDAO
from urlshortener.dao.exceptions import DataStoreError
from urlshortener.exceptions import ConfigurationError, ResolutionFailedError, UnknownShortcodeError
from urlshortener.services import MappingResolver
from urlshortener.utils import ShortenerSettings, load_config, app_prefix, get_short_url
from urlshortener.utils.helpers import guarantee_500_response
from urlshortener.lambdas.redirect_url.constants import (
    REDIRECT_SUCCESS,
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    RESOLUTION_FAILED,
    BAD_CONFIGURATION,
)


logger = logging.getLogger(__name__)


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Internal Server Error'
    body = {'message': base if not message else f'{base} ({message})', 'errorCode': error_code}
    return {
        'statusCode': 500,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body),
    }


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Bad Request'
    body = {'message': base if not message else f'{base} ({message})', 'errorCode': error_code}
    return {
        'statusCode': 400,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body),
    }


def response_404(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Not Found'
    body = {'message': base if not message else f'{base} ({message})', 'errorCode': error_code}
    return {
        'statusCode': 404,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body),
    }


def response_301(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 301,
        'headers': {'Location': location},
        'body': '',
    }


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Resolve shortcode to target URL (counts the hit)
    - Step 3: Redirect client to target URL

    HTTP responses:
        301: Successful redirect
            headers:
                Location: target URL destination
        400: Bad client request
            message: missing shortcode in path parameters
        404: Not found
            message: shortcode doesn't exist or has expired
        500: Internal server error
            message: server experienced an internal error

    Example:
        >>> event = {'pathParameters': {'shortcode': 'q7RbT2'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        301
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get application's config
    try:
        settings = ShortenerSettings.from_config(load_config('redirect_url'))
    except ConfigurationError as error:
        logger.exception('Failed to load configuration for redirect URL function. Responding with 500.', extra={'event': BAD_CONFIGURATION})
        return response_500(error_code=error.error_code)

    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)
    logger.debug('Client requested short URL %s.', get_short_url(shortcode, event, domain=settings.domain))

    # 2- Resolve shortcode to target URL
    try:
        with RedisStoreClient(**settings.redis_config, prefix=app_prefix()) as store:
            target_url = MappingResolver(ShortURLRedisDAO(store)).resolve(shortcode)
    except UnknownShortcodeError:
        logger.info(
            'Short URL record not found in database. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        short_url = get_short_url(shortcode, event, domain=settings.domain)
        return response_404(message=f"short url {short_url} doesn't exist", error_code=SHORT_URL_NOT_FOUND)
    except (ResolutionFailedError, DataStoreError):
        logger.exception('Failed to resolve shortcode. Responding with 500.', extra={'shortcode': shortcode, 'event': RESOLUTION_FAILED})
        return response_500(error_code=RESOLUTION_FAILED)

    # 3- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 301.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_301(location=target_url)
