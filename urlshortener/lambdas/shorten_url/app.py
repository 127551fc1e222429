import json
import logging

from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse, HttpHeaders
from urlshortener.dao.redis import RedisStoreClient, ShortURLRedisDAO, QuotaRedisDAO
from urlshortener.dao.exceptions import DataStoreError
from urlshortener.exceptions import (
    ConfigurationError,
    DomainRejectedError,
    IdentifierInUseError,
    InvalidExpiryError,
    InvalidShortcodeError,
    InvalidURLError,
    QuotaExceededError,
)
from urlshortener.services import IdentifierAllocator, MappingResolver, QuotaLimiter, ShortenerService
from urlshortener.utils import ShortenerSettings, load_config, app_prefix, get_short_url, get_client_ip
from urlshortener.utils.helpers import guarantee_500_response
from urlshortener.lambdas.shorten_url.constants import (
    SHORTEN_SUCCESS,
    INVALID_JSON,
    INVALID_URL,
    INVALID_SHORTCODE,
    INVALID_EXPIRY,
    DOMAIN_REJECTED,
    SHORTCODE_IN_USE,
    QUOTA_EXCEEDED,
    DATA_STORE_UNAVAILABLE,
    BAD_CONFIGURATION,
)


logger = logging.getLogger(__name__)


# TODO: restrict Access-Control-Allow-Origin to the frontend's domain once it has one
CORS_HEADERS: HttpHeaders = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST',
}


def _response(status_code: int, body: dict, headers: HttpHeaders | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def response_200(body: dict) -> LambdaResponse:
    return _response(200, body)


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Bad Request'
    return _response(400, {'message': base if not message else f'{base} ({message})', 'errorCode': error_code})


def response_403(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Forbidden'
    return _response(403, {'message': base if not message else f'{base} ({message})', 'errorCode': error_code})


def response_503(*, message: str, error_code: str, retry_after: int | None = None, **extra) -> LambdaResponse:
    headers = None if retry_after is None else {'Retry-After': str(retry_after)}
    return _response(503, {'message': message, 'errorCode': error_code, **extra}, headers=headers)


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Internal Server Error'
    return _response(500, {'message': base if not message else f'{base} ({message})', 'errorCode': error_code})


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Parse JSON request body
    - Step 2: Identify client by request origin (source IP)
    - Step 3: Admit client, validate URL, allocate shortcode, store mapping and consume quota
    - Step 4: Respond to client with 200 success

    HTTP responses:
        200: Successful URL shortening
            url: destination URL (scheme enforced)
            custom_short: newly created short URL
            expiry: mapping lifetime in hours
            rate_remaining: shorten requests left in the current window
            rate_limit_reset: seconds until the quota window resets
        400: Bad client request
            invalid JSON body, invalid URL, invalid custom shortcode or invalid expiry
        403: Forbidden
            custom shortcode already in use
        503: Service unavailable
            quota exceeded (with Retry-After header), or URL points back at this service
        500: Internal server error
            data store unavailable or bad configuration

    Example:
        >>> event = {'body': '{"url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['custom_short']
        'http://localhost:3000/q7RbT2'
    """
    # 0- Get application's config
    try:
        settings = ShortenerSettings.from_config(load_config('shorten_url'))
    except ConfigurationError as error:
        logger.exception('Failed to load configuration for shorten URL function. Responding with 500.', extra={'event': BAD_CONFIGURATION})
        return response_500(error_code=error.error_code)

    # 1- Parse JSON request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON)
    if not isinstance(request_body, dict):
        logger.info('JSON body is not an object. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400(message='JSON body must be an object', error_code=INVALID_JSON)

    url = request_body.get('url')
    custom_short = request_body.get('custom_short') or None
    expiry = request_body.get('expiry')
    if custom_short is not None and not isinstance(custom_short, str):
        logger.info('Custom shortcode is not a string. Responding with 400.', extra={'event': INVALID_SHORTCODE})
        return response_400(message="'custom_short' must be a string", error_code=INVALID_SHORTCODE)

    # 2- Identify client
    client_key = get_client_ip(event)
    own_domain = settings.domain or event.get('requestContext', {}).get('domainName')

    # 3- Shorten URL
    try:
        with RedisStoreClient(**settings.redis_config, prefix=app_prefix()) as store:
            short_url_dao = ShortURLRedisDAO(store)
            service = ShortenerService(
                allocator=IdentifierAllocator(short_url_dao),
                resolver=MappingResolver(short_url_dao),
                limiter=QuotaLimiter(QuotaRedisDAO(store), limit=settings.quota_limit, window=settings.quota_window),
                short_url_dao=short_url_dao,
                domain=own_domain,
                default_expiry_hours=settings.default_expiry_hours,
            )
            result = service.shorten(client_key, url, custom_short=custom_short, expiry_hours=expiry)
    except QuotaExceededError as error:
        logger.info(
            'Client quota exceeded. Responding with 503.',
            extra={'event': QUOTA_EXCEEDED, 'clientKey': client_key, 'resetIn': error.reset_in},
        )
        return response_503(
            message=f'Rate limit exceeded. Try again in {error.reset_in} seconds.',
            error_code=QUOTA_EXCEEDED,
            retry_after=error.reset_in,
            rate_limit_reset=error.reset_in,
        )
    except DomainRejectedError:
        logger.info('URL points back at this service. Responding with 503.', extra={'event': DOMAIN_REJECTED, 'url': url})
        return response_503(message="Service Unavailable (can't shorten URLs of this service)", error_code=DOMAIN_REJECTED)
    except InvalidURLError:
        logger.info('Invalid URL. Responding with 400.', extra={'event': INVALID_URL, 'url': url})
        return response_400(message='invalid URL', error_code=INVALID_URL)
    except InvalidShortcodeError as error:
        logger.info('Invalid custom shortcode. Responding with 400.', extra={'event': INVALID_SHORTCODE})
        return response_400(message=str(error), error_code=INVALID_SHORTCODE)
    except InvalidExpiryError as error:
        logger.info('Invalid expiry. Responding with 400.', extra={'event': INVALID_EXPIRY})
        return response_400(message=str(error), error_code=INVALID_EXPIRY)
    except IdentifierInUseError as error:
        logger.info(
            'Shortcode already in use. Responding with 403.',
            extra={'event': SHORTCODE_IN_USE, 'shortcode': error.shortcode, 'custom': custom_short is not None},
        )
        return response_403(message=f"short URL '{error.shortcode}' is already in use", error_code=SHORTCODE_IN_USE)
    except DataStoreError:
        logger.exception('Data store unavailable. Responding with 500.', extra={'event': DATA_STORE_UNAVAILABLE})
        return response_500(error_code=DATA_STORE_UNAVAILABLE)

    # 4- Return successful response to client
    short_url = get_short_url(result.shortcode, event, domain=settings.domain)
    logger.info(
        'Short URL created. Responding with 200.',
        extra={'event': SHORTEN_SUCCESS, 'shortcode': result.shortcode, 'clientKey': client_key, 'rateRemaining': result.rate_remaining},
    )
    return response_200(
        {
            'url': result.url,
            'custom_short': short_url,
            'expiry': result.expiry,
            'rate_remaining': result.rate_remaining,
            'rate_limit_reset': result.rate_limit_reset,
        }
    )
