import os

from urlshortener.types import LambdaEvent
from urlshortener.constants import ENV


ANONYMOUS_CLIENT = 'anonymous'


def running_locally() -> bool:
    """Return True if running in SAM local invoke/api, False otherwise."""
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def get_client_ip(event: LambdaEvent) -> str:
    """Return the request origin used as the client's quota identity.

    Looks at the REST API (v1) and HTTP API (v2) request contexts first, then
    the first hop of X-Forwarded-For. Requests with no identifiable origin
    share a single 'anonymous' quota.
    """
    request_context = event.get('requestContext') or {}
    source_ip = (request_context.get('identity') or {}).get('sourceIp') or (request_context.get('http') or {}).get('sourceIp')
    if source_ip:
        return source_ip

    headers = {k.lower(): v for k, v in (event.get('headers') or {}).items()}
    forwarded_for = headers.get('x-forwarded-for', '')
    first_hop = forwarded_for.split(',')[0].strip()
    return first_hop or ANONYMOUS_CLIENT
