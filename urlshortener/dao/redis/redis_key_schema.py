import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing data models.

    Mappings and client quotas live in separate namespaces of the same
    Redis database:
        links:<shortcode>:url       -> destination URL (TTL = mapping lifetime)
        links:<shortcode>:hits      -> usage counter (TTL = mapping lifetime)
        clients:<client>:quota      -> remaining shorten requests (TTL = quota window)

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "urlshortener:prod" or "urlshortener:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_url_key(self, shortcode: str) -> str:
        return f'links:{shortcode}:url'

    @prefix_key
    def link_hits_key(self, shortcode: str) -> str:
        return f'links:{shortcode}:hits'

    @prefix_key
    def client_quota_key(self, client_key: str) -> str:
        return f'clients:{client_key}:quota'
