from urlshortener.utils.config import app_env, app_name, app_prefix, load_config, ShortenerSettings
from urlshortener.utils.helpers import base_url, get_short_url, require_environment, guarantee_500_response
from urlshortener.utils.runtime import running_locally, get_client_ip
from urlshortener.utils.shortener import generate_shortcode
from urlshortener.utils.validators import is_url, targets_domain, enforce_http, is_valid_custom_shortcode
from urlshortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'ShortenerSettings',
    'base_url',
    'get_short_url',
    'require_environment',
    'guarantee_500_response',
    'running_locally',
    'get_client_ip',
    'is_url',
    'targets_domain',
    'enforce_http',
    'is_valid_custom_shortcode',
    'initialize_logging',
]
