# Log events & error codes
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
INVALID_JSON = 'INVALID_JSON'
INVALID_URL = 'INVALID_URL'
INVALID_SHORTCODE = 'INVALID_SHORTCODE'
INVALID_EXPIRY = 'INVALID_EXPIRY'
DOMAIN_REJECTED = 'DOMAIN_REJECTED'
SHORTCODE_IN_USE = 'SHORTCODE_IN_USE'
QUOTA_EXCEEDED = 'QUOTA_EXCEEDED'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'
BAD_CONFIGURATION = 'BAD_CONFIGURATION'
