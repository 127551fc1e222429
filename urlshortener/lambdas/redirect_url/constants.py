# Log events & error codes
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
RESOLUTION_FAILED = 'RESOLUTION_FAILED'
BAD_CONFIGURATION = 'BAD_CONFIGURATION'
