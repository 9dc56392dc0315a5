# Log event codes and error codes of the redirect_url lambda
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_LINK_NOT_FOUND = 'SHORT_LINK_NOT_FOUND'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
STORAGE_UNAVAILABLE = 'STORAGE_UNAVAILABLE'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
