# Log event codes and error codes of the shorten_url lambda
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
INVALID_REQUEST_FIELD = 'INVALID_REQUEST_FIELD'
MISSING_CLIENT_IDENTITY = 'MISSING_CLIENT_IDENTITY'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
LINK_CREATED = 'LINK_CREATED'
LINK_REJECTED = 'LINK_REJECTED'
