from shortlink.utils.config import app_env, app_name, app_prefix, load_config, redis_kwargs
from shortlink.utils.settings import ShortenerSettings
from shortlink.utils.helpers import base_url, get_short_url, require_environment, guarantee_500_response
from shortlink.utils.shortcode import generate_shortcode
from shortlink.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'redis_kwargs',
    'ShortenerSettings',
    'base_url',
    'get_short_url',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
