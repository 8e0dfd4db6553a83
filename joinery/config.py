import os

PLACEHOLDER_STORE_URLS = ('your_store_url_here',)


def _float_env(name, default=None):
    raw = os.getenv(name)
    if raw in (None, ''):
        return default
    return float(raw)


class BaseConfig:
    SECRET_KEY = os.getenv('SECRET_KEY', 'change-me')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Hosted relational store; a missing or placeholder URL leaves the store
    # handle unset and the app runs in empty-result mode.
    STORE_URL = os.getenv('STORE_URL')
    STORE_KEY = os.getenv('STORE_KEY')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    QUERY_CACHE_TTL = _float_env('QUERY_CACHE_TTL')
    MAX_FLAGGED_TASKS = int(os.getenv('MAX_FLAGGED_TASKS', '3'))
    DEFAULT_MARKUP_PERCENTAGE = 40
    CUT_AND_EDGE_SETTING_KEY = 'cut_and_edge_cost_per_sheet'
    CUT_AND_EDGE_DEFAULT = 110


class DevConfig(BaseConfig):
    DEBUG = True
    ENV = 'development'


class ProdConfig(BaseConfig):
    DEBUG = False
    ENV = 'production'
    SESSION_COOKIE_SECURE = True


class TestConfig(BaseConfig):
    DEBUG = False
    TESTING = True
    ENV = 'testing'
    STORE_URL = 'sqlite://'
    STORE_KEY = None
    QUERY_CACHE_TTL = None


CONFIGS = {
    'development': DevConfig,
    'production': ProdConfig,
    'testing': TestConfig,
}


def is_placeholder(url):
    """True when ``url`` is empty or one of the template placeholder values."""
    if not url:
        return True
    return 'placeholder' in url or url in PLACEHOLDER_STORE_URLS
