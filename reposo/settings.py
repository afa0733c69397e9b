"""
Django settings for the reposo project.

Values that differ between deployments are read from the environment.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    return os.environ.get(name, str(default)).strip().lower() in ('1', 'true', 'yes', 'on')


SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-change-me-in-production')

DEBUG = env_bool('DJANGO_DEBUG', False)

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',')
    if host.strip()
]


# Application definition

INSTALLED_APPS = [
    'core',
]

MIDDLEWARE = [
    'core.middleware.RequestLoggingMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'core.middleware.RateLimitMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'core.middleware.ApiErrorMiddleware',
]

ROOT_URLCONF = 'reposo.urls'

# Routes have no trailing slash; unknown paths get the JSON 404 instead of a redirect
APPEND_SLASH = False

WSGI_APPLICATION = 'reposo.wsgi.application'

# Certificates are rendered on request and never stored
DATABASES = {}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'reposo-rate-limit',
    }
}

LANGUAGE_CODE = 'es-ar'

TIME_ZONE = os.environ.get('TIME_ZONE', 'America/Argentina/Buenos_Aires')

USE_I18N = False

USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'


# Certificate rendering

CERTIFICATE_ASSETS_DIR = Path(os.environ.get('CERTIFICATE_ASSETS_DIR', BASE_DIR / 'assets'))

# Font name -> TTF path. Missing files are logged and the built-in fonts are used instead.
CERTIFICATE_FONT_FILES = {
    'Caveat-Regular': str(CERTIFICATE_ASSETS_DIR / 'fonts' / 'Caveat-Regular.ttf'),
    'Caveat-Medium': str(CERTIFICATE_ASSETS_DIR / 'fonts' / 'Caveat-Medium.ttf'),
}

# Without a readable image the signature block is drawn as text.
CERTIFICATE_SIGNATURE_IMAGE = str(CERTIFICATE_ASSETS_DIR / 'firmaDigital.jpeg')

# Overrides merged into the default layout, e.g. {'watermark': 'COPIA'}
CERTIFICATE_LAYOUT = {}

CERTIFICATE_PAGE_COMPRESSION = env_bool('CERTIFICATE_PAGE_COMPRESSION', True)

CERTIFICATE_MAX_PAYLOAD_BYTES = 5 * 1024 * 1024

DATA_UPLOAD_MAX_MEMORY_SIZE = CERTIFICATE_MAX_PAYLOAD_BYTES

RATE_LIMIT_MAX_REQUESTS = int(os.environ.get('RATE_LIMIT_MAX_REQUESTS', 100))

RATE_LIMIT_WINDOW_SECONDS = int(os.environ.get('RATE_LIMIT_WINDOW_SECONDS', 15 * 60))


# Logging

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
        'core': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}
