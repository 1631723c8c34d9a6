"""
Django test settings for department_admin project.

Used by pytest (see pyproject.toml). The Department API is never reached:
tests swap in an in-memory client or a mocked requests session.
"""

from .base import *

DEBUG = False

ALLOWED_HOSTS = ['testserver', 'localhost']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# Fast hashing for test users
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

DEPARTMENT_API_URL = 'http://departments.test/api'
DEPARTMENT_API_TOKEN = ''
DEPARTMENT_API_TIMEOUT = 5

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'null': {
            'class': 'logging.NullHandler',
        },
    },
    'loggers': {
        'apps': {
            'handlers': ['null'],
            'level': 'DEBUG',
            'propagate': True,
        },
    },
}
