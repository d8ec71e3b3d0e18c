"""Core Django settings."""

from typing import Final

from server.settings.components import config

SECRET_KEY = config(
    'DJANGO_SECRET_KEY',
    default='insecure-selection-server-development-key',
)
DEBUG = config('DJANGO_DEBUG', cast=bool, default=False)
ALLOWED_HOSTS = config(
    'DJANGO_ALLOWED_HOSTS',
    cast=lambda hosts: [host.strip() for host in hosts.split(',')],
    default='localhost,127.0.0.1,testserver',
)

INSTALLED_APPS: Final = [
    'server.apps.selection',
]

MIDDLEWARE: Final = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
]

ROOT_URLCONF = 'server.urls'
WSGI_APPLICATION = 'server.wsgi.application'

# Selection state lives in memory, so there is no database
DATABASES: Final[dict[str, dict[str, str]]] = {}

# Cookie-only sessions bind a browser to its selection session
SESSION_ENGINE = 'django.contrib.sessions.backends.signed_cookies'
SESSION_COOKIE_HTTPONLY = True

USE_TZ = True
TIME_ZONE = 'UTC'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
