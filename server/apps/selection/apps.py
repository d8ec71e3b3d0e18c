"""Django app configuration for selection app."""

from django.apps import AppConfig


class SelectionConfig(AppConfig):
    """Configuration for selection app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.selection'
    verbose_name = 'File Selection'
