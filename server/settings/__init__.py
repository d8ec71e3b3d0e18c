"""Django settings for the selection server.

Settings are split into components and combined with
``django-split-settings``. Values come from environment variables or a
``config/.env`` file via ``python-decouple``.
"""

from split_settings.tools import include

include(
    'components/common.py',
    'components/logging.py',
    'components/storages.py',
    'components/selection.py',
)
