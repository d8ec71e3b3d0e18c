"""Django storage configuration for S3-compatible backends.

Used when ``SELECTION_BACKEND`` is ``storage``. Works with:
- MinIO for local development
- Cloudflare R2 for production

Both are S3-compatible and use the same S3Storage backend.
"""

from typing import Any, Final

from server.settings.components import config

STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'server.apps.selection.infrastructure.storage.FileStorage',
        'OPTIONS': {
            'bucket_name': config(
                'AWS_STORAGE_BUCKET_NAME',
                default='selection-files',
            ),
            'access_key': config('AWS_ACCESS_KEY_ID', default=None),
            'secret_key': config('AWS_SECRET_ACCESS_KEY', default=None),
            'endpoint_url': config(
                'AWS_S3_ENDPOINT_URL',
                default=None,
            ),
            'region_name': config(
                'AWS_S3_REGION_NAME',
                default='auto',
            ),
            'file_overwrite': False,  # Prevent accidental overwrites
            'default_acl': None,  # Inherit bucket ACL
        },
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
