"""Selection engine and server settings."""

from server.settings.components import config

# Filesystem backend: 'local' (disk) or 'storage' (default_storage)
SELECTION_BACKEND = config('SELECTION_BACKEND', default='local')

# Session management
SELECTION_SESSION_LIMIT = config('SELECTION_SESSION_LIMIT', cast=int, default=50)
SELECTION_SESSION_TIMEOUT = config(
    'SELECTION_SESSION_TIMEOUT',
    cast=int,
    default=1800,
)

# HTTP server host and port
SELECTION_SERVER_HOST = config('SELECTION_SERVER_HOST', default='0.0.0.0')
SELECTION_SERVER_PORT = config('SELECTION_SERVER_PORT', cast=int, default=3000)
