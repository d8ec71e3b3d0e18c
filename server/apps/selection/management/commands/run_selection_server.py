"""Django management command to run the selection API server."""

import logging
from typing import Any, final, override

from cheroot.wsgi import Server as WSGIServer
from django.conf import settings
from django.core.management.base import BaseCommand
from django.core.wsgi import get_wsgi_application

logger = logging.getLogger(__name__)

_SERVER_NAME = 'Selection-Server'


@final
class Command(BaseCommand):
    """Run the selection API using cheroot WSGI server."""

    help = 'Run the file selection API server'

    @override
    def add_arguments(self, parser: Any) -> None:
        """Add command arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--host',
            type=str,
            default=None,
            help='Host to bind to (default: from settings)',
        )
        parser.add_argument(
            '--port',
            type=int,
            default=None,
            help='Port to bind to (default: from settings)',
        )

    @override
    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the command.

        Args:
            args: Positional arguments.
            options: Keyword arguments from command line.
        """
        host = options['host'] or getattr(
            settings,
            'SELECTION_SERVER_HOST',
            '0.0.0.0',  # noqa: S104
        )
        port = options['port'] or getattr(settings, 'SELECTION_SERVER_PORT', 3000)

        self.stdout.write(
            self.style.SUCCESS(
                f'Starting selection server on http://{host}:{port}',
            ),
        )

        server = WSGIServer(
            bind_addr=(host, port),
            wsgi_app=get_wsgi_application(),
        )
        server.server_name = _SERVER_NAME

        try:
            logger.info(
                'Selection server starting on %s:%d',
                host,
                port,
            )
            server.start()
        except KeyboardInterrupt:
            self.stdout.write(self.style.WARNING('\nShutting down...'))
        finally:
            server.stop()
            self.stdout.write(self.style.SUCCESS('Selection server stopped'))
