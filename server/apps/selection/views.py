"""JSON API over the selection engine.

Each browser session is bound to one selection session (and so to one
engine) through a key stored in the Django session cookie.
"""

import functools
import json
import logging
from collections.abc import Callable
from http import HTTPStatus
from typing import Any, Final

from botocore.exceptions import BotoCoreError, ClientError
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from server.apps.selection.exceptions import SelectionError
from server.apps.selection.logic import session_manager
from server.apps.selection.logic.selection_engine import SelectionEngine

logger = logging.getLogger(__name__)

# Django session key holding the selection session ID
SESSION_KEY: Final = 'selection_session_id'

_EngineView = Callable[..., JsonResponse]


class BadRequestError(Exception):
    """Raised for malformed or incomplete request payloads."""


def _error(message: str, status: HTTPStatus) -> JsonResponse:
    return JsonResponse({'error': message}, status=status)


def _current_state(engine: SelectionEngine) -> dict[str, Any]:
    """Build the state payload shared by most responses."""
    return {
        'currentDirectory': engine.get_current_directory(),
        'entries': engine.get_entries(),
        'selected': engine.get_selected_entries(),
    }


def _selection_state(engine: SelectionEngine) -> dict[str, Any]:
    return {'selected': engine.get_selected_entries()}


def _get_selection_session(
    request: HttpRequest,
) -> session_manager.SelectionSession:
    """Return the caller's selection session, creating one if needed.

    Args:
        request: Incoming request with a Django session.

    Returns:
        Existing or newly created SelectionSession.

    Raises:
        SessionLimitExceededError: If a new session cannot be created.
    """
    session_id = request.session.get(SESSION_KEY)
    if session_id:
        selection_session = session_manager.get_session(session_id)
        if selection_session is not None:
            session_manager.update_session_activity(session_id)
            return selection_session
        logger.info('Selection session expired: %s', session_id[:8])

    selection_session = session_manager.create_session(
        ip_address=request.META.get('REMOTE_ADDR', ''),
        user_agent=request.META.get('HTTP_USER_AGENT', ''),
    )
    request.session[SESSION_KEY] = selection_session.session_id
    return selection_session


def _read_body(request: HttpRequest) -> dict[str, Any]:
    """Parse the JSON request body.

    Args:
        request: Incoming request.

    Returns:
        Decoded JSON object, empty when the body is empty.

    Raises:
        BadRequestError: If the body is not a JSON object.
    """
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except ValueError as exc:
        raise BadRequestError(f'Invalid JSON body: {exc}') from exc
    if not isinstance(payload, dict):
        raise BadRequestError('Request body must be a JSON object.')
    return payload


def _require_name(payload: dict[str, Any]) -> str:
    name = payload.get('name')
    if not name or not isinstance(name, str):
        raise BadRequestError("The 'name' field is required.")
    return name


def _optional_destination(payload: dict[str, Any]) -> str | None:
    destination = payload.get('destination')
    if destination is not None and not isinstance(destination, str):
        raise BadRequestError("The 'destination' field must be a string.")
    return destination


def engine_view(view: _EngineView) -> _EngineView:
    """Resolve the caller's engine and map request errors to responses.

    The wrapped view receives ``(request, engine, *args, **kwargs)``.
    """

    @functools.wraps(view)
    def wrapper(  # noqa: WPS430
        request: HttpRequest,
        *args: Any,
        **kwargs: Any,
    ) -> JsonResponse:
        try:
            selection_session = _get_selection_session(request)
        except session_manager.SessionLimitExceededError as exc:
            return _error(str(exc), HTTPStatus.SERVICE_UNAVAILABLE)

        try:
            return view(request, selection_session.engine, *args, **kwargs)
        except BadRequestError as exc:
            return _error(str(exc), HTTPStatus.BAD_REQUEST)
        except SelectionError as exc:
            return _error(str(exc), HTTPStatus.BAD_REQUEST)
        except OSError as exc:
            # Destination could not be prepared; no entry was touched
            logger.exception('Filesystem error in %s', view.__name__)
            return _error(str(exc), HTTPStatus.BAD_REQUEST)
        except (BotoCoreError, ClientError) as exc:
            logger.exception('Object storage error in %s', view.__name__)
            return _error(str(exc), HTTPStatus.BAD_GATEWAY)

    return wrapper


@require_GET
@engine_view
def load_directory(
    request: HttpRequest,
    engine: SelectionEngine,
) -> JsonResponse:
    """List a directory: ``GET /api/files?path=<directory>``."""
    directory_path = request.GET.get('path')
    if not directory_path:
        raise BadRequestError("The 'path' parameter is required.")
    try:
        engine.load_directory(directory_path)
    except OSError as exc:
        logger.info('Cannot load directory %s: %s', directory_path, exc)
        return _error(str(exc), HTTPStatus.NOT_FOUND)
    return JsonResponse(_current_state(engine))


@require_GET
@engine_view
def current_state(
    request: HttpRequest,
    engine: SelectionEngine,
) -> JsonResponse:
    """Return the current directory, entries and selection."""
    return JsonResponse(_current_state(engine))


@csrf_exempt
@require_POST
@engine_view
def select_entry(
    request: HttpRequest,
    engine: SelectionEngine,
) -> JsonResponse:
    """Select one entry: ``{"name": "file.txt"}``."""
    engine.select(_require_name(_read_body(request)))
    return JsonResponse(_selection_state(engine))


@csrf_exempt
@require_POST
@engine_view
def deselect_entry(
    request: HttpRequest,
    engine: SelectionEngine,
) -> JsonResponse:
    """Deselect one entry: ``{"name": "file.txt"}``."""
    engine.deselect(_require_name(_read_body(request)))
    return JsonResponse(_selection_state(engine))


@csrf_exempt
@require_POST
@engine_view
def select_all(
    request: HttpRequest,
    engine: SelectionEngine,
) -> JsonResponse:
    engine.select_all()
    return JsonResponse(_selection_state(engine))


@csrf_exempt
@require_POST
@engine_view
def deselect_all(
    request: HttpRequest,
    engine: SelectionEngine,
) -> JsonResponse:
    engine.deselect_all()
    return JsonResponse(_selection_state(engine))


@csrf_exempt
@require_POST
@engine_view
def copy_selection(
    request: HttpRequest,
    engine: SelectionEngine,
) -> JsonResponse:
    """Copy the selection: ``{"destination": "path"}`` (optional)."""
    destination = _optional_destination(_read_body(request))
    operation_result = engine.copy_selection(destination)
    return JsonResponse({**operation_result.to_dict(), **_current_state(engine)})


@csrf_exempt
@require_POST
@engine_view
def move_selection(
    request: HttpRequest,
    engine: SelectionEngine,
) -> JsonResponse:
    """Move the selection: ``{"destination": "path"}`` (optional)."""
    destination = _optional_destination(_read_body(request))
    operation_result = engine.move_selection(destination)
    return JsonResponse({**operation_result.to_dict(), **_current_state(engine)})


@csrf_exempt
@require_POST
@engine_view
def delete_selection(
    request: HttpRequest,
    engine: SelectionEngine,
) -> JsonResponse:
    """Delete the selection."""
    operation_result = engine.delete_selection()
    return JsonResponse({**operation_result.to_dict(), **_current_state(engine)})
