"""HTTP and WebSocket front end (Starlette).

Routes are thin: they decode requests, call :class:`StudyService`, and
map result codes onto HTTP statuses.
"""

from studyhours.server.app import create_app, create_app_from_settings

__all__ = ["create_app", "create_app_from_settings"]
