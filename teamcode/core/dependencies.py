# teamcode/core/dependencies.py
from starlette.requests import HTTPConnection

from teamcode.core.notifier import ChangeNotifier


def get_notifier(connection: HTTPConnection) -> ChangeNotifier:
    """
    The app-wide change notifier, for both HTTP routes and WebSockets.
    """
    return connection.app.state.notifier
