"""
Controller for the login and registration forms.

Keeps the auth client away from the widgets and writes the obtained token
into the shared Session.
"""

from annotate_canvas.services.api_client import AuthApiClient
from annotate_canvas.services.session import Session

from .error_handler_middleware import error_handler


class AuthController:
    def __init__(self, auth_client: AuthApiClient, session: Session) -> None:
        self.auth_client = auth_client
        self.session = session

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    @error_handler
    def login(self, username: str, password: str) -> None:
        token = self.auth_client.login(username, password)
        self.session.set(token, username.strip())

    @error_handler
    def register(self, username: str, password: str) -> None:
        token = self.auth_client.register(username, password)
        self.session.set(token, username.strip())

    @error_handler
    def logout(self) -> None:
        self.session.clear()
