"""HTTP clients for the annotation and auth services."""

import logging
from typing import Any, Optional

import requests
from pydantic import ValidationError

from annotate_canvas.models.annotation import (
    Annotation,
    Credentials,
    MessageResponse,
    TokenResponse,
)

from .exceptions import (
    AnnotationNotFoundError,
    AuthorizationError,
    InvalidCredentialsError,
    RemoteServiceError,
)
from .session import Session

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def _response_message(response: Any, default: str) -> str:
    """Pull ``msg`` out of a JSON error body, fall back to ``default``."""
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        return str(body.get("msg") or body.get("detail") or default)
    return default


class _HttpClient:
    """
    Shared request plumbing.

    ``http`` is anything with a ``requests.Session`` style ``request`` method;
    a ``requests.Session`` by default.
    """

    def __init__(self, base_url: str, http: Any = None, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout

    def _send(self, method: str, path: str, headers: Optional[dict] = None, **kwargs):
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            return self.http.request(
                method, url, headers=headers or {}, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise RemoteServiceError(
                "The annotation service is unreachable.",
                log_message=f"{method} {url} failed: {e}",
            ) from e

    @staticmethod
    def _raise_for_status(response: Any, method: str, path: str) -> None:
        status = response.status_code
        if status < 400:
            return
        message = _response_message(response, f"Request failed with status {status}")
        log_message = f"{method} {path} -> {status}"
        if status in (401, 403):
            raise AuthorizationError(message, log_message=log_message)
        if status == 404:
            raise AnnotationNotFoundError(message, log_message=log_message)
        raise RemoteServiceError(message, log_message=log_message, status_code=status)


class AnnotationApiClient(_HttpClient):
    """Client for the owner-scoped /annotations routes."""

    def __init__(
        self,
        session: Session,
        base_url: str,
        http: Any = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(base_url=base_url, http=http, timeout=timeout)
        self.session = session

    def list_annotations(self) -> list[Annotation]:
        body = self._request("GET", "/annotations")
        if not isinstance(body, list):
            raise RemoteServiceError("Unexpected response when listing annotations.")
        return [self._parse(item) for item in body]

    def create_annotation(self, annotation: Annotation) -> Annotation:
        body = self._request("POST", "/annotations", json=annotation.to_create_payload())
        return self._parse(body)

    def update_annotation(self, annotation: Annotation) -> Annotation:
        body = self._request(
            "PUT", f"/annotations/{annotation.id}", json=annotation.to_update_payload()
        )
        return self._parse(body)

    def delete_annotation(self, annotation_id: str) -> str:
        body = self._request("DELETE", f"/annotations/{annotation_id}")
        try:
            return MessageResponse.model_validate(body).msg
        except ValidationError as e:
            raise RemoteServiceError(
                "Unexpected response when deleting an annotation.", log_message=str(e)
            ) from e

    def _request(self, method: str, path: str, **kwargs) -> Any:
        token = self.session.token
        if not token:
            raise AuthorizationError(
                "You are not logged in.", log_message=f"{method} {path} without token"
            )
        response = self._send(
            method, path, headers={"Authorization": f"Bearer {token}"}, **kwargs
        )
        self._raise_for_status(response, method, path)
        try:
            return response.json()
        except ValueError as e:
            raise RemoteServiceError(
                "The annotation service sent an invalid response.",
                log_message=f"{method} {path}: {e}",
            ) from e

    @staticmethod
    def _parse(item: Any) -> Annotation:
        try:
            return Annotation.model_validate(item)
        except ValidationError as e:
            errors = "; ".join(
                f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors()
            )
            raise RemoteServiceError(
                "The annotation service sent an invalid annotation.", log_message=errors
            ) from e


class AuthApiClient(_HttpClient):
    """Client for /auth/login and /auth/register."""

    def login(self, username: str, password: str) -> str:
        return self._token_for("/auth/login", username, password, "Login failed")

    def register(self, username: str, password: str) -> str:
        return self._token_for("/auth/register", username, password, "Registration failed")

    def _token_for(self, path: str, username: str, password: str, fallback: str) -> str:
        try:
            credentials = Credentials(username=username, password=password)
        except ValidationError as e:
            raise InvalidCredentialsError(
                "Username and password are required.", log_message=str(e)
            ) from e

        response = self._send("POST", path, json=credentials.model_dump())
        if 400 <= response.status_code < 500:
            raise InvalidCredentialsError(
                _response_message(response, fallback),
                log_message=f"POST {path} -> {response.status_code}",
            )
        self._raise_for_status(response, "POST", path)
        try:
            return TokenResponse.model_validate(response.json()).token
        except (ValueError, ValidationError) as e:
            raise RemoteServiceError(fallback, log_message=f"POST {path}: {e}") from e
