"""HTTP access to the REST API with the cookie session of a browser.

Login stores the ``access_token`` and ``refreshToken`` cookies in the
session; a request answered 401 triggers one refresh and one retry.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "access_token"
AUTH_PREFIX = "/api/auth/"
DEFAULT_TIMEOUT = 10


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ApiClient:
    def __init__(
        self,
        base_url: str,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def access_token(self) -> str | None:
        return self.session.cookies.get(ACCESS_COOKIE)

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def login(self, name: str, event_code: str) -> dict:
        data = self.post("/api/auth/login", json={"name": name, "eventCode": event_code})
        return data["user"]

    def refresh(self) -> bool:
        response = self.session.post(self.url("/api/auth/refresh"), timeout=self.timeout)
        if response.status_code != requests.codes.ok:
            logger.info("Session refresh refused (%s)", response.status_code)
            return False
        return True

    def logout(self) -> None:
        self.post("/api/auth/logout")

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        kwargs.setdefault("timeout", self.timeout)
        response = self.session.request(method, self.url(path), **kwargs)
        if (
            response.status_code == requests.codes.unauthorized
            and not path.startswith(AUTH_PREFIX)
            and self.refresh()
        ):
            response = self.session.request(method, self.url(path), **kwargs)
        return self._decode(response)

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self.request("POST", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> Any:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self.request("DELETE", path, **kwargs)

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        is_json = response.headers.get("Content-Type", "").startswith("application/json")
        if response.ok:
            return response.json() if is_json else response.text
        message = response.reason or "Erreur"
        if is_json:
            message = response.json().get("error", message)
        raise ApiError(response.status_code, message)
