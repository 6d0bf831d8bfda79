"""
REST client for the users API exercised by the API test suite.
"""
from typing import Optional, Dict, Any

import requests
from pydantic import BaseModel, Field

from ..config import ConfigReader, config as default_config
from ..logging_config import get_logger

logger = get_logger("reelcheck.api.client")

DEFAULT_TIMEOUT_SECONDS = 30


class User(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    gender: str = Field(..., max_length=20)
    status: str = Field("active", max_length=20)


class UserAPIClient:
    """Thin wrapper over a requests.Session preconfigured from config."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        config: Optional[ConfigReader] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        config = config or default_config
        if base_url is None:
            base_url = config.get("api.baseUrl").rstrip("/") + "/" + config.get("api.basePath").strip("/")
        if token is None:
            token = config.get("api.token")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {token}",
        })

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        response = self._session.request(method, url, json=json, timeout=self.timeout)
        logger.info(f"{method} {url} -> {response.status_code}")
        return response

    def create_user(self, user: User) -> requests.Response:
        return self._request("POST", "/users", json=user.model_dump())

    def get_user(self, user_id: int) -> requests.Response:
        return self._request("GET", f"/users/{user_id}")

    def update_user(self, user_id: int, user: User) -> requests.Response:
        return self._request("PUT", f"/users/{user_id}", json=user.model_dump())

    def delete_user(self, user_id: int) -> requests.Response:
        return self._request("DELETE", f"/users/{user_id}")

    def close(self):
        self._session.close()
