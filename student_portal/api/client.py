from __future__ import annotations
import logging
import os

import requests

from ..errors import HttpError, NetworkFailure

log = logging.getLogger(__name__)


def student_id_param(student_id):
    """Backend expects a numeric id; anything else is forwarded untouched."""
    s = str(student_id).strip()
    return int(s) if s.isascii() and s.isdigit() else student_id


class APIClient:
    def __init__(self, base_url=None, timeout=15, session: requests.Session | None = None):
        self.base_url = (base_url or os.environ.get("API_BASE_URL", "http://127.0.0.1:5000")).rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()

    def request(self, method: str, path: str, headers: dict | None = None, json=None) -> requests.Response:
        url = f"{self.base_url}{path}"
        h = {"Accept": "application/json", "Content-Type": "application/json"}
        h.update(headers or {})
        try:
            r = self.http.request(method, url, headers=h, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            log.warning("%s %s failed: %s", method, path, type(e).__name__)
            raise NetworkFailure(f"Network error: {e}") from e
        if not r.ok:
            log.info("%s %s -> HTTP %s", method, path, r.status_code)
        return r

    @staticmethod
    def error_message(r: requests.Response, default_error: str) -> str:
        try:
            body = r.json()
        except ValueError:
            return default_error
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"{default_error}: {r.status_code}"

    def fetch_json(self, method: str, path: str, default_error: str, headers: dict | None = None, json=None):
        return self.json_or_error(self.request(method, path, headers=headers, json=json), default_error)

    def json_or_error(self, r: requests.Response, default_error: str):
        if not r.ok:
            raise HttpError(r.status_code, self.error_message(r, default_error))
        try:
            return r.json()
        except ValueError:
            raise HttpError(r.status_code, f"{default_error}: invalid JSON response") from None

    def login(self, student_id, password):
        return self.fetch_json(
            "POST", "/students/login", "Login failed",
            json={"student_id": student_id_param(student_id), "password": password},
        )

    def refresh(self, token: str):
        return self.fetch_json(
            "POST", "/students/login/refresh", "Token refresh failed",
            headers={"Authorization": f"Bearer {token}"},
        )
