from __future__ import annotations
import base64
import binascii
import json
import logging
import math
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable

import jwt

from ..errors import AuthError, PortalError, HttpError, NetworkFailure, NoToken, Rejected, SessionExpired, UnrecognizedResponse

log = logging.getLogger(__name__)

LOGIN_SUCCESS = "Login successful"
SESSION_MAX_AGE = timedelta(hours=24)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _finite_number(v) -> bool:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return False
    return isinstance(v, int) or math.isfinite(v)


# ---------- session token ----------
@dataclass(frozen=True)
class SimpleSession:
    """Self-issued token: base64(JSON {studentId, timestamp}), timestamp in epoch ms."""
    student_id: str
    created_at: int


@dataclass(frozen=True)
class ExternalSession:
    """Backend-issued JWT. Claims are decoded but never verified."""
    claims: dict


@dataclass(frozen=True)
class UserInfo:
    student_id: str
    name: str | None = None
    email: str | None = None
    department: str | None = None


def encode_simple(session: SimpleSession) -> str:
    raw = json.dumps({"studentId": session.student_id, "timestamp": session.created_at})
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def parse_simple(token: str) -> SimpleSession | None:
    try:
        data = json.loads(base64.b64decode(token, validate=True).decode("utf-8"))
    except (binascii.Error, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    sid, ts = data.get("studentId"), data.get("timestamp")
    if sid is None or not _finite_number(ts):
        return None
    return SimpleSession(student_id=str(sid), created_at=int(ts))


def parse_external(token: str) -> ExternalSession | None:
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None
    return ExternalSession(claims=claims) if isinstance(claims, dict) else None


# Tried in this order; the first parser that accepts the token wins.
TOKEN_PARSERS = (parse_simple, parse_external)


def parse_session_token(token: str | None) -> SimpleSession | ExternalSession | None:
    if not token:
        return None
    for parser in TOKEN_PARSERS:
        session = parser(token)
        if session is not None:
            return session
    return None


# ---------- service ----------
class AuthService:
    def __init__(self, api_client, store, clock: Callable[[], int] | None = None,
                 max_age: timedelta = SESSION_MAX_AGE):
        self.client = api_client
        self.store = store
        self.clock = clock or _now_ms
        self.max_age_ms = int(max_age.total_seconds() * 1000)

    def get_token(self) -> str | None:
        return self.store.get()

    def _expired(self, session) -> bool:
        now = self.clock()
        if isinstance(session, SimpleSession):
            return now - session.created_at > self.max_age_ms
        exp = session.claims.get("exp")
        if not _finite_number(exp):
            return True
        return exp <= now / 1000

    def _current_session(self):
        token = self.store.get()
        if not token:
            return None
        session = parse_session_token(token)
        if session is None:
            log.info("Discarding unreadable session token")
            self.store.clear()
            return None
        if self._expired(session):
            log.info("Session expired, clearing it")
            self.store.clear()
            return None
        return session

    def is_authenticated(self) -> bool:
        return self._current_session() is not None

    def get_user_info(self) -> UserInfo | None:
        session = self._current_session()
        if session is None:
            return None
        if isinstance(session, SimpleSession):
            return UserInfo(student_id=session.student_id)
        c = session.claims
        sid = c.get("studentId") or c.get("sub")
        return UserInfo(
            student_id=str(sid) if sid is not None else None,
            name=c.get("name"), email=c.get("email"), department=c.get("department"),
        )

    def get_auth_header(self) -> dict:
        if not self.is_authenticated():
            return {}
        return {"Authorization": f"Bearer {self.store.get()}"}

    def _login(self, student_id, password) -> UserInfo:
        try:
            data = self.client.login(student_id, password)
        except HttpError as e:
            if 200 <= e.status < 300:
                raise UnrecognizedResponse() from e
            raise Rejected(e.message) from e
        if not (isinstance(data, dict) and data.get("message") == LOGIN_SUCCESS):
            raise UnrecognizedResponse()
        session = SimpleSession(student_id=str(student_id), created_at=self.clock())
        self.store.set(encode_simple(session))
        return UserInfo(student_id=session.student_id)

    def login(self, student_id, password) -> dict:
        try:
            user = self._login(student_id, password)
        except (AuthError, NetworkFailure) as e:
            log.warning("Login failed for %s: %s", student_id, e)
            return {"success": False, "message": str(e) or "Login failed. Please try again."}
        log.info("Login successful for %s", user.student_id)
        return {"success": True, "user": user, "message": LOGIN_SUCCESS}

    def logout(self) -> None:
        self.store.clear()

    def refresh_token(self) -> bool:
        """Ask the backend for a fresh token. Any failure ends the session."""
        token = self.store.get()
        if not token:
            self.logout()
            return False
        try:
            data = self.client.refresh(token)
        except PortalError as e:
            log.info("Token refresh failed: %s", e)
            self.logout()
            return False
        new_token = data.get("token") if isinstance(data, dict) else None
        if not isinstance(new_token, str) or not new_token:
            self.logout()
            return False
        self.store.set(new_token)
        return True

    def authenticated_request(self, method: str, path: str, json=None, headers: dict | None = None,
                              max_retries: int = 1):
        token = self.store.get()
        if not token:
            raise NoToken()
        attempt = 0
        while True:
            h = {"Authorization": f"Bearer {token}"}
            h.update(headers or {})
            r = self.client.request(method, path, headers=h, json=json)
            if r.status_code != 401:
                return r
            if attempt >= max_retries:
                break
            attempt += 1
            if not self.refresh_token():
                raise SessionExpired()
            token = self.store.get()
        self.logout()
        raise SessionExpired()
