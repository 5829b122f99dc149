from __future__ import annotations


class PortalError(Exception):
    """Base class for every error raised by the portal client."""


# ---- auth ----
class AuthError(PortalError):
    pass


class Rejected(AuthError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnrecognizedResponse(AuthError):
    def __init__(self, message: str = "Login response not recognized"):
        super().__init__(message)
        self.message = message


class SessionExpired(AuthError):
    def __init__(self, message: str = "Session expired. Please login again."):
        super().__init__(message)
        self.message = message


class NoToken(AuthError):
    def __init__(self, message: str = "No authentication token"):
        super().__init__(message)
        self.message = message


# ---- fetch ----
class FetchError(PortalError):
    pass


class HttpError(FetchError):
    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message


class NetworkFailure(FetchError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
