# modules/errors.py
"""
Service-layer exceptions.
Services raise these; app.py turns them into {"ok": false, "error": ...}
responses with the matching HTTP status.
"""


class ServiceError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ServiceError):
    status_code = 400


class PermissionDenied(ServiceError):
    status_code = 403


class NotFound(ServiceError):
    status_code = 404


class Conflict(ServiceError):
    status_code = 409
