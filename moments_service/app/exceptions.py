from __future__ import annotations


class MomentsServiceError(Exception):
    """Base exception for all moments-service errors.

    code 는 API 응답의 detail.code 로, status_code 는 HTTP 상태 코드로 그대로 쓰인다.
    """

    code = "moments_service_error"
    status_code = 500

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class NotFoundError(MomentsServiceError):
    """Unknown user or instant id / username."""

    code = "not_found"
    status_code = 404


class ExpiredError(MomentsServiceError):
    code = "expired"
    status_code = 410


class SelfPurchaseError(MomentsServiceError):
    code = "self_purchase"
    status_code = 403


class ExclusiveSoldError(MomentsServiceError):
    """Exclusive instant already has its single buyer."""

    code = "exclusive_sold"
    status_code = 409


class AlreadyOwnedError(MomentsServiceError):
    code = "already_owned"
    status_code = 409


class InsufficientCreditsError(MomentsServiceError):
    code = "insufficient_credits"
    status_code = 402


class DuplicateUsernameError(MomentsServiceError):
    code = "duplicate_username"
    status_code = 409


class InvalidInputError(MomentsServiceError):
    """Missing or malformed required fields."""

    code = "invalid_input"
    status_code = 400


class InvalidCredentialsError(MomentsServiceError):
    code = "invalid_credentials"
    status_code = 401


class NotAuthenticatedError(MomentsServiceError):
    code = "not_authenticated"
    status_code = 401


class MediaForbiddenError(MomentsServiceError):
    code = "media_forbidden"
    status_code = 403


class PersistenceError(MomentsServiceError):
    """Failures while writing the store snapshot."""

    code = "persistence_failed"
    status_code = 503


class StoreCorruptedError(MomentsServiceError):
    """Stored snapshot exists but cannot be read or validated."""

    code = "store_corrupted"
    status_code = 500
