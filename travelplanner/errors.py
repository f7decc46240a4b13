# -------------------------------------------------------------
# Error taxonomy shared by the generation pipeline and trip store
# -------------------------------------------------------------
from typing import List, Optional


class TravelPlannerError(Exception):
    """
    Base error rendered by the app as ``{error, message, raw?}``.
    Subclasses pin the HTTP status and the short ``error`` label.
    """

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.raw = raw

    def to_payload(self) -> dict:
        payload = {"error": self.error, "message": self.message}
        if self.raw is not None:
            payload["raw"] = self.raw
        return payload


class MissingFieldsError(TravelPlannerError):
    status_code = 400
    error = "Missing required fields"


class ConfigError(TravelPlannerError):
    status_code = 500
    error = "Server configuration error"


class ProviderError(TravelPlannerError):
    status_code = 500
    error = "Internal Server Error"


class TransientProviderError(ProviderError):
    """Rate limit or overload reported by the provider after retries ran out."""


class RateLimitError(TransientProviderError):
    status_code = 429
    error = "Rate Limit Exceeded"


class ServiceUnavailableError(TransientProviderError):
    status_code = 503
    error = "Service Unavailable"


class AuthError(ProviderError):
    status_code = 401
    error = "Authorization Error"


class ModelUnavailableError(ProviderError):
    status_code = 500
    error = "Model Not Found"

    def __init__(self, message: str, models_tried: Optional[List[str]] = None):
        super().__init__(message)
        self.models_tried = list(models_tried or [])


class RequestTimeoutError(ProviderError):
    status_code = 504
    error = "Request Timeout"


class ParseError(TravelPlannerError):
    status_code = 500
    error = "Parsing Error"


class InvalidShapeError(ParseError):
    pass


class NotFoundError(TravelPlannerError):
    status_code = 404
    error = "Not Found"
