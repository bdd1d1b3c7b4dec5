from .base import FootballGateway
from .exceptions import ApiFootballHTTPError, RateLimitError, TransientAPIError
from .gateway import ApiFootballGateway
from .models import ApiResponse

__all__ = [
    "FootballGateway",
    "ApiFootballGateway",
    "ApiResponse",
    "ApiFootballHTTPError",
    "RateLimitError",
    "TransientAPIError",
]
