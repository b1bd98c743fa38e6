"""Claims data API client."""

from .dto import UpdateClaimRequest, UpdateSubmissionRequest
from .exceptions import (
    ClaimsApiBadRequestException,
    ClaimsApiClientException,
    ClaimsApiServerErrorException,
)
from .http import ClaimsApiClient, http_session

__all__ = [
    "ClaimsApiClient",
    "ClaimsApiClientException",
    "ClaimsApiBadRequestException",
    "ClaimsApiServerErrorException",
    "UpdateClaimRequest",
    "UpdateSubmissionRequest",
    "http_session",
]
