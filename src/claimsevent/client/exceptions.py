"""Errors raised by the claims API client."""

from __future__ import annotations

from typing import Optional

from ..exceptions import ClaimsEventError


ERROR_MESSAGE_FORMAT = "{status} response from {method} {endpoint}: {message}"


class ClaimsApiClientException(ClaimsEventError):
    """Raised when a call to the claims data API fails."""

    default_status_label = "Unexpected"

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        endpoint: Optional[str] = None,
        http_status: Optional[int] = None,
    ):
        self.error_message = message
        self.method = method
        self.endpoint = endpoint
        self.http_status = http_status
        if method is None and endpoint is None:
            super().__init__(message)
        else:
            status = http_status if http_status is not None else self.default_status_label
            super().__init__(
                ERROR_MESSAGE_FORMAT.format(
                    status=status, method=method, endpoint=endpoint, message=message
                )
            )


class ClaimsApiBadRequestException(ClaimsApiClientException):
    """The claims API rejected the request with a 4xx status."""

    default_status_label = "Client error"


class ClaimsApiServerErrorException(ClaimsApiClientException):
    """The claims API failed with a 5xx status."""

    default_status_label = "Server error"
