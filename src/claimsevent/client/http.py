"""HTTP client for the claims data API."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import ClaimsApiConfig
from ..submissions import Claim, ClaimStatus, Submission, SubmissionStatus
from ..submissions.mapping import claim_from_dict, submission_from_dict
from ..validators.lookup import ACTIVE_CLAIM_STATUSES, PREVIOUS_SUBMISSION_STATUSES
from .dto import UpdateClaimRequest, UpdateSubmissionRequest
from .exceptions import (
    ClaimsApiBadRequestException,
    ClaimsApiClientException,
    ClaimsApiServerErrorException,
)


logger = logging.getLogger(__name__)

API_PREFIX = "/api/v0"


def http_session(timeout: float = 20, retries: int = 3, backoff_factor: float = 0.6) -> requests.Session:
    s = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET", "PATCH"),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers.update({"Accept": "application/json"})
    # store desired default timeout on the session for convenience
    s.request_timeout = timeout  # type: ignore[attr-defined]
    return s


class ClaimsApiClient:
    """Reads submissions and claims from, and writes results to, the claims data API."""

    def __init__(self, config: ClaimsApiConfig, session: Optional[requests.Session] = None) -> None:
        self.base_url = config.base_url
        self.timeout = config.timeout_seconds
        self._http = session or http_session(
            timeout=config.timeout_seconds,
            retries=config.retries,
            backoff_factor=config.backoff_factor,
        )

    def get_submission(self, submission_id: str) -> Submission:
        endpoint = f"{API_PREFIX}/submissions/{submission_id}"
        payload = self._request("GET", endpoint).json()
        return submission_from_dict(payload, path=Path(endpoint))

    def get_claims(
        self,
        office_code: str,
        *,
        submission_statuses: Sequence[SubmissionStatus] = (),
        claim_statuses: Sequence[ClaimStatus] = (),
        fee_code: Optional[str] = None,
        unique_file_number: Optional[str] = None,
        unique_client_number: Optional[str] = None,
        unique_case_id: Optional[str] = None,
    ) -> List[Claim]:
        endpoint = f"{API_PREFIX}/claims"
        params: Dict[str, Any] = {"office_code": office_code}
        if submission_statuses:
            params["submission_statuses"] = [status.value for status in submission_statuses]
        if claim_statuses:
            params["claim_statuses"] = [status.value for status in claim_statuses]
        optional = {
            "fee_code": fee_code,
            "unique_file_number": unique_file_number,
            "unique_client_number": unique_client_number,
            "unique_case_id": unique_case_id,
        }
        params.update({key: value for key, value in optional.items() if value is not None})

        payload = self._request("GET", endpoint, params=params).json()
        return [
            claim_from_dict(record, path=Path(endpoint), row=index)
            for index, record in enumerate(_content(payload), start=1)
        ]

    def find_claims(
        self,
        office_code: str,
        *,
        fee_code: Optional[str] = None,
        unique_file_number: Optional[str] = None,
        unique_client_number: Optional[str] = None,
        unique_case_id: Optional[str] = None,
    ) -> List[Claim]:
        return self.get_claims(
            office_code,
            submission_statuses=PREVIOUS_SUBMISSION_STATUSES,
            claim_statuses=ACTIVE_CLAIM_STATUSES,
            fee_code=fee_code,
            unique_file_number=unique_file_number,
            unique_client_number=unique_client_number,
            unique_case_id=unique_case_id,
        )

    def find_submissions(
        self,
        office_code: str,
        *,
        area_of_law: str,
        submission_period: str,
    ) -> List[Submission]:
        endpoint = f"{API_PREFIX}/submissions"
        params = {
            "offices": [office_code],
            "area_of_law": area_of_law,
            "submission_period": submission_period,
        }
        payload = self._request("GET", endpoint, params=params).json()
        return [submission_from_dict(record, path=Path(endpoint)) for record in _content(payload)]

    def update_claim(self, submission_id: str, claim_id: str, request: UpdateClaimRequest) -> None:
        endpoint = f"{API_PREFIX}/submissions/{submission_id}/claims/{claim_id}"
        self._request("PATCH", endpoint, json=request.as_dict())

    def update_submission(self, submission_id: str, request: UpdateSubmissionRequest) -> None:
        endpoint = f"{API_PREFIX}/submissions/{submission_id}"
        self._request("PATCH", endpoint, json=request.as_dict())

    def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        url = f"{self.base_url}{endpoint}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self._http.request(
                method,
                url,
                params=params,
                json=json,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ClaimsApiClientException(str(exc), method, endpoint) from exc
        _raise_for_status(response, method, endpoint)
        return response


def _raise_for_status(response: requests.Response, method: str, endpoint: str) -> None:
    status = response.status_code
    if status < 400:
        return
    logger.warning("Claims API returned %s for %s %s", status, method, endpoint)
    if status < 500:
        raise ClaimsApiBadRequestException(response.text, method, endpoint, status)
    raise ClaimsApiServerErrorException(response.text, method, endpoint, status)


def _content(payload: Any) -> List[Dict[str, Any]]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        return list(payload.get("content") or [])
    raise ClaimsApiClientException(f"unexpected response payload of type {type(payload).__name__}")
