"""
Gerrit API Client

Handles Gerrit REST API authentication and communication.
Provides the batched set-review call used to post robot comments.
"""

import json
import logging
from typing import Dict, Optional, Tuple
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..exceptions import SubmissionError
from ..models.review import ReviewInput


logger = logging.getLogger(__name__)

# Gerrit prefixes JSON responses to prevent XSSI
XSSI_PREFIX = ")]}'"


class GerritAPIError(SubmissionError):
    """Gerrit API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_text: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text


class GerritClient:
    """
    Gerrit REST API client.

    Authenticated requests go to the /a/ endpoints with HTTP basic auth.
    Only idempotent GET requests are retried; review submissions are sent
    exactly once.
    """

    def __init__(
        self,
        base_url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 30,
    ):
        """
        Initialize Gerrit client.

        Args:
            base_url: Gerrit server URL (e.g. https://review.example.com)
            username: HTTP username; anonymous access when omitted
            password: HTTP password generated in Gerrit settings
            timeout: Default request timeout in seconds
        """
        if not base_url:
            raise ValueError("Gerrit base URL is required")

        self.base_url = base_url.rstrip('/')
        self.username = username
        self.timeout = timeout
        self.session = self._create_session(username, password)

    @property
    def authenticated(self) -> bool:
        return self.session.auth is not None

    def _create_session(self, username: Optional[str], password: Optional[str]) -> requests.Session:
        """Create requests session with GET-only retry strategy and authentication."""
        session = requests.Session()

        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=frozenset(['GET']),
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        if username and password:
            session.auth = (username, password)

        session.headers.update({
            'Accept': 'application/json',
            'User-Agent': 'gerrit-reviewer/1.0',
        })

        return session

    def _url(self, endpoint: str) -> str:
        prefix = '/a' if self.authenticated else ''
        return f"{self.base_url}{prefix}/{endpoint.lstrip('/')}"

    @staticmethod
    def _decode(response: requests.Response) -> Dict:
        """Strip the XSSI prefix and decode the JSON body."""
        text = response.text
        if text.startswith(XSSI_PREFIX):
            text = text[len(XSSI_PREFIX):]
        text = text.strip()
        return json.loads(text) if text else {}

    def _make_request(self, method: str, endpoint: str, timeout: Optional[float] = None, **kwargs) -> Dict:
        """
        Make a request to the Gerrit API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            timeout: Request timeout in seconds, overriding the default
            **kwargs: Additional arguments for requests

        Returns:
            Decoded JSON response

        Raises:
            GerritAPIError: For transport and API errors
        """
        url = self._url(endpoint)

        try:
            response = self.session.request(
                method, url, timeout=timeout if timeout is not None else self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GerritAPIError(f"{method} {endpoint} failed: {e}") from e

        if not response.ok:
            raise GerritAPIError(
                f"Gerrit API error: {method} {endpoint}: {response.status_code} - {response.text.strip()}",
                status_code=response.status_code,
                response_text=response.text,
            )

        try:
            return self._decode(response)
        except ValueError as e:
            raise GerritAPIError(f"{method} {endpoint}: invalid JSON response: {e}") from e

    def set_review(
        self,
        change_id: str,
        revision_id: str,
        review: ReviewInput,
        timeout: Optional[float] = None,
    ) -> Dict:
        """
        Post a review to a change revision.

        POST /changes/{change-id}/revisions/{revision-id}/review

        Args:
            change_id: Gerrit change identifier
            revision_id: Revision identifier
            review: Review payload
            timeout: Request timeout in seconds

        Returns:
            Gerrit ReviewResult

        Raises:
            GerritAPIError: If the submission fails
        """
        logger.info(
            f"Posting {review.total_comments} robot comments to change {change_id} revision {revision_id}"
        )
        endpoint = f"/changes/{quote(change_id, safe='')}/revisions/{quote(revision_id, safe='')}/review"
        return self._make_request('POST', endpoint, timeout=timeout, json=review.to_payload())

    def test_authentication(self) -> Tuple[bool, Dict]:
        """
        Test Gerrit API authentication.

        Returns:
            Tuple of (success, account_info)
        """
        try:
            account = self._make_request('GET', '/accounts/self')
            logger.info(f"Authentication successful for user: {account.get('username')}")
            return True, account
        except GerritAPIError as e:
            logger.error(f"Authentication failed: {e}")
            return False, {}
