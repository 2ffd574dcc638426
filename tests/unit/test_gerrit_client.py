"""
Unit tests for the Gerrit API client.
"""

import json

import pytest
import requests
from unittest.mock import Mock, patch

from gerrit_reviewer.exceptions import SubmissionError
from gerrit_reviewer.gerrit.client import GerritAPIError, GerritClient
from gerrit_reviewer.models.review import ReviewInput, RobotCommentInput


def make_response(status_code=200, text=")]}'\n{}"):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.text = text
    return response


def make_review():
    return ReviewInput(robot_comments={
        "a.go": [RobotCommentInput(message="issue", line=3, robot_id="gerrit-reviewer")],
    })


class TestGerritClient:
    """Unit tests for GerritClient class."""

    def test_client_initialization(self):
        client = GerritClient("https://review.example.com/", username="bot", password="secret")

        assert client.base_url == "https://review.example.com"
        assert client.authenticated
        assert client.session.auth == ("bot", "secret")

    def test_client_requires_url(self):
        with pytest.raises(ValueError):
            GerritClient("")

    def test_anonymous_urls_have_no_auth_prefix(self):
        client = GerritClient("https://review.example.com")

        assert not client.authenticated
        assert client._url("/changes/1") == "https://review.example.com/changes/1"

    @patch('requests.Session.request')
    def test_set_review(self, mock_request):
        mock_request.return_value = make_response(text=')]}\'\n{"labels": {}}')
        client = GerritClient("https://review.example.com", username="bot", password="secret")

        result = client.set_review("myproject~1234", "abc123", make_review(), timeout=5)

        assert result == {"labels": {}}
        mock_request.assert_called_once()
        args, kwargs = mock_request.call_args
        assert args[0] == 'POST'
        assert args[1] == "https://review.example.com/a/changes/myproject~1234/revisions/abc123/review"
        assert kwargs['timeout'] == 5
        assert kwargs['json'] == {
            'robot_comments': {
                'a.go': [{
                    'message': 'issue',
                    'line': 3,
                    'robot_id': 'gerrit-reviewer',
                    'robot_run_id': '',
                    'url': '',
                    'fix_suggestions': [],
                }],
            },
        }

    @patch('requests.Session.request')
    def test_set_review_quotes_change_id(self, mock_request):
        mock_request.return_value = make_response()
        client = GerritClient("https://review.example.com")

        client.set_review("my/project~1234", "abc123", make_review())

        assert mock_request.call_args[0][1] == (
            "https://review.example.com/changes/my%2Fproject~1234/revisions/abc123/review"
        )

    @patch('requests.Session.request')
    def test_set_review_rejected(self, mock_request):
        mock_request.return_value = make_response(status_code=400, text="robot comment on line outside diff")
        client = GerritClient("https://review.example.com")

        with pytest.raises(GerritAPIError) as exc_info:
            client.set_review("1234", "abc123", make_review())

        assert exc_info.value.status_code == 400
        assert isinstance(exc_info.value, SubmissionError)
        assert mock_request.call_count == 1

    @patch('requests.Session.request', side_effect=requests.Timeout("read timed out"))
    def test_set_review_timeout(self, mock_request):
        client = GerritClient("https://review.example.com")

        with pytest.raises(SubmissionError, match="read timed out"):
            client.set_review("1234", "abc123", make_review(), timeout=0.1)

    @patch('requests.Session.request')
    def test_authentication_success(self, mock_request):
        mock_request.return_value = make_response(text=")]}'\n" + json.dumps({'username': 'bot', '_account_id': 7}))
        client = GerritClient("https://review.example.com", username="bot", password="secret")

        success, account = client.test_authentication()

        assert success is True
        assert account['_account_id'] == 7

    @patch('requests.Session.request')
    def test_authentication_failure(self, mock_request):
        mock_request.return_value = make_response(status_code=401, text="Unauthorized")
        client = GerritClient("https://review.example.com", username="bot", password="wrong")

        success, account = client.test_authentication()

        assert success is False
        assert account == {}

    def test_post_is_not_retried(self):
        client = GerritClient("https://review.example.com")
        retries = client.session.get_adapter("https://review.example.com").max_retries

        assert 'POST' not in retries.allowed_methods
        assert 'GET' in retries.allowed_methods
