"""Unit tests for the SendGrid and Resend backends."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from integrations.email import EmailAttachment, EmailRequest, ResendBackend, SendGridBackend
from integrations.email.resend import RESEND_API_URL, build_resend_payload
from integrations.email.sendgrid import SENDGRID_API_URL, build_sendgrid_payload


def _request(**overrides):
    fields = {
        "to": ["a@example.com"],
        "subject": "Reserva",
        "text": "Texto",
        "html": "<p>Texto</p>",
        "from_address": "noreply@canchaya.com",
        "from_name": "CanchaYA",
    }
    fields.update(overrides)
    return EmailRequest(**fields)


def _response(status_code=200, json_body=None, headers=None):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.headers = headers or {}
    response.json.return_value = json_body if json_body is not None else {}
    response.text = ""
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(response=response)
    return response


@pytest.mark.unit
class TestSendGridBackend:
    """Tests for SendGrid delivery."""

    def test_payload(self):
        payload = build_sendgrid_payload(
            _request(
                cc=["c@example.com"],
                reply_to="club@example.com",
                attachments=[EmailAttachment(filename="a.txt", content=b"hi")],
            )
        )

        personalization = payload["personalizations"][0]
        assert personalization["to"] == [{"email": "a@example.com"}]
        assert personalization["cc"] == [{"email": "c@example.com"}]
        assert payload["from"] == {"email": "noreply@canchaya.com", "name": "CanchaYA"}
        assert [c["type"] for c in payload["content"]] == ["text/plain", "text/html"]
        assert payload["reply_to"] == {"email": "club@example.com"}
        assert payload["attachments"][0]["content"] == "aGk="

    @patch("integrations.email.sendgrid.requests.post")
    def test_send_success(self, mock_post):
        mock_post.return_value = _response(202, headers={"X-Message-Id": "sg-1"})

        result = SendGridBackend(api_key="key").send(_request())

        assert result.is_success
        assert result.data == {"message_id": "sg-1"}
        args, kwargs = mock_post.call_args
        assert args[0] == SENDGRID_API_URL
        assert kwargs["headers"]["Authorization"] == "Bearer key"

    def test_missing_key(self):
        result = SendGridBackend(api_key=None).send(_request())

        assert result.error_code == "MISSING_CREDENTIALS"

    @patch("integrations.email.sendgrid.requests.post")
    def test_rate_limited(self, mock_post):
        mock_post.return_value = _response(429, headers={"Retry-After": "30"})

        result = SendGridBackend(api_key="key").send(_request())

        assert result.error_code == "RATE_LIMITED"
        assert result.retry_after == 30

    @patch("integrations.email.sendgrid.requests.post")
    def test_timeout(self, mock_post):
        mock_post.side_effect = requests.Timeout()

        result = SendGridBackend(api_key="key").send(_request())

        assert result.is_retryable
        assert result.error_code == "TIMEOUT"


@pytest.mark.unit
class TestResendBackend:
    """Tests for Resend delivery."""

    def test_payload(self):
        payload = build_resend_payload(_request(bcc=["b@example.com"]))

        assert payload["from"] == "CanchaYA <noreply@canchaya.com>"
        assert payload["to"] == ["a@example.com"]
        assert payload["bcc"] == ["b@example.com"]
        assert payload["text"] == "Texto"
        assert "cc" not in payload

    @patch("integrations.email.resend.requests.post")
    def test_send_success(self, mock_post):
        mock_post.return_value = _response(200, json_body={"id": "re-1"})

        result = ResendBackend(api_key="key").send(_request())

        assert result.is_success
        assert result.data == {"message_id": "re-1"}
        assert mock_post.call_args[0][0] == RESEND_API_URL

    @patch("integrations.email.resend.requests.post")
    def test_invalid_json_body_still_succeeds(self, mock_post):
        response = _response(200)
        response.json.side_effect = ValueError("not json")
        mock_post.return_value = response

        result = ResendBackend(api_key="key").send(_request())

        assert result.is_success
        assert result.data == {"message_id": None}

    @patch("integrations.email.resend.requests.post")
    def test_client_error(self, mock_post):
        mock_post.return_value = _response(
            422, json_body={"message": "Invalid `to` field"}
        )

        result = ResendBackend(api_key="key").send(_request())

        assert result.error_code == "HTTP_ERROR"
        assert "Invalid `to` field" in result.message
