"""Tests for the SendGrid announcement emails."""

from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest

from storefront.infrastructure import email as email_module


class RecordingClient:
    instances: list["RecordingClient"] = []
    status_code = 202
    body = b""

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key
        self.sent = []
        RecordingClient.instances.append(self)

    def send(self, message):
        self.sent.append(message)
        return SimpleNamespace(status_code=self.status_code, body=self.body)


@pytest.fixture
def configured(monkeypatch):
    RecordingClient.instances = []
    RecordingClient.status_code = 202
    RecordingClient.body = b""
    settings = SimpleNamespace(sendgrid_api_key="SG.test", sendgrid_sender="tienda@example.com")
    monkeypatch.setattr(email_module, "get_settings", lambda: settings)
    monkeypatch.setattr(email_module, "SendGridAPIClient", RecordingClient)
    return settings


def test_skips_delivery_without_configuration(monkeypatch) -> None:
    settings = SimpleNamespace(sendgrid_api_key=None, sendgrid_sender=None)
    monkeypatch.setattr(email_module, "get_settings", lambda: settings)

    assert email_module.send_email("Asunto", "<p>x</p>", "ana@example.com") is False


def test_announcement_email_is_escaped_and_sent(configured) -> None:
    ok = email_module.send_announcement_email("ana@example.com", "Oferta <hoy>", "2 > 1 & más")

    assert ok is True
    (client,) = RecordingClient.instances
    assert client.api_key == "SG.test"
    message = client.sent[0].get()
    assert message["subject"] == "Oferta <hoy>"
    assert message["from"]["email"] == "tienda@example.com"
    html_content = message["content"][0]["value"]
    assert "Oferta &lt;hoy&gt;" in html_content
    assert "2 &gt; 1 &amp; más" in html_content


def test_error_status_is_logged_with_details(configured, caplog) -> None:
    RecordingClient.status_code = 400
    RecordingClient.body = b'{"errors": [{"message": "invalid sender"}]}'

    with caplog.at_level(logging.ERROR):
        ok = email_module.send_email("Asunto", "<p>x</p>", "ana@example.com")

    assert ok is False
    assert "status 400: invalid sender" in caplog.text


@pytest.mark.parametrize(
    "body,expected",
    [
        (b"", None),
        ("plain failure", "plain failure"),
        ({"errors": [{"message": "a"}, {"message": "b"}]}, "a; b"),
        ({"detail": "x"}, '{"detail": "x"}'),
        (42, None),
    ],
)
def test_describe_sendgrid_body(body, expected) -> None:
    assert email_module._describe_sendgrid_body(body) == expected
