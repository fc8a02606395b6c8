import smtplib
import socket

import pytest

from mocks.fake_transports import FakeSMTP, auth_failure
from opsdesk.errors import ConfigurationError, TransportError
from opsdesk.integrations.mailer import SmtpMailer
from opsdesk.utils.settings import MailSettings


def _settings(**overrides):
    values = dict(host="smtp.example.org", port=587, user="mailer@example.org", password="app-password")
    values.update(overrides)
    return MailSettings(**values)


def test_incomplete_settings_name_missing_keys():
    with pytest.raises(ConfigurationError) as exc:
        SmtpMailer(MailSettings(host="smtp.example.org"))
    assert exc.value.missing == ["SMTP_USER", "SMTP_PASS"]


def test_verify_uses_starttls_on_587():
    mailer = SmtpMailer(_settings(), smtp_factory=FakeSMTP.factory())
    assert mailer.verify() is True
    server = FakeSMTP.instances[-1]
    assert server.log == ["ehlo", "starttls", "ehlo", ("login", "mailer@example.org"), "noop", "quit"]
    assert (server.host, server.port, server.timeout) == ("smtp.example.org", 587, 30.0)


def test_no_starttls_when_not_offered_on_other_ports():
    mailer = SmtpMailer(_settings(port=2525), smtp_factory=FakeSMTP.factory(extensions=()))
    mailer.verify()
    assert "starttls" not in FakeSMTP.instances[-1].log


def test_auth_failure_carries_code_and_response():
    mailer = SmtpMailer(_settings(), smtp_factory=FakeSMTP.factory(fail_login=auth_failure()))
    with pytest.raises(TransportError) as exc:
        mailer.verify()
    assert exc.value.code == 535
    assert exc.value.response == "5.7.8 Username and Password not accepted"
    assert FakeSMTP.instances[-1].closed


def test_connection_refused_is_a_transport_error():
    def refuse(host, port, timeout=None):
        raise ConnectionRefusedError(111, "Connection refused")

    with pytest.raises(TransportError) as exc:
        SmtpMailer(_settings(), smtp_factory=refuse).verify()
    assert exc.value.code == 111


def test_send_builds_message_from_configured_sender():
    mailer = SmtpMailer(
        _settings(sender="bookings@infinityweekends.co.uk"),
        smtp_factory=FakeSMTP.factory(),
    )
    mailer.send("agent@example.org", "Hello", "<p>Hi</p>", html=True)
    msg = FakeSMTP.instances[-1].sent[0]
    assert msg["To"] == "agent@example.org"
    assert msg["Subject"] == "Hello"
    assert msg["From"] == "Infinity Weekends <bookings@infinityweekends.co.uk>"
    assert msg.get_payload()[0].get_content_subtype() == "html"


def test_send_failure_raises_transport_error():
    mailer = SmtpMailer(_settings(), smtp_factory=FakeSMTP.factory(fail_send=socket.timeout("timed out")))
    with pytest.raises(TransportError):
        mailer.send("agent@example.org", "Hello", "body")
    assert FakeSMTP.instances[-1].log[-1] == "quit"


def test_noop_failure_is_a_transport_error():
    failure = smtplib.SMTPServerDisconnected("Connection unexpectedly closed")
    mailer = SmtpMailer(_settings(), smtp_factory=FakeSMTP.factory(fail_noop=failure))
    with pytest.raises(TransportError):
        mailer.verify()
    assert FakeSMTP.instances[-1].log[-2:] == ["noop", "quit"]


def test_send_returns_generated_message_id():
    mailer = SmtpMailer(_settings(), smtp_factory=FakeSMTP.factory())
    message_id = mailer.send("agent@example.org", "Hello", "body")
    assert message_id
    assert message_id.endswith("@example.org>")
    assert message_id == FakeSMTP.instances[-1].sent[0]["Message-ID"]
