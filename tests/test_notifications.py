from mocks.fake_transports import FakeSMTP, auth_failure
from opsdesk.integrations.mailer import SmtpMailer
from opsdesk.maintenance import notifications
from opsdesk.utils.settings import MailSettings

SETTINGS = MailSettings(host="smtp.example.org", port=587, user="mailer@example.org", password="app-password")


def test_print_mail_settings_masks_password(capsys):
    notifications.print_mail_settings(SETTINGS)
    out = capsys.readouterr().out
    assert "SMTP_PASS: ***" in out
    assert "app-password" not in out


def test_verify_transport_reports_failure(capsys):
    mailer = SmtpMailer(SETTINGS, smtp_factory=FakeSMTP.factory(fail_login=auth_failure()))
    assert notifications.verify_transport(mailer) is False
    out = capsys.readouterr().out
    assert "SMTP verification failed" in out
    assert "code: 535" in out


def test_send_test_email():
    mailer = SmtpMailer(SETTINGS, smtp_factory=FakeSMTP.factory())
    assert notifications.send_test_email(mailer, "me@example.org") is True
    assert FakeSMTP.instances[-1].sent[0]["To"] == "me@example.org"


def test_resend_approval_email(db):
    db.seed(
        "users",
        [{"name": "Jo", "contactEmail": "jo@agency.example", "companyName": "Sun Travel", "isApproved": True}],
    )
    mailer = SmtpMailer(SETTINGS, smtp_factory=FakeSMTP.factory())

    assert notifications.resend_approval_email(db, mailer, "JO@agency.example", "https://admin.example.org") is True

    msg = FakeSMTP.instances[-1].sent[0]
    assert msg["Subject"] == notifications.APPROVAL_SUBJECT
    html = msg.get_payload()[0].get_payload()
    assert "https://admin.example.org/auth/login" in html
    assert "Sun Travel" in html


def test_resend_to_unknown_user(db, capsys):
    mailer = SmtpMailer(SETTINGS, smtp_factory=FakeSMTP.factory())
    assert notifications.resend_approval_email(db, mailer, "ghost@example.org", "http://localhost:3000") is None
    assert FakeSMTP.instances == []


def test_resend_exit_codes(db):
    mailer = SmtpMailer(SETTINGS, smtp_factory=FakeSMTP.factory())
    assert notifications.run_resend(db, mailer, "ghost@example.org", "http://localhost:3000") == 0

    db.seed("users", [{"name": "Jo", "contactEmail": "jo@agency.example", "isApproved": True}])
    failing = SmtpMailer(SETTINGS, smtp_factory=FakeSMTP.factory(fail_send=auth_failure()))
    assert notifications.run_resend(db, failing, "jo@agency.example", "http://localhost:3000") == 1
