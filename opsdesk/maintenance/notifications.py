"""
Mail transport checks and operator-triggered resends.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from opsdesk.database.models import User
from opsdesk.database.repository import Repository
from opsdesk.errors import TransportError
from opsdesk.integrations.mailer import SmtpMailer
from opsdesk.utils.settings import MailSettings

logger = logging.getLogger(__name__)

APPROVAL_SUBJECT = "Your Infinity Weekends account has been approved"


def approval_email_body(user: User, login_url: str) -> str:
    return (
        f"<p>Hi {user.name or 'there'},</p>"
        f"<p>Your agency account{f' for {user.company_name}' if user.company_name else ''} "
        "has been approved. You can now sign in and access the agent portal.</p>"
        f'<p><a href="{login_url}">Sign in</a></p>'
        "<p>Infinity Weekends</p>"
    )


def print_mail_settings(settings: MailSettings) -> None:
    print("Email Configuration:")
    print(f"  SMTP_HOST: {settings.host or '(not set)'}")
    print(f"  SMTP_PORT: {settings.port}")
    print(f"  SMTP_USER: {settings.user or '(not set)'}")
    print(f"  SMTP_PASS: {'***' if settings.password else '(not set)'}")
    print(f"  EMAIL_FROM: {settings.from_address or '(not set)'}")
    print()


def verify_transport(mailer: SmtpMailer) -> bool:
    print("Verifying SMTP connection...")
    try:
        mailer.verify()
    except TransportError as e:
        print(f"❌ SMTP verification failed: {e}")
        if e.code is not None:
            print(f"  code: {e.code}")
        if e.response:
            print(f"  response: {e.response}")
        return False
    print("✅ SMTP server accepted the connection and credentials")
    return True


def send_test_email(mailer: SmtpMailer, to: str) -> bool:
    print(f"Sending test email to {to}...")
    try:
        message_id = mailer.send(
            to,
            "Infinity Weekends email configuration test",
            "This is a test message sent by the opsdesk email configuration check.",
        )
    except TransportError as e:
        print(f"❌ Test email failed: {e}")
        if e.code is not None:
            print(f"  code: {e.code}")
        if e.response:
            print(f"  response: {e.response}")
        return False
    print(f"✅ Test email sent{f' ({message_id})' if message_id else ''}")
    return True


def resend_approval_email(db: Any, mailer: SmtpMailer, email: str, base_url: str) -> Optional[bool]:
    """Returns None when no user has that email, else whether the send succeeded."""
    user = Repository(db, User).find_one({"contactEmail": email.strip().lower()})
    if user is None:
        print(f"⚠️  No user found with email {email}")
        return None
    print(f"Found user: {user.name} ({user.role}) isApproved={user.is_approved} status={user.status}")
    if not user.is_approved:
        print("⚠️  User is not approved; sending the approval email anyway as requested")
    try:
        mailer.send(user.email or email, APPROVAL_SUBJECT, approval_email_body(user, f"{base_url}/auth/login"), html=True)
    except TransportError as e:
        print(f"❌ Approval email failed: {e}")
        return False
    print(f"✅ Approval email resent to {user.email}")
    return True


def run_resend(db: Any, mailer: SmtpMailer, email: str, base_url: str) -> int:
    """Exit code for a resend: an unknown user is reported, not a failure."""
    sent = resend_approval_email(db, mailer, email, base_url)
    return 1 if sent is False else 0
