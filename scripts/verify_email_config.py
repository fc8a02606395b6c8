#!/usr/bin/env python3
"""
Verify SMTP settings, optionally send a test email, and optionally resend
the account-approval email to a user.

  python scripts/verify_email_config.py
  python scripts/verify_email_config.py --send-to me@example.org
  python scripts/verify_email_config.py --resend-approval agent@example.org
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from opsdesk.error_handler import ErrorHandler
from opsdesk.errors import OpsError
from opsdesk.integrations.mailer import SmtpMailer
from opsdesk.maintenance import notifications
from opsdesk.maintenance.runner import print_banner, run_database_task
from opsdesk.utils.config_loader import load_targets_config
from opsdesk.utils.settings import OpsSettings, load_environment


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Verify email configuration")
    parser.add_argument("--send-to", default=None, help="Send a test email to this address")
    parser.add_argument("--resend-approval", default=None, help="Resend the approval email to this user")
    parser.add_argument("--config", type=Path, default=None, help="Path to ops_targets.yml")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    load_environment()
    targets = load_targets_config(args.config).email
    send_to = args.send_to or targets.test_recipient
    resend_to = args.resend_approval or targets.resend_approval_to

    print_banner("Email Configuration Check")
    try:
        settings = OpsSettings.from_env()
        notifications.print_mail_settings(settings.mail)
        mailer = SmtpMailer(settings.mail)
    except OpsError as e:
        return ErrorHandler().handle_exception(e, context={"task": "Email configuration check"})

    if not notifications.verify_transport(mailer):
        return 1
    print()

    if send_to and not notifications.send_test_email(mailer, send_to):
        return 1

    if resend_to:
        print()
        return run_database_task(
            "Resend Approval Email",
            lambda db: notifications.run_resend(db, mailer, resend_to, settings.app_base_url),
            settings,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
