"""
Integrations layer: the outbound mail transport and the application's HTTP API.

Tasks never open SMTP sockets or issue HTTP requests directly; they go through
these clients so tests can swap the transport.
"""

from .app_api import ApiResponse, AppApiClient, parse_body
from .mailer import SmtpMailer

__all__ = ["ApiResponse", "AppApiClient", "parse_body", "SmtpMailer"]
