"""
Outbound transactional email

Mail dispatch is fire-and-forget: a failed send is reported back as a
DispatchResult and never undoes the state change that triggered it.
"""

from .models import MailType, MailMessage, DispatchResult
from .mailer import Mailer, InMemoryMailer, BrevoMailer

__all__ = [
    "MailType",
    "MailMessage",
    "DispatchResult",
    "Mailer",
    "InMemoryMailer",
    "BrevoMailer",
]
