"""
Notification collaborators.
"""

from .mail import MailService, Notifier

__all__ = ["MailService", "Notifier"]
