"""Outbound mail submission."""

from .transport import SmtpConfig, SmtpTransport

__all__ = ["SmtpConfig", "SmtpTransport"]
