"""Utility modules for the service layer."""

from .clock import next_timestamp
from .validators import is_email_in_use, is_email_valid, validate_email

__all__ = ["is_email_in_use", "is_email_valid", "next_timestamp", "validate_email"]
