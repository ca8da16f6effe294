"""
Utility modules for the vacation rental Gmail integration.
"""

from .models import MessageFormat, OAuthTokenRecord, NormalizedMessage, SendResult
from .logger import setup_logger, get_logger, MailLogger

__all__ = [
    'MessageFormat', 'OAuthTokenRecord', 'NormalizedMessage', 'SendResult',
    'setup_logger', 'get_logger', 'MailLogger'
]
