"""
Vacation Rental Gmail Integration.

Connects the rental dashboard to a Gmail mailbox: OAuth authorization,
token refresh, fetching guest emails and sending replies.
"""

__version__ = "1.0.0"
__author__ = "Vacation Rental Automation Team"
__description__ = "Gmail ingestion and sending for the vacation rental dashboard"
