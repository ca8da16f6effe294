"""
Mailbox service for handling Gmail-related API operations.
"""
from typing import Optional, Union

from ...gmail.service import GmailService
from ...supabase_sync.supabase_client import SupabaseClient
from ...utils.models import MessageFormat
from ..models import (
    EmailListResponse, EmailMessage, StoredEmailListResponse, SendEmailRequest,
    SendEmailResponse, AssignEmailRequest, AssignEmailResponse
)


class MailboxService:
    """Service for fetching, storing, sending and assigning guest emails."""

    def __init__(self, gmail_service: GmailService, supabase_client: SupabaseClient, logger):
        self.gmail_service = gmail_service
        self.supabase_client = supabase_client
        self.logger = logger

    def authorization_url(self) -> str:
        return self.gmail_service.authorization_url()

    def complete_authorization(self, code: Optional[str]) -> None:
        record = self.gmail_service.complete_authorization(code)
        self.logger.info("Gmail authorization completed", expires_at=record.expires_at)

    def fetch_emails(
        self,
        limit: Optional[int] = None,
        fmt: MessageFormat = MessageFormat.FULL,
        store: bool = False,
    ) -> Union[EmailListResponse, StoredEmailListResponse]:
        """
        Fetch recent messages from Gmail.

        Args:
            limit: Maximum number of messages
            fmt: Full payload or headers only
            store: Write the messages to the ``emails`` table and return the
                stored rows instead of the fetched messages

        Returns:
            Messages in mailbox order including error placeholders, or the
            stored emails newest first when ``store`` is set
        """
        messages = self.gmail_service.fetch_messages(limit, fmt)
        failed = sum(1 for m in messages if m.is_error)

        if store:
            stored = self.supabase_client.upsert_emails(messages)
            self.logger.info("Fetched and stored emails", count=len(messages), failed=failed, stored=stored)
            return self.list_stored_emails()

        self.logger.info("Fetched emails", count=len(messages), failed=failed)
        return EmailListResponse(
            success=True,
            message=f"Fetched {len(messages)} emails",
            data=[EmailMessage(**m.to_dict()) for m in messages],
        )

    def list_stored_emails(self, limit: Optional[int] = None) -> StoredEmailListResponse:
        rows = self.supabase_client.list_emails(limit)
        return StoredEmailListResponse(success=True, message=f"Found {len(rows)} emails", data=rows)

    def send_email(self, request: SendEmailRequest) -> SendEmailResponse:
        result = self.gmail_service.send_email(request.to, request.subject, request.body)
        return SendEmailResponse(
            success=result.success,
            message="Email sent",
            data={"message_id": result.message_id},
        )

    def assign_email(self, request: AssignEmailRequest) -> AssignEmailResponse:
        self.supabase_client.assign_email(request.email_id, request.booking_id)
        return AssignEmailResponse(
            success=True,
            message="Email assigned",
            data={"email_id": request.email_id, "booking_id": request.booking_id},
        )
