"""
Gmail API endpoints.
"""
from typing import Optional, Union
from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse

from ..config import settings
from ..dependencies import get_mailbox_service
from ..models import (
    ErrorResponse, EmailListResponse, StoredEmailListResponse, SendEmailRequest,
    SendEmailResponse, AssignEmailRequest, AssignEmailResponse, FetchFormat
)
from ..services.mailbox_service import MailboxService
from ...utils.models import MessageFormat


router = APIRouter(prefix="/gmail", tags=["gmail"])


@router.get(
    "/auth",
    summary="Start Gmail authorization",
    description="Redirect to the Google consent screen requesting offline Gmail access",
    responses={302: {"description": "Redirect to Google"}}
)
def authorize(mailbox_service: MailboxService = Depends(get_mailbox_service)):
    return RedirectResponse(mailbox_service.authorization_url(), status_code=302)


@router.get(
    "/callback",
    summary="Gmail OAuth callback",
    description="Exchange the authorization code for tokens and store them",
    responses={
        302: {"description": "Tokens stored, redirect to the dashboard"},
        400: {"description": "Missing authorization code", "model": ErrorResponse},
        502: {"description": "Token exchange rejected", "model": ErrorResponse}
    }
)
def oauth_callback(
    code: Optional[str] = Query(None, description="Authorization code from Google"),
    mailbox_service: MailboxService = Depends(get_mailbox_service)
):
    mailbox_service.complete_authorization(code)
    return RedirectResponse(settings.post_auth_redirect, status_code=302)


@router.get(
    "/fetch",
    response_model=None,
    summary="Fetch recent emails",
    description="Fetch and normalize the most recent messages of the connected mailbox. "
                "With store=true the messages are saved and the stored emails are returned.",
    responses={
        200: {
            "description": "Messages retrieved; unloadable ones are flagged with is_error",
            "model": EmailListResponse
        },
        401: {"description": "Gmail not connected or token refresh failed", "model": ErrorResponse},
        502: {"description": "Gmail listing failed", "model": ErrorResponse},
        500: {"description": "Storing emails failed", "model": ErrorResponse}
    }
)
def fetch_emails(
    limit: Optional[int] = Query(None, ge=1, le=500, description="Maximum number of messages"),
    format: FetchFormat = Query(FetchFormat.FULL, description="full or metadata"),
    store: bool = Query(False, description="Store the messages and return the stored emails"),
    mailbox_service: MailboxService = Depends(get_mailbox_service)
) -> Union[EmailListResponse, StoredEmailListResponse]:
    return mailbox_service.fetch_emails(limit, MessageFormat(format.value), store)


@router.get(
    "/emails",
    response_model=StoredEmailListResponse,
    summary="List stored emails",
    description="Emails previously stored by the fetch endpoint, newest first"
)
def list_stored_emails(
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of emails"),
    mailbox_service: MailboxService = Depends(get_mailbox_service)
) -> StoredEmailListResponse:
    return mailbox_service.list_stored_emails(limit)


@router.post(
    "/send",
    response_model=SendEmailResponse,
    summary="Send an email",
    description="Send a plain-text email from the connected mailbox",
    responses={
        400: {"description": "Missing required fields", "model": ErrorResponse},
        401: {"description": "Gmail not connected", "model": ErrorResponse}
    }
)
def send_email(
    request: SendEmailRequest,
    mailbox_service: MailboxService = Depends(get_mailbox_service)
) -> SendEmailResponse:
    return mailbox_service.send_email(request)


@router.post(
    "/emails/assign",
    response_model=AssignEmailResponse,
    summary="Assign an email to a booking",
    responses={500: {"description": "Assignment failed", "model": ErrorResponse}}
)
def assign_email(
    request: AssignEmailRequest,
    mailbox_service: MailboxService = Depends(get_mailbox_service)
) -> AssignEmailResponse:
    return mailbox_service.assign_email(request)
