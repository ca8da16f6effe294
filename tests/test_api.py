"""
Tests for the FastAPI Gmail endpoints.
"""
import pytest
from unittest.mock import Mock
from fastapi.testclient import TestClient

from config.settings import GmailConfig
from src.api.app import create_app
from src.api.dependencies import get_mailbox_service
from src.api.services.mailbox_service import MailboxService
from src.gmail.errors import FetchFailed, SendFailed, TokenRefreshFailed, Unauthenticated
from src.gmail.service import GmailService
from src.gmail.token_manager import TokenManager
from src.gmail.token_store import InMemoryTokenStore
from src.utils.models import MessageFormat, NormalizedMessage, SendResult

PREFIX = "/api/v1/gmail"


@pytest.fixture
def gmail_service():
    return Mock(spec=GmailService)


@pytest.fixture
def supabase_client():
    client = Mock()
    client.upsert_emails.return_value = 1
    client.assign_email.return_value = True
    return client


@pytest.fixture
def client(gmail_service, supabase_client):
    app = create_app()
    mailbox_service = MailboxService(gmail_service, supabase_client, Mock())
    app.dependency_overrides[get_mailbox_service] = lambda: mailbox_service
    return TestClient(app)


@pytest.fixture
def lenient_client(gmail_service, supabase_client):
    """Client that returns 500 responses instead of re-raising server errors."""
    app = create_app()
    mailbox_service = MailboxService(gmail_service, supabase_client, Mock())
    app.dependency_overrides[get_mailbox_service] = lambda: mailbox_service
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def messages():
    return [
        NormalizedMessage(id="m1", from_name="Anna Gast", from_email="anna@example.com",
                          subject="Anfrage", date="19.10.2026, 16:05", body="Hallo"),
        NormalizedMessage(id="m2", from_name="Fehler", subject="Fehler beim Laden der Nachricht m2: timeout",
                          date="", body="", is_error=True),
    ]


class TestFetchEndpoint:
    """Test cases for GET /gmail/fetch."""

    def test_returns_messages_in_order(self, client, gmail_service, messages):
        gmail_service.fetch_messages.return_value = messages

        response = client.get(f"{PREFIX}/fetch", params={"limit": 2})

        assert response.status_code == 200
        data = response.json()["data"]
        assert [m["id"] for m in data] == ["m1", "m2"]
        assert data[0]["from_name"] == "Anna Gast"
        assert data[1]["is_error"] is True
        gmail_service.fetch_messages.assert_called_once_with(2, MessageFormat.FULL)

    def test_metadata_format(self, client, gmail_service):
        gmail_service.fetch_messages.return_value = []

        response = client.get(f"{PREFIX}/fetch", params={"format": "metadata"})

        assert response.status_code == 200
        gmail_service.fetch_messages.assert_called_once_with(None, MessageFormat.METADATA)

    def test_store_flag_returns_stored_emails(self, client, gmail_service, supabase_client, messages):
        gmail_service.fetch_messages.return_value = messages
        stored_rows = [
            {"id": "m1", "from_name": "Anna Gast", "date": 1760882700, "booking_id": "b-7"},
            {"id": "m0", "from_name": "Ben Gast", "date": 1760790000, "booking_id": None},
        ]
        supabase_client.list_emails.return_value = stored_rows

        response = client.get(f"{PREFIX}/fetch", params={"store": "true"})

        assert response.status_code == 200
        assert response.json()["data"] == stored_rows
        supabase_client.upsert_emails.assert_called_once_with(messages)
        supabase_client.list_emails.assert_called_once_with(None)

    def test_store_failure_is_server_error(self, lenient_client, gmail_service, supabase_client, messages):
        gmail_service.fetch_messages.return_value = messages
        supabase_client.upsert_emails.side_effect = Exception("relation emails does not exist")

        response = lenient_client.get(f"{PREFIX}/fetch", params={"store": "true"})

        assert response.status_code == 500
        assert response.json()["error_code"] == "INTERNAL_ERROR"
        supabase_client.list_emails.assert_not_called()

    def test_unauthenticated(self, client, gmail_service):
        gmail_service.fetch_messages.side_effect = Unauthenticated("No Gmail token stored")

        response = client.get(f"{PREFIX}/fetch")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "UNAUTHENTICATED"

    def test_refresh_failure_is_unauthorized(self, client, gmail_service):
        gmail_service.fetch_messages.side_effect = TokenRefreshFailed({"error": "invalid_grant"})

        response = client.get(f"{PREFIX}/fetch")

        assert response.status_code == 401
        assert response.json()["details"]["provider_response"] == {"error": "invalid_grant"}

    def test_listing_failure(self, client, gmail_service):
        gmail_service.fetch_messages.side_effect = FetchFailed(500, "backend error")

        response = client.get(f"{PREFIX}/fetch")

        assert response.status_code == 502
        assert response.json()["error_code"] == "FETCH_FAILED"


class TestSendEndpoint:
    """Test cases for POST /gmail/send."""

    def test_send(self, client, gmail_service):
        gmail_service.send_email.return_value = SendResult(success=True, message_id="sent-1")

        response = client.post(f"{PREFIX}/send", json={"to": "anna@example.com", "subject": "Hi", "body": "Hallo"})

        assert response.status_code == 200
        assert response.json()["data"] == {"message_id": "sent-1"}

    def test_provider_rejection_keeps_status(self, client, gmail_service):
        gmail_service.send_email.side_effect = SendFailed(403, "insufficientPermissions")

        response = client.post(f"{PREFIX}/send", json={"to": "anna@example.com", "subject": "Hi", "body": "Hallo"})

        assert response.status_code == 403
        assert response.json()["details"]["provider_response"] == "insufficientPermissions"


class TestAssignEndpoints:
    """Test cases for stored email endpoints."""

    def test_assign_email(self, client, supabase_client):
        response = client.post(f"{PREFIX}/emails/assign", json={"email_id": "m1", "booking_id": "b-7"})

        assert response.status_code == 200
        assert response.json()["success"] is True
        supabase_client.assign_email.assert_called_once_with("m1", "b-7")

    def test_unassign_email(self, client, supabase_client):
        client.post(f"{PREFIX}/emails/assign", json={"email_id": "m1", "booking_id": None})

        supabase_client.assign_email.assert_called_once_with("m1", None)

    def test_assign_failure_is_server_error(self, lenient_client, supabase_client):
        supabase_client.assign_email.side_effect = Exception("connection reset")

        response = lenient_client.post(f"{PREFIX}/emails/assign", json={"email_id": "m1", "booking_id": "b-7"})

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["details"] == {"error": "connection reset"}

    def test_list_stored_emails(self, client, supabase_client):
        supabase_client.list_emails.return_value = [{"id": "m1", "booking_id": None}]

        response = client.get(f"{PREFIX}/emails")

        assert response.status_code == 200
        assert response.json()["data"] == [{"id": "m1", "booking_id": None}]


class TestAuthorizationEndpoints:
    """Test cases for the OAuth endpoints, using a real token manager."""

    @pytest.fixture
    def session(self):
        return Mock()

    @pytest.fixture
    def store(self):
        return InMemoryTokenStore()

    @pytest.fixture
    def client(self, session, store):
        config = GmailConfig(client_id="client-123", auth_url="https://accounts.test/auth",
                             token_url="https://oauth.test/token")
        manager = TokenManager(config=config, session=session, clock=lambda: 1_000)
        gmail_service = GmailService(store, token_manager=manager, fetcher=Mock(), sender=Mock())
        app = create_app()
        mailbox_service = MailboxService(gmail_service, Mock(), Mock())
        app.dependency_overrides[get_mailbox_service] = lambda: mailbox_service
        return TestClient(app)

    def test_auth_redirects_to_consent_screen(self, client):
        response = client.get(f"{PREFIX}/auth", follow_redirects=False)

        assert response.status_code == 302
        location = response.headers["location"]
        assert location.startswith("https://accounts.test/auth?")
        assert "access_type=offline" in location
        assert "prompt=consent" in location

    def test_callback_without_code(self, client, session):
        response = client.get(f"{PREFIX}/callback", follow_redirects=False)

        assert response.status_code == 400
        session.post.assert_not_called()

    def test_callback_stores_tokens(self, client, session, store):
        token_response = Mock(status_code=200)
        token_response.json.return_value = {"access_token": "a", "refresh_token": "r", "expires_in": 3600}
        session.post.return_value = token_response

        response = client.get(f"{PREFIX}/callback", params={"code": "c-1"}, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/"
        assert store.latest().expires_at == 4_600

    def test_callback_rejected(self, client, session, store):
        token_response = Mock(status_code=400)
        token_response.json.return_value = {"error": "invalid_grant"}
        session.post.return_value = token_response

        response = client.get(f"{PREFIX}/callback", params={"code": "bad"}, follow_redirects=False)

        assert response.status_code == 502
        assert store.latest() is None

    def test_send_missing_field_is_bad_request(self, client, session, store):
        response = client.post(f"{PREFIX}/send", json={"to": "", "subject": "Hi", "body": "Hallo"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_REQUEST"
        session.post.assert_not_called()


def test_health_endpoint():
    response = TestClient(create_app()).get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
