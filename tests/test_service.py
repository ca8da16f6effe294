"""
Unit tests for the Gmail service facade.
"""
import pytest
from unittest.mock import Mock

from src.gmail.errors import InvalidRequest, Unauthenticated
from src.gmail.service import GmailService
from src.gmail.token_manager import TokenManager
from src.gmail.token_store import InMemoryTokenStore
from src.utils.models import MessageFormat, NormalizedMessage, OAuthTokenRecord


@pytest.fixture
def token_manager():
    manager = Mock(spec=TokenManager)
    manager.get_valid_access_token.return_value = "access-1"
    return manager


@pytest.fixture
def fetcher():
    fetcher = Mock()
    fetcher.list_recent_messages.return_value = [
        NormalizedMessage(id="m1", from_name="Anna", subject="Hi", date="", body="Hallo"),
    ]
    return fetcher


@pytest.fixture
def sender():
    sender = Mock()
    sender.send_message.return_value = "sent-1"
    return sender


def test_fetch_messages_uses_valid_token(token_manager, fetcher, sender):
    store = InMemoryTokenStore()
    service = GmailService(store, token_manager, fetcher, sender)

    messages = service.fetch_messages(10, MessageFormat.METADATA)

    token_manager.get_valid_access_token.assert_called_once_with(store)
    fetcher.list_recent_messages.assert_called_once_with("access-1", 10, MessageFormat.METADATA)
    assert messages[0].id == "m1"


def test_fetch_messages_unauthenticated(fetcher, sender):
    service = GmailService(InMemoryTokenStore(), TokenManager(clock=lambda: 0), fetcher, sender)

    with pytest.raises(Unauthenticated):
        service.fetch_messages()
    fetcher.list_recent_messages.assert_not_called()


def test_send_email(token_manager, fetcher, sender):
    service = GmailService(InMemoryTokenStore(), token_manager, fetcher, sender)

    result = service.send_email("anna@example.com", "Hi", "Body")

    assert result.success is True
    assert result.message_id == "sent-1"
    sender.send_message.assert_called_once_with("access-1", "anna@example.com", "Hi", "Body")


def test_send_email_validates_before_token_lookup(token_manager, fetcher, sender):
    store = Mock()
    service = GmailService(store, token_manager, fetcher, sender)

    with pytest.raises(InvalidRequest):
        service.send_email("", "Hi", "Body")

    store.latest.assert_not_called()
    token_manager.get_valid_access_token.assert_not_called()
    sender.send_message.assert_not_called()


def test_authorization_delegates_to_token_manager(token_manager, fetcher, sender):
    store = InMemoryTokenStore()
    token_manager.build_authorization_url.return_value = "https://accounts.test/auth?x=1"
    token_manager.exchange_code.return_value = OAuthTokenRecord("a", "r", 1)
    service = GmailService(store, token_manager, fetcher, sender)

    assert service.authorization_url() == "https://accounts.test/auth?x=1"
    service.complete_authorization("code-1")
    token_manager.exchange_code.assert_called_once_with(store, "code-1")
