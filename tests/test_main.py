"""
Unit tests for the mailbox orchestrator and CLI functionality.
"""
import pytest
from unittest.mock import Mock, patch
from click.testing import CliRunner

from config.settings import app_config
from src.gmail.errors import TokenExchangeFailed, Unauthenticated
from src.gmail.token_store import InMemoryTokenStore
from src.main import MailboxAutomation, main
from src.utils.models import MessageFormat, NormalizedMessage, OAuthTokenRecord, SendResult


@pytest.fixture(autouse=True)
def memory_token_store(monkeypatch):
    monkeypatch.setattr(app_config, "token_store", "memory")


@pytest.fixture
def messages():
    return [
        NormalizedMessage(id="m1", from_name="Anna Gast", subject="Anfrage Juli",
                          date="19.10.2026, 16:05", body="Hallo"),
        NormalizedMessage(id="m2", from_name="Fehler", subject="Fehler beim Laden der Nachricht m2: timeout",
                          date="", body="", is_error=True),
    ]


class TestMailboxAutomation:
    """Test cases for MailboxAutomation class."""

    def test_initialization(self):
        automation = MailboxAutomation()

        assert isinstance(automation.store, InMemoryTokenStore)
        assert automation.gmail_service is not None
        assert automation.mail_logger is not None

    def test_fetch_counts_messages_and_placeholders(self, messages):
        automation = MailboxAutomation()
        automation.gmail_service = Mock()
        automation.gmail_service.fetch_messages.return_value = messages

        result = automation.fetch(limit=2)

        assert result == messages
        assert automation.mail_logger.stats['messages_fetched'] == 1
        assert automation.mail_logger.stats['placeholders'] == 1

    def test_fetch_records_token_refresh(self, messages):
        store = InMemoryTokenStore([OAuthTokenRecord("a", "r", 1)])
        automation = MailboxAutomation(store=store)
        automation.gmail_service = Mock()

        def refreshing_fetch(limit, fmt):
            store.append(OAuthTokenRecord("b", "r", 5000))
            return messages

        automation.gmail_service.fetch_messages.side_effect = refreshing_fetch

        automation.fetch()

        assert automation.mail_logger.stats['tokens_refreshed'] == 1

    def test_fetch_with_store(self, messages):
        automation = MailboxAutomation()
        automation.gmail_service = Mock()
        automation.gmail_service.fetch_messages.return_value = messages
        automation.supabase_client = Mock()

        automation.fetch(store=True)

        automation.supabase_client.upsert_emails.assert_called_once_with(messages)

    def test_authorize_stores_tokens(self):
        automation = MailboxAutomation()
        automation.gmail_service.token_manager = Mock()
        automation.gmail_service.token_manager.exchange_code.side_effect = (
            lambda store, code: store.append(OAuthTokenRecord("a", "r", 5000))
        )

        record = automation.authorize("c-1")

        assert automation.store.latest() == record
        automation.gmail_service.token_manager.exchange_code.assert_called_once_with(automation.store, "c-1")

    def test_send(self):
        automation = MailboxAutomation()
        automation.gmail_service = Mock()
        automation.gmail_service.send_email.return_value = SendResult(success=True, message_id="sent-1")

        result = automation.send("anna@example.com", "Hi", "Body")

        assert result.message_id == "sent-1"
        assert automation.mail_logger.stats['messages_sent'] == 1


class TestCLI:
    """Test cases for the click commands."""

    def test_fetch_without_token_fails(self):
        runner = CliRunner()

        result = runner.invoke(main, ['fetch', '--limit', '5'])

        assert result.exit_code == 1
        assert "Error: No Gmail token stored" in result.output

    @patch('src.main.GmailService')
    def test_fetch_prints_messages(self, mock_service_class, messages):
        mock_service_class.return_value.fetch_messages.return_value = messages
        runner = CliRunner()

        result = runner.invoke(main, ['fetch', '--format', 'metadata'])

        assert result.exit_code == 0
        assert "Anfrage Juli" in result.output
        assert "Anna Gast" in result.output
        mock_service_class.return_value.fetch_messages.assert_called_once_with(None, MessageFormat.METADATA)

    @patch('src.main.GmailService')
    def test_send_command(self, mock_service_class):
        mock_service_class.return_value.send_email.return_value = SendResult(success=True, message_id="sent-1")
        runner = CliRunner()

        result = runner.invoke(main, ['send', '--to', 'anna@example.com', '--subject', 'Hi', '--body', 'Hallo'])

        assert result.exit_code == 0
        assert "Sent message sent-1" in result.output

    @patch('src.main.GmailService')
    def test_send_command_error(self, mock_service_class):
        mock_service_class.return_value.send_email.side_effect = Unauthenticated()
        runner = CliRunner()

        result = runner.invoke(main, ['send', '--to', 'anna@example.com', '--subject', 'Hi', '--body', 'Hallo'])

        assert result.exit_code == 1
        assert "Not authenticated" in result.output

    def test_auth_url_command(self, mocker):
        mock_service_class = mocker.patch('src.main.GmailService')
        mock_service_class.return_value.authorization_url.return_value = "https://accounts.test/auth?x=1"
        runner = CliRunner()

        result = runner.invoke(main, ['auth-url'])

        assert result.exit_code == 0
        assert "https://accounts.test/auth?x=1" in result.output

    @patch('src.main.GmailService')
    def test_auth_code_command(self, mock_service_class):
        mock_service_class.return_value.complete_authorization.return_value = OAuthTokenRecord("a", "r", 5000, id=1)
        runner = CliRunner()

        result = runner.invoke(main, ['auth-code', 'c-1'])

        assert result.exit_code == 0
        assert "valid until 5000" in result.output
        mock_service_class.return_value.complete_authorization.assert_called_once_with('c-1')

    @patch('src.main.GmailService')
    def test_auth_code_command_rejected(self, mock_service_class):
        mock_service_class.return_value.complete_authorization.side_effect = TokenExchangeFailed({"error": "invalid_grant"})
        runner = CliRunner()

        result = runner.invoke(main, ['auth-code', 'bad'])

        assert result.exit_code == 1
        assert "Error:" in result.output
