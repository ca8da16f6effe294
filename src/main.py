"""
Command-line entry point for the vacation rental Gmail integration.
"""
import click
from typing import Optional, List

from .gmail.errors import GmailError
from .gmail.service import GmailService
from .gmail.token_store import TokenStore, InMemoryTokenStore, SupabaseTokenStore
from .supabase_sync.supabase_client import SupabaseClient
from .utils.models import MessageFormat, NormalizedMessage, OAuthTokenRecord, SendResult
from .utils.logger import setup_logger, MailLogger
from config.settings import app_config


class MailboxAutomation:
    """Runs mailbox operations from the command line."""

    def __init__(
        self,
        log_level: str = "INFO",
        log_file: Optional[str] = None,
        store: Optional[TokenStore] = None,
    ):
        self.logger = setup_logger("rental_mail", log_level, log_file)
        self.mail_logger = MailLogger(self.logger)

        self.supabase_client = SupabaseClient()
        self.store = store or self._default_store()
        self.gmail_service = GmailService(self.store)

    def _default_store(self) -> TokenStore:
        if app_config.token_store == "memory":
            return InMemoryTokenStore()
        return SupabaseTokenStore(self.supabase_client)

    def fetch(
        self,
        limit: Optional[int] = None,
        fmt: MessageFormat = MessageFormat.FULL,
        store: bool = False,
    ) -> List[NormalizedMessage]:
        """
        Fetch recent messages and optionally store them.

        Args:
            limit: Maximum number of messages
            fmt: Full payload or headers only
            store: Write the messages to the emails table

        Returns:
            Normalized messages in mailbox order
        """
        before = self.store.latest()
        messages = self.gmail_service.fetch_messages(limit, fmt)
        after = self.store.latest()
        if before is not None and after is not None and after.id != before.id:
            self.mail_logger.log_token_refreshed(after.expires_at)

        self.mail_logger.log_messages_fetched(messages)
        if store:
            self.supabase_client.upsert_emails(messages)
        return messages

    def authorize(self, code: str) -> OAuthTokenRecord:
        """Exchange a consent-screen code and store the resulting tokens."""
        record = self.gmail_service.complete_authorization(code)
        self.logger.info("Gmail authorization completed", expires_at=record.expires_at)
        return record

    def send(self, to: str, subject: str, body: str) -> SendResult:
        result = self.gmail_service.send_email(to, subject, body)
        self.mail_logger.log_message_sent(result.message_id, to)
        return result


@click.group()
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              default='INFO', help='Logging level')
@click.option('--log-file', type=str,
              help='Log file path (optional)')
@click.pass_context
def main(ctx, log_level, log_file):
    """
    Vacation Rental Gmail tool.

    Fetches guest emails from the connected Gmail account and sends replies.
    """
    ctx.ensure_object(dict)
    ctx.obj['log_level'] = log_level
    ctx.obj['log_file'] = log_file


def _automation(ctx) -> MailboxAutomation:
    if 'automation' not in ctx.obj:
        ctx.obj['automation'] = MailboxAutomation(ctx.obj['log_level'], ctx.obj['log_file'])
    return ctx.obj['automation']


@main.command('auth-url')
@click.pass_context
def auth_url(ctx):
    """Print the Google consent URL for connecting Gmail."""
    click.echo(_automation(ctx).gmail_service.authorization_url())


@main.command('auth-code')
@click.argument('code')
@click.pass_context
def auth_code(ctx, code):
    """Store Gmail tokens for the CODE returned by the consent screen.

    Tokens only outlive this command with TOKEN_STORE=supabase.
    """
    automation = _automation(ctx)
    try:
        record = automation.authorize(code)
    except GmailError as e:
        automation.mail_logger.log_error(e, context="auth-code")
        click.echo(f"Error: {e}")
        ctx.exit(1)

    click.echo(f"Gmail connected, access token valid until {record.expires_at}")


@main.command()
@click.option('--limit', type=int, help='Maximum number of messages to fetch')
@click.option('--format', 'fmt', type=click.Choice(['full', 'metadata']), default='full',
              help='Fetch bodies (full) or headers only (metadata)')
@click.option('--store', is_flag=True, help='Store fetched messages in the database')
@click.pass_context
def fetch(ctx, limit, fmt, store):
    """Fetch and print the most recent messages."""
    automation = _automation(ctx)
    try:
        messages = automation.fetch(limit, MessageFormat(fmt), store)
    except GmailError as e:
        automation.mail_logger.log_error(e, context="fetch")
        click.echo(f"Error: {e}")
        ctx.exit(1)

    for m in messages:
        marker = "✗" if m.is_error else "•"
        click.echo(f"{marker} {m.date:<17} {m.from_name:<30} {m.subject}")
    automation.mail_logger.print_summary()


@main.command()
@click.option('--to', required=True, help='Recipient address')
@click.option('--subject', required=True, help='Subject line')
@click.option('--body', required=True, help='Plain-text body')
@click.pass_context
def send(ctx, to, subject, body):
    """Send a plain-text email."""
    automation = _automation(ctx)
    try:
        result = automation.send(to, subject, body)
    except GmailError as e:
        automation.mail_logger.log_error(e, context="send")
        click.echo(f"Error: {e}")
        ctx.exit(1)

    click.echo(f"Sent message {result.message_id}")


if __name__ == "__main__":
    main()
