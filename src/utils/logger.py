"""
Logging utility for the Vacation Rental Gmail integration.
"""
import logging
import sys
from typing import Optional
from colorama import Fore, Style, init
import structlog

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class ColorizedFormatter(logging.Formatter):
    """Custom formatter with colorized output."""

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.MAGENTA + Style.BRIGHT,
    }

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{Style.RESET_ALL}"

        if record.levelno >= logging.WARNING:
            record.msg = f"{Fore.RED}{record.msg}{Style.RESET_ALL}"
        elif record.levelno == logging.INFO:
            record.msg = f"{Fore.GREEN}{record.msg}{Style.RESET_ALL}"

        return super().format(record)


def setup_logger(
    name: str = "rental_mail",
    level: str = "INFO",
    log_file: Optional[str] = None
) -> structlog.BoundLogger:
    """
    Set up structured logging with colorized console output.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging to file

    Returns:
        Configured structured logger
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if log_file else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger(name)

    stdlib_logger = logging.getLogger(name)
    stdlib_logger.setLevel(getattr(logging, level.upper()))

    # Repeated setup (CLI + API in one process) must not stack handlers
    if not stdlib_logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_formatter = ColorizedFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(console_formatter)
        stdlib_logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            stdlib_logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "rental_mail") -> structlog.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name

    Returns:
        Configured structured logger
    """
    return structlog.get_logger(name)


class MailLogger:
    """Specialized logger for mailbox operations with summary tracking."""

    def __init__(self, logger: structlog.BoundLogger):
        self.logger = logger
        self.reset_stats()

    def log_messages_fetched(self, messages):
        """Log a fetched batch, counting error placeholders separately."""
        placeholders = sum(1 for m in messages if m.is_error)
        self.stats['messages_fetched'] += len(messages) - placeholders
        self.stats['placeholders'] += placeholders
        self.logger.info(
            "Messages fetched",
            count=len(messages),
            placeholders=placeholders
        )

    def log_token_refreshed(self, expires_at: int):
        """Log when the access token had to be refreshed."""
        self.stats['tokens_refreshed'] += 1
        self.logger.info("Access token refreshed", expires_at=expires_at)

    def log_message_sent(self, message_id: str, to: str):
        """Log when a message was accepted by Gmail."""
        self.stats['messages_sent'] += 1
        self.logger.info("Message sent", message_id=message_id, to=to)

    def log_error(self, error: Exception, context: str = ""):
        """Log an error."""
        self.stats['errors'] += 1
        self.logger.error(
            "Error occurred",
            error=str(error),
            error_type=type(error).__name__,
            context=context
        )

    def print_summary(self):
        """Print a summary of all operations."""
        self.logger.info("Mailbox summary", **self.stats)

        print(f"\n{Fore.CYAN}{'='*50}")
        print(f"{Fore.WHITE}MAILBOX SUMMARY")
        print(f"{Fore.CYAN}{'='*50}")
        print(f"{Fore.GREEN}✓ Messages fetched: {self.stats['messages_fetched']}")
        print(f"{Fore.YELLOW}⚠ Error placeholders: {self.stats['placeholders']}")
        print(f"{Fore.BLUE}✓ Tokens refreshed: {self.stats['tokens_refreshed']}")
        print(f"{Fore.GREEN}✓ Messages sent: {self.stats['messages_sent']}")
        print(f"{Fore.RED}✗ Errors: {self.stats['errors']}")
        print(f"{Fore.CYAN}{'='*50}\n")

    def reset_stats(self):
        """Reset statistics."""
        self.stats = {
            'messages_fetched': 0,
            'placeholders': 0,
            'tokens_refreshed': 0,
            'messages_sent': 0,
            'errors': 0,
        }
