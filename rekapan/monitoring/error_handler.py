"""
Error classification for bot commands

Every exception raised while a command is handled ends up here. It is
classified, logged at a level matching its severity and turned into the
single reply the sender gets.
"""

import logging
import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Type

from googleapiclient.errors import HttpError
from telegram.error import NetworkError

from rekapan.exceptions import (
    AccessDeniedError,
    ConfigurationError,
    DeliveryError,
    RekapanError,
    ValidationError
)

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = '❌ Terjadi kesalahan sistem. Coba lagi nanti.'


class ErrorSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    USER = "user"            # Rejected input or access; the sender sees the exception's message
    TRANSIENT = "transient"  # Sheets or Telegram hiccup
    PERMANENT = "permanent"  # Needs a code or configuration fix


LOG_LEVELS = {
    ErrorSeverity.LOW: logging.INFO,
    ErrorSeverity.MEDIUM: logging.WARNING,
    ErrorSeverity.HIGH: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


@dataclass(frozen=True)
class ClassificationRule:
    exceptions: Tuple[Type[BaseException], ...]
    category: ErrorCategory
    severity: ErrorSeverity


# First matching rule wins
CLASSIFICATION_RULES = (
    ClassificationRule((ValidationError, AccessDeniedError), ErrorCategory.USER, ErrorSeverity.LOW),
    ClassificationRule((DeliveryError, HttpError), ErrorCategory.TRANSIENT, ErrorSeverity.HIGH),
    ClassificationRule((NetworkError, ConnectionError, TimeoutError), ErrorCategory.TRANSIENT, ErrorSeverity.MEDIUM),
    ClassificationRule((ConfigurationError,), ErrorCategory.PERMANENT, ErrorSeverity.CRITICAL),
)

FALLBACK_RULE = ClassificationRule((Exception,), ErrorCategory.PERMANENT, ErrorSeverity.HIGH)


@dataclass
class CommandError:
    """A failed command, as logged and answered"""
    command: str
    error_type: str
    detail: str
    category: ErrorCategory
    severity: ErrorSeverity
    reply: str
    chat_id: Optional[int] = None
    username: str = ''
    traceback: Optional[str] = None


def find_rule(error: BaseException) -> ClassificationRule:
    for rule in CLASSIFICATION_RULES:
        if isinstance(error, rule.exceptions):
            return rule
    return FALLBACK_RULE


def classify(
    error: BaseException,
    command: str = 'unknown',
    chat_id: Optional[int] = None,
    username: str = ''
) -> CommandError:
    """
    Classify a command failure

    Only user errors expose their own message. Everything else gets the
    generic reply and keeps its traceback for the log.

    Args:
        error: Exception raised by the command
        command: Command name, e.g. "aktivasi"
        chat_id: Chat the command came from
        username: Sender's Telegram username

    Returns:
        CommandError carrying the reply for the sender
    """
    rule = find_rule(error)

    if rule.category == ErrorCategory.USER:
        reply = error.user_message if isinstance(error, RekapanError) else GENERIC_FAILURE_MESSAGE
        tb = None
    else:
        reply = GENERIC_FAILURE_MESSAGE
        tb = ''.join(traceback.format_exception(type(error), error, error.__traceback__))

    return CommandError(
        command=command,
        error_type=type(error).__name__,
        detail=str(error),
        category=rule.category,
        severity=rule.severity,
        reply=reply,
        chat_id=chat_id,
        username=username,
        traceback=tb
    )


class ErrorHandler:
    """
    Logs command failures at the level of their severity
    """

    def handle_error(
        self,
        error: BaseException,
        command: str = 'unknown',
        chat_id: Optional[int] = None,
        username: str = ''
    ) -> CommandError:
        """
        Classify and log a command failure

        Failures outside the user category are logged together with their
        traceback in one record.

        Returns:
            CommandError carrying the reply for the sender
        """
        failure = classify(error, command, chat_id, username)

        message = (
            f"/{failure.command} from @{failure.username} in chat {failure.chat_id}: "
            f"{failure.error_type} - {failure.detail}"
        )
        if failure.traceback:
            message = f"{message}\n{failure.traceback}"

        logger.log(LOG_LEVELS[failure.severity], message)
        return failure
