"""
Telegram delivery with chunking and retry
"""

import logging
from typing import Any, Awaitable, Callable, List, Optional

from telegram import Bot, Message, ReplyParameters
from telegram.constants import ParseMode
from telegram.error import TelegramError
from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing
)

from rekapan.exceptions import DeliveryError

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 4000


def split_message(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> List[str]:
    """
    Split a long message on line boundaries

    Lines longer than max_length are cut into max_length pieces.
    """
    if len(text) <= max_length:
        return [text]

    chunks = []
    chunk = ''
    for line in text.split('\n'):
        pieces = [line[i:i + max_length - 1] for i in range(0, len(line), max_length - 1)] or ['']
        for piece in pieces:
            if len(chunk) + len(piece) + 1 > max_length and chunk:
                chunks.append(chunk)
                chunk = ''
            chunk += piece + '\n'

    if chunk.strip():
        chunks.append(chunk)
    return chunks


class TelegramMessenger:
    """
    Sends texts and files, retrying failed deliveries with linear backoff
    """

    def __init__(
        self,
        bot: Bot,
        max_length: int = DEFAULT_MAX_LENGTH,
        max_retries: int = 3,
        retry_delay: float = 1.0
    ):
        """
        Initialize messenger

        Args:
            bot: Telegram bot
            max_length: Chunk ceiling for text messages
            max_retries: Retries after the first failed attempt
            retry_delay: Delay before the first retry, grows by the same amount per retry
        """
        self.bot = bot
        self.max_length = max_length
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    async def _deliver(self, chat_id: Any, send: Callable[[], Awaitable[Message]]) -> Message:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_incrementing(start=self.retry_delay, increment=self.retry_delay),
            retry=retry_if_exception_type(TelegramError),
            before_sleep=before_sleep_log(logger, logging.WARNING)
        )

        try:
            async for attempt in retrying:
                with attempt:
                    return await send()
        except RetryError as e:
            cause = e.last_attempt.exception()
            raise DeliveryError(
                f"Delivery to chat {chat_id} failed after {self.max_retries + 1} attempts: {cause}",
                chat_id=chat_id,
                attempts=self.max_retries + 1
            ) from cause

    @staticmethod
    def _reply_kwargs(reply_to_message_id: Optional[int]) -> dict:
        if reply_to_message_id is None:
            return {}
        return {'reply_parameters': ReplyParameters(message_id=reply_to_message_id, allow_sending_without_reply=True)}

    async def send_text(
        self,
        chat_id: Any,
        text: str,
        reply_to_message_id: Optional[int] = None,
        parse_mode: str = ParseMode.HTML
    ) -> List[Message]:
        """
        Send a text message, split into chunks when it exceeds the ceiling

        Raises:
            DeliveryError: When a chunk cannot be delivered
        """
        sent = []
        for chunk in split_message(text, self.max_length):
            async def send(chunk=chunk):
                return await self.bot.send_message(
                    chat_id=chat_id,
                    text=chunk,
                    parse_mode=parse_mode,
                    **self._reply_kwargs(reply_to_message_id)
                )
            sent.append(await self._deliver(chat_id, send))
        return sent

    async def send_document(
        self,
        chat_id: Any,
        file_path: str,
        filename: Optional[str] = None,
        caption: Optional[str] = None,
        reply_to_message_id: Optional[int] = None
    ) -> Message:
        """
        Send a file as a document

        Raises:
            DeliveryError: When the file cannot be delivered
        """
        async def send():
            with open(file_path, 'rb') as f:
                return await self.bot.send_document(
                    chat_id=chat_id,
                    document=f,
                    filename=filename,
                    caption=caption,
                    **self._reply_kwargs(reply_to_message_id)
                )

        return await self._deliver(chat_id, send)
