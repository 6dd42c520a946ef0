"""
Telegram command handlers

A single text handler dispatches commands so that group chats can be
restricted to /aktivasi and unknown commands get a hint.
"""

import os
import re
import asyncio
import logging
from typing import Optional

from telegram import Message, Update
from telegram.constants import ChatType
from telegram.ext import ContextTypes

from rekapan.bot.messenger import TelegramMessenger
from rekapan.monitoring import ErrorHandler
from rekapan.service import ActivationService

logger = logging.getLogger(__name__)

COMMANDS = (
    ('aktivasi', re.compile(r'^/aktivasi\b', re.IGNORECASE)),
    ('exportcari', re.compile(r'^/exportcari\b', re.IGNORECASE)),
    ('cari', re.compile(r'^/cari\b', re.IGNORECASE)),
    ('allps', re.compile(r'^/allps\b', re.IGNORECASE)),
    ('ps', re.compile(r'^/ps\b', re.IGNORECASE)),
    ('topteknisi', re.compile(r'^/topteknisi\b', re.IGNORECASE)),
    ('help', re.compile(r'^/(help|start)\b', re.IGNORECASE)),
)

AKTIVASI_PREFIX = re.compile(r'^/aktivasi(@\w+)?\s*', re.IGNORECASE)

GROUP_CHATS = (ChatType.GROUP, ChatType.SUPERGROUP)

CONFIRMATION_MESSAGE = '✅ Data berhasil disimpan!\n<b>Lanjut GROUP FULFILLMENT dan PT1</b> 🚀'
UNKNOWN_COMMAND_MESSAGE = '❓ Command tidak dikenali. Ketik /help untuk bantuan.'
NO_EXPORT_DATA_MESSAGE = '❌ Tidak ada data aktivasi untuk diekspor.'


def match_command(text: str) -> Optional[str]:
    for name, pattern in COMMANDS:
        if pattern.match(text):
            return name
    return None


def command_args(text: str) -> list:
    """Whitespace separated arguments after the command word."""
    return text.split()[1:]


class BotHandlers:
    """
    Routes incoming messages to the activation service
    """

    def __init__(
        self,
        service: ActivationService,
        messenger: TelegramMessenger,
        error_handler: Optional[ErrorHandler] = None
    ):
        self.service = service
        self.messenger = messenger
        self.error_handler = error_handler or ErrorHandler()

    async def _reply(self, message: Message, text: str):
        return await self.messenger.send_text(message.chat_id, text, reply_to_message_id=message.message_id)

    async def handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """
        Process one incoming text message

        Failures inside a command are logged and answered with a single
        user-facing message; they never stop the bot.
        """
        message = update.message
        if message is None or not message.text:
            return

        text = message.text.strip()
        user = update.effective_user
        username = (user.username if user else None) or ''
        chat_type = message.chat.type

        logger.info(f"[MSG] Chat: {message.chat_id}, User: @{username}, Type: {chat_type}")
        logger.debug(f"[MSG] Text: {text[:100]}")

        command = match_command(text)

        # Groups only take activation submissions
        if chat_type in GROUP_CHATS and command != 'aktivasi':
            return

        if command is None:
            if text.startswith('/'):
                await self._reply(message, UNKNOWN_COMMAND_MESSAGE)
            return

        try:
            await getattr(self, f"cmd_{command}")(message, text, username)
        except Exception as e:
            failure = self.error_handler.handle_error(
                e,
                command=command,
                chat_id=message.chat_id,
                username=username
            )
            await self._reply(message, failure.reply)

    async def cmd_aktivasi(self, message: Message, text: str, username: str):
        body = AKTIVASI_PREFIX.sub('', text, count=1)
        logger.info(f"[AKTIVASI] User: @{username}")

        await asyncio.to_thread(self.service.submit_activation, body, username)
        await self._reply(message, CONFIRMATION_MESSAGE)

    async def cmd_cari(self, message: Message, text: str, username: str):
        reply = await asyncio.to_thread(self.service.user_statistics, username)
        await self._reply(message, reply)

    async def cmd_exportcari(self, message: Message, text: str, username: str):
        args = command_args(text)
        fmt = args[0].lower() if args else 'pdf'

        export = await asyncio.to_thread(self.service.export_user_records, username, fmt)
        if export is None:
            await self._reply(message, NO_EXPORT_DATA_MESSAGE)
            return

        try:
            await self.messenger.send_document(
                message.chat_id,
                export.path,
                filename=export.filename,
                caption=f"📄 File berhasil digenerate!\nFilename: {export.filename}\nTotal: {export.row_count} data",
                reply_to_message_id=message.message_id
            )
        finally:
            if os.path.exists(export.path):
                os.remove(export.path)

    async def cmd_ps(self, message: Message, text: str, username: str):
        args = command_args(text)
        explicit_date = args[0] if args else None

        reply = await asyncio.to_thread(self.service.daily_report, username, explicit_date)
        await self._reply(message, reply)

    async def cmd_topteknisi(self, message: Message, text: str, username: str):
        args = command_args(text)
        period = args[0] if args else 'all'
        explicit_date = args[1] if len(args) > 1 else None

        reply = await asyncio.to_thread(self.service.technician_ranking, username, period, explicit_date)
        await self._reply(message, reply)

    async def cmd_allps(self, message: Message, text: str, username: str):
        reply = await asyncio.to_thread(self.service.overall_summary, username)
        await self._reply(message, reply)

    async def cmd_help(self, message: Message, text: str, username: str):
        reply = await asyncio.to_thread(self.service.help_text, username)
        await self._reply(message, reply)


async def log_unhandled_error(update: object, context: ContextTypes.DEFAULT_TYPE):
    """Application-level error handler; faults outside command handling are only logged."""
    logger.error("Unhandled error while processing update", exc_info=context.error)
