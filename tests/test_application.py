"""
Tests for the Telegram application wiring
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from telegram import Chat, Message, Update, User
from telegram.ext import MessageHandler

from rekapan.bot.application import build_application


def make_message(text, chat_type=Chat.PRIVATE):
    return Message(
        message_id=55,
        date=datetime(2024, 6, 12, 2, 30, tzinfo=timezone.utc),
        chat=Chat(id=1001, type=chat_type),
        from_user=User(id=7, first_name='Tekno', is_bot=False, username='tekno1'),
        text=text
    )


@pytest.fixture
def message_handler():
    settings = SimpleNamespace(telegram_token='123456:TEST-token', message_max_length=4000, send_max_retries=3)
    application = build_application(settings, service=MagicMock())
    return next(h for h in application.handlers[0] if isinstance(h, MessageHandler))


class TestMessageFilter:
    """Test which updates reach the command handler"""

    def test_new_message_accepted(self, message_handler):
        update = Update(update_id=1, message=make_message('/aktivasi AO : X1'))
        assert message_handler.check_update(update)

    def test_edited_message_rejected(self, message_handler):
        update = Update(update_id=2, edited_message=make_message('/aktivasi AO : X2'))
        assert not message_handler.check_update(update)

    def test_channel_post_rejected(self, message_handler):
        update = Update(update_id=3, channel_post=make_message('/aktivasi AO : X3', chat_type=Chat.CHANNEL))
        assert not message_handler.check_update(update)
