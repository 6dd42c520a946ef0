"""
Telegram transport package
"""

from .messenger import TelegramMessenger, split_message
from .handlers import BotHandlers

__all__ = [
    'TelegramMessenger',
    'split_message',
    'BotHandlers'
]
