"""
Bot application wiring

Builds the service stack from settings and runs the Telegram
application in polling or webhook mode.
"""

import logging
from typing import Optional

from telegram.ext import Application, ApplicationBuilder, MessageHandler, filters

from rekapan.bot.handlers import BotHandlers, log_unhandled_error
from rekapan.bot.messenger import TelegramMessenger
from rekapan.config import Settings
from rekapan.extraction import FieldExtractor
from rekapan.monitoring import ErrorHandler
from rekapan.service import ActivationService
from rekapan.storage import ActivationRepository, GoogleSheetsManager, RosterRepository

logger = logging.getLogger(__name__)

# New text messages only; edits and channel posts never create records
MESSAGE_FILTER = filters.UpdateType.MESSAGE & filters.TEXT


def create_service(settings: Settings, sheets: Optional[GoogleSheetsManager] = None) -> ActivationService:
    """Create the activation service from settings"""
    sheets = sheets or GoogleSheetsManager(
        spreadsheet_id=settings.sheet_id,
        service_account_key=settings.google_service_account_key,
        credentials_path=settings.google_credentials_path
    )

    extractor = FieldExtractor(settings.extraction_profile, tz_name=settings.timezone)

    return ActivationService(
        records=ActivationRepository(sheets, settings.rekapan_sheet),
        roster=RosterRepository(sheets, settings.master_sheet),
        extractor=extractor,
        tz_name=settings.timezone,
        export_dir=settings.export_dir
    )


def build_application(settings: Settings, service: Optional[ActivationService] = None) -> Application:
    """
    Build the Telegram application

    Updates are processed one at a time, so a duplicate check and the
    append that follows it never interleave with another submission.
    """
    application = (
        ApplicationBuilder()
        .token(settings.telegram_token)
        .concurrent_updates(False)
        .build()
    )

    messenger = TelegramMessenger(
        application.bot,
        max_length=settings.message_max_length,
        max_retries=settings.send_max_retries
    )
    handlers = BotHandlers(service or create_service(settings), messenger, ErrorHandler())

    application.add_handler(MessageHandler(MESSAGE_FILTER, handlers.handle_message))
    application.add_error_handler(log_unhandled_error)
    return application


def run(settings: Settings, use_webhook: Optional[bool] = None):
    """
    Start the bot and block until stopped

    Args:
        settings: Loaded settings
        use_webhook: Force webhook (True) or polling (False); default from settings
    """
    settings.validate()
    application = build_application(settings)

    webhook = settings.use_webhook if use_webhook is None else use_webhook
    logger.info("✓ Bot Rekapan Quality started!")
    logger.info(f"✓ MASTER sheet: {settings.master_sheet}")
    logger.info(f"✓ REKAPAN sheet: {settings.rekapan_sheet}")

    if webhook and settings.webhook_url:
        logger.info(f"✓ Mode: Webhook on port {settings.port}")
        application.run_webhook(
            listen='0.0.0.0',
            port=settings.port,
            url_path=f"bot{settings.telegram_token}",
            webhook_url=settings.webhook_url
        )
    else:
        if webhook:
            logger.warning("Webhook mode requested without RAILWAY_STATIC_URL, using polling")
        logger.info("✓ Mode: Polling")
        application.run_polling()
