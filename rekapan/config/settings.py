import os
import tempfile
from dotenv import load_dotenv

from rekapan.exceptions import ConfigurationError

# Load environment variables
load_dotenv()


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes')


class Settings:
    def __init__(self):
        # Telegram
        self.telegram_token = os.getenv('TELEGRAM_TOKEN')
        self.railway_static_url = os.getenv('RAILWAY_STATIC_URL', '')
        self.use_webhook = _env_flag('USE_WEBHOOK') or bool(self.railway_static_url)
        self.port = int(os.getenv('PORT', '3000'))

        # Delivery
        self.message_max_length = int(os.getenv('MESSAGE_MAX_LENGTH', '4000'))
        self.send_max_retries = int(os.getenv('SEND_MAX_RETRIES', '3'))

        # Google Sheets
        self.sheet_id = os.getenv('SHEET_ID')
        self.google_service_account_key = os.getenv('GOOGLE_SERVICE_ACCOUNT_KEY', '')
        self.google_credentials_path = os.getenv('GOOGLE_CREDENTIALS_PATH', '')
        self.rekapan_sheet = os.getenv('REKAPAN_SHEET', 'REKAPAN QUALITY')
        self.master_sheet = os.getenv('MASTER_SHEET', 'MASTER')

        # Processing
        self.timezone = os.getenv('TIMEZONE', 'Asia/Jakarta')
        self.extraction_profile = os.getenv('EXTRACTION_PROFILE', 'standard').strip().lower()

        # Storage Paths
        self.export_dir = os.getenv('EXPORT_DIR', tempfile.gettempdir())
        self.log_file_path = os.getenv('LOG_FILE_PATH', '')

    @property
    def webhook_url(self) -> str:
        """Public URL Telegram posts updates to in webhook mode"""
        if not self.railway_static_url:
            return ''
        return f"https://{self.railway_static_url}/bot{self.telegram_token}"

    def validate(self):
        """
        Check that everything needed to start the bot is configured

        Raises:
            ConfigurationError: Listing every missing variable
        """
        missing = []
        if not self.telegram_token:
            missing.append('TELEGRAM_TOKEN')
        if not self.sheet_id:
            missing.append('SHEET_ID')
        if not self.google_service_account_key and not self.google_credentials_path:
            missing.append('GOOGLE_SERVICE_ACCOUNT_KEY or GOOGLE_CREDENTIALS_PATH')

        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}",
                missing=missing
            )
