"""
Storage package for Google Sheets integration
"""

from .sheets import GoogleSheetsManager, load_service_account_info
from .repository import ActivationRepository, RosterRepository

__all__ = [
    'GoogleSheetsManager',
    'load_service_account_info',
    'ActivationRepository',
    'RosterRepository'
]
