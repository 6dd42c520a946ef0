"""
Rekapan Quality bot

Collects activation reports from field technicians over Telegram, stores
them in Google Sheets and answers statistics and ranking queries.
"""

__version__ = '1.0.0'
