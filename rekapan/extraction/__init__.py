"""
Free-text field extraction for activation reports
"""

from .extractor import FieldExtractor, extract, find_sc_order, find_serial_number
from .profiles import EXTENDED, PROFILES, PROGRESS, STANDARD, ExtractionProfile, LabelRule, get_profile

__all__ = [
    'FieldExtractor',
    'extract',
    'find_sc_order',
    'find_serial_number',
    'ExtractionProfile',
    'LabelRule',
    'PROFILES',
    'STANDARD',
    'EXTENDED',
    'PROGRESS',
    'get_profile'
]
