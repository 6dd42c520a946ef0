"""
Extraction profiles

A profile is a declarative table of `LABEL : value` rules plus the
fallback policy applied after label matching.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Pattern, Tuple

# Value captured up to end of line
LINE_VALUE = r'.+?(?=\n|$)'
ALNUM_VALUE = r'[A-Za-z0-9]+'
DIGITS_VALUE = r'[0-9]+'
PHONE_VALUE = r'[0-9+\- ]+'

# Fields that live on ActivationRecord directly; anything else goes to extras
DATE_FIELD = 'tanggal'


def label_regex(label: str, value: str = LINE_VALUE) -> Pattern:
    """
    Compile a `LABEL : value` matcher

    Words inside the label may be separated by any whitespace. Whitespace
    after the colon never crosses a line break, so an empty label does not
    swallow the next line.
    """
    words = r'\s*'.join(re.escape(word) for word in label.split())
    return re.compile(rf'\b{words}\s*:[^\S\n]*({value})', re.IGNORECASE)


@dataclass(frozen=True)
class LabelRule:
    field: str
    label: str
    value: str = LINE_VALUE

    @property
    def pattern(self) -> Pattern:
        return label_regex(self.label, self.value)


@dataclass(frozen=True)
class ExtractionProfile:
    """
    Label table and policy for one message layout

    Attributes:
        name: Profile key
        rules: Label rules, applied in order
        fallbacks: Apply the serial number / SC order / AO / workorder fallback chain
        use_roster_handle: Prefer the roster handle over the sender's username for TEKNISI
    """
    name: str
    rules: Tuple[LabelRule, ...]
    fallbacks: bool = True
    use_roster_handle: bool = True


STANDARD_RULES = (
    LabelRule('channel', 'CHANNEL'),
    LabelRule('workorder', 'WORKORDER'),
    LabelRule('ao', 'AO'),
    LabelRule('sc_order_no', 'SC ORDER NO'),
    LabelRule('service_no', 'SERVICE NO'),
    LabelRule('customer_name', 'CUSTOMER NAME'),
    LabelRule('workzone', 'WORKZONE'),
    LabelRule('contact_phone', 'CONTACT PHONE'),
    LabelRule('odp', 'ODP'),
    LabelRule('symptom', 'SYMPTOM'),
    LabelRule('memo', 'MEMO'),
    LabelRule('tikor', 'TIKOR'),
    LabelRule('sn_ont', 'SN ONT'),
    LabelRule('nik_ont', 'NIK ONT'),
    LabelRule('stb_id', 'STB ID'),
    LabelRule('nik_stb', 'NIK STB'),
)

EXTENDED_RULES = STANDARD_RULES + (
    LabelRule(DATE_FIELD, 'DATE CREATED'),
    LabelRule('ncli', 'NCLI'),
    LabelRule('address', 'ADDRESS'),
    LabelRule('booking_date', 'BOOKING DATE'),
    LabelRule('paket', 'PAKET'),
    LabelRule('package', 'PACKAGE'),
    LabelRule('mitra', 'MITRA'),
)

PROGRESS_RULES = (
    LabelRule('channel', 'CHANNEL', ALNUM_VALUE),
    LabelRule('sc_order_no', 'SC ORDER NO'),
    LabelRule('service_no', 'SERVICE NO', DIGITS_VALUE),
    LabelRule('customer_name', 'CUSTOMER NAME'),
    LabelRule('workzone', 'WORKZONE', ALNUM_VALUE),
    LabelRule('contact_phone', 'CONTACT PHONE', PHONE_VALUE),
    LabelRule('odp', 'ODP'),
    LabelRule('memo', 'MEMO'),
    LabelRule('symptom', 'SYMPTOM'),
    LabelRule('ao', 'AO'),
    LabelRule('workorder', 'WORKORDER', ALNUM_VALUE),
    LabelRule('tikor', 'TIKOR'),
    LabelRule('sn_ont', 'SN ONT'),
    LabelRule('nik_ont', 'NIK ONT', DIGITS_VALUE),
    LabelRule('stb_id', 'STB ID'),
    LabelRule('nik_stb', 'NIK STB', DIGITS_VALUE),
)

STANDARD = ExtractionProfile('standard', STANDARD_RULES)
EXTENDED = ExtractionProfile('extended', EXTENDED_RULES)
PROGRESS = ExtractionProfile('progress', PROGRESS_RULES, fallbacks=False, use_roster_handle=False)

PROFILES = MappingProxyType({p.name: p for p in (STANDARD, EXTENDED, PROGRESS)})


def get_profile(name: str) -> ExtractionProfile:
    """
    Look up a profile by name

    Raises:
        ValueError: For unknown profile names
    """
    key = (name or '').strip().lower()
    if key not in PROFILES:
        raise ValueError(f"Unknown extraction profile: {name!r} (choose from {', '.join(PROFILES)})")
    return PROFILES[key]
