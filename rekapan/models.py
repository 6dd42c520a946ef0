"""
Data models for activation records and roster entries

Records are stored as fixed-width rows in the REKAPAN worksheet, roster
entries come from the MASTER worksheet.
"""

from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional, Sequence


# Stored column order (A..R)
ROW_FIELDS = (
    'tanggal',
    'channel',
    'workorder',
    'ao',
    'sc_order_no',
    'service_no',
    'customer_name',
    'workzone',
    'contact_phone',
    'odp',
    'symptom',
    'memo',
    'tikor',
    'sn_ont',
    'nik_ont',
    'stb_id',
    'nik_stb',
    'teknisi',
)

SHEET_HEADERS = [
    'TANGGAL', 'CHANNEL', 'WORKORDER', 'AO', 'SC_ORDER_NO', 'SERVICE_NO',
    'CUSTOMER_NAME', 'WORKZONE', 'CONTACT_PHONE', 'ODP', 'SYMPTOM', 'MEMO',
    'TIKOR', 'SN_ONT', 'NIK_ONT', 'STB_ID', 'NIK_STB', 'TEKNISI'
]

# MASTER worksheet columns (I=USERNAME, J=ROLE, K=STATUS)
ROSTER_HANDLE_COLUMN = 8
ROSTER_ROLE_COLUMN = 9
ROSTER_STATUS_COLUMN = 10

ROLE_ADMIN = 'ADMIN'
STATUS_ACTIVE = 'AKTIF'


def normalize_identity(identity: Optional[str]) -> str:
    """Lower-case a Telegram handle and drop a leading '@'."""
    value = (identity or '').strip()
    if value.startswith('@'):
        value = value[1:]
    return value.strip().lower()


def normalize_key(value: Optional[str]) -> str:
    """Business key comparison form: trimmed and upper-cased."""
    return (value or '').strip().upper()


def _cell(row: Sequence, index: int) -> str:
    if index < len(row) and row[index] is not None:
        return str(row[index])
    return ''


@dataclass
class ActivationRecord:
    """One activation report submitted by a technician."""
    tanggal: str = ''
    channel: str = ''
    workorder: str = ''
    ao: str = ''
    sc_order_no: str = ''
    service_no: str = ''
    customer_name: str = ''
    workzone: str = ''
    contact_phone: str = ''
    odp: str = ''
    symptom: str = ''
    memo: str = ''
    tikor: str = ''
    sn_ont: str = ''
    nik_ont: str = ''
    stb_id: str = ''
    nik_stb: str = ''
    teknisi: str = ''
    # Profile-specific fields that are not part of the stored row
    extras: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: Sequence) -> 'ActivationRecord':
        """
        Build a record from a worksheet row

        Sheets omits trailing empty cells, so short rows are padded.
        """
        return cls(**{name: _cell(row, i) for i, name in enumerate(ROW_FIELDS)})

    def to_row(self) -> List[str]:
        """Convert to the 18-column stored row."""
        return [getattr(self, name) for name in ROW_FIELDS]

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        data = {f.name: getattr(self, f.name) for f in fields(self) if f.name != 'extras'}
        data.update(self.extras)
        return data

    @property
    def business_key(self) -> str:
        return normalize_key(self.ao)

    @property
    def technician_identity(self) -> str:
        return normalize_identity(self.teknisi)


@dataclass
class RosterEntry:
    """A technician or admin registered in the MASTER worksheet."""
    handle: str
    role: str = ''
    status: str = ''

    @classmethod
    def from_row(cls, row: Sequence) -> 'RosterEntry':
        return cls(
            handle=_cell(row, ROSTER_HANDLE_COLUMN).strip(),
            role=_cell(row, ROSTER_ROLE_COLUMN).strip().upper(),
            status=_cell(row, ROSTER_STATUS_COLUMN).strip().upper(),
        )

    @property
    def identity(self) -> str:
        return normalize_identity(self.handle)

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def technician_handle(self) -> str:
        """Handle as written into the TEKNISI column, without the '@'."""
        handle = self.handle.strip()
        return handle[1:].strip() if handle.startswith('@') else handle
