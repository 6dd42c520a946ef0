"""
Report formatting

Turns aggregation buckets into ranked lists and renders the Telegram
(HTML parse mode) report messages.
"""

from dataclasses import dataclass, field
from datetime import datetime
from html import escape
from typing import Iterable, List, Mapping, Optional

from rekapan.reporting.aggregator import EMPTY_GROUP, AggregateResult
from rekapan.reporting.periods import Period, format_timestamp

MEDALS = ('🥇', '🥈', '🥉')

DAILY_TOP_TECHNICIANS = 10
RANKING_LIMIT = 20
SUMMARY_TOP_TECHNICIANS = 5


@dataclass
class RankedEntry:
    position: int
    label: str
    count: int
    marker: str


@dataclass
class Ranking:
    """Sorted, optionally truncated bucket entries."""
    entries: List[RankedEntry] = field(default_factory=list)
    remainder: int = 0
    total_groups: int = 0

    @property
    def truncated(self) -> bool:
        return self.remainder > 0


def rank(
    bucket: Mapping[str, int],
    limit: Optional[int] = None,
    exclude: Iterable[str] = (),
    medals: bool = False
) -> Ranking:
    """
    Sort bucket entries by descending count

    Ties keep the bucket's insertion order (sorted() is stable).

    Args:
        bucket: Group key to count
        limit: Keep only the first N entries
        exclude: Group keys left out of the ranking
        medals: Mark the top three positions with medals

    Returns:
        Ranking with the kept entries and the number left out by the limit
    """
    excluded = set(exclude)
    items = [(label, count) for label, count in bucket.items() if label not in excluded]
    items = sorted(items, key=lambda item: item[1], reverse=True)

    kept = items if limit is None else items[:limit]

    entries = []
    for index, (label, count) in enumerate(kept):
        position = index + 1
        if medals and index < len(MEDALS):
            marker = MEDALS[index]
        else:
            marker = f"{position}."
        entries.append(RankedEntry(position=position, label=label, count=count, marker=marker))

    return Ranking(entries=entries, remainder=len(items) - len(kept), total_groups=len(items))


def _bullets(bucket: Mapping[str, int]) -> str:
    return ''.join(f"• {escape(e.label)}: {e.count}\n" for e in rank(bucket).entries)


def _numbered(bucket: Mapping[str, int], limit: Optional[int] = None, suffix: str = '') -> str:
    return ''.join(
        f"{e.marker} {escape(e.label)}: {e.count}{suffix}\n"
        for e in rank(bucket, limit=limit).entries
    )


def _footer(now: datetime, icon: str = '⏰') -> str:
    return f"\n{icon} {format_timestamp(now)} WIB"


def build_user_statistics(display_name: str, result: AggregateResult, now: datetime) -> str:
    """Personal statistics reply for /cari"""
    msg = (
        f"📊 <b>STATISTIK AKTIVASI</b>\n"
        f"👤 Teknisi: {escape(display_name)}\n"
        f"📈 Total: {result.total} SSL\n\n"
    )

    if result.total == 0:
        msg += '⚠️ Belum ada data aktivasi.\n'
    else:
        msg += '<b>Per Channel:</b>\n'
        msg += _bullets(result.by_channel)
        msg += '\n<b>Per Workzone:</b>\n'
        msg += _bullets(result.by_workzone)
        msg += '\n💾 <i>Gunakan /exportcari untuk download data lengkap</i>'

    return msg + _footer(now, icon='📅')


def build_daily_report(date_label: str, result: AggregateResult, now: datetime) -> str:
    """Daily report for /ps"""
    msg = (
        f"📊 <b>LAPORAN HARIAN</b>\n"
        f"Tanggal: {escape(date_label)}\n"
        f"Total: {result.total} SSL\n\n"
    )

    if result.total == 0:
        msg += '⚠️ Tidak ada data.\n'
    else:
        msg += f"Teknisi Aktif: {len(result.by_technician)}\n"
        msg += f"Workzone: {len(result.by_workzone)}\n"
        msg += f"Channel: {len(result.by_channel)}\n\n"

        msg += '<b>TOP TEKNISI:</b>\n'
        msg += _numbered(result.by_technician, limit=DAILY_TOP_TECHNICIANS, suffix=' SSL')
        msg += '\n<b>PERFORMA WORKZONE:</b>\n'
        msg += _numbered(result.by_workzone, suffix=' SSL')
        msg += '\n<b>PERFORMA OWNER:</b>\n'
        msg += _numbered(result.by_channel, suffix=' SSL')

    return msg + _footer(now)


def period_label(period: Period, custom_date: Optional[str] = None) -> str:
    if period == Period.DAILY:
        return f"Harian ({custom_date})" if custom_date else 'Hari ini'
    if period == Period.WEEKLY:
        return f"Mingguan ({custom_date})" if custom_date else 'Minggu ini'
    if period == Period.MONTHLY:
        return f"Bulanan ({custom_date})" if custom_date else 'Bulan ini'
    return 'Keseluruhan'


def build_technician_ranking(
    period: Period,
    result: AggregateResult,
    now: datetime,
    custom_date: Optional[str] = None,
    limit: int = RANKING_LIMIT
) -> str:
    """Technician leaderboard for /topteknisi"""
    ranking = rank(result.by_technician, limit=limit, exclude=(EMPTY_GROUP,), medals=True)

    msg = (
        f"🏆 <b>RANKING TEKNISI</b>\n"
        f"Periode: {escape(period_label(period, custom_date))}\n\n"
    )

    if not ranking.entries:
        msg += '⚠️ Belum ada data.\n'
    else:
        msg += f"Total Teknisi: {ranking.total_groups}\n\n"
        msg += f"<b>TOP {limit}:</b>\n"
        for entry in ranking.entries:
            msg += f"{entry.marker} {escape(entry.label)}: <b>{entry.count} SSL</b>\n"

        if ranking.truncated:
            msg += f"\n... dan {ranking.remainder} teknisi lainnya"

    return msg + _footer(now)


def build_overall_summary(result: AggregateResult, now: datetime) -> str:
    """All-time summary for /allps"""
    msg = '📊 <b>RINGKASAN AKTIVASI TOTAL</b>\n'
    msg += f"TOTAL KESELURUHAN: {result.total} SSL\n\n"

    msg += '<b>BERDASARKAN CHANNEL:</b>\n'
    msg += _bullets(result.by_channel)
    msg += '\n<b>BERDASARKAN WORKZONE:</b>\n'
    msg += _bullets(result.by_workzone)
    msg += f"\n<b>TOP {SUMMARY_TOP_TECHNICIANS} TEKNISI:</b>\n"
    msg += _numbered(result.by_technician, limit=SUMMARY_TOP_TECHNICIANS)

    return msg + _footer(now)


def build_help(is_admin: bool) -> str:
    msg = '🤖 <b>Bot Rekapan Quality</b>\n\n'

    msg += '<b>📝 Commands User:</b>\n'
    msg += '• <code>/aktivasi [data]</code> - Input aktivasi\n'
    msg += '• <code>/cari</code> - Statistik Anda\n'
    msg += '• <code>/exportcari</code> - Download data aktivasi (PDF)\n'
    msg += '• <code>/help</code> - Bantuan\n\n'

    if is_admin:
        msg += '<b>👑 Admin Commands:</b>\n'
        msg += '• <code>/ps</code> - Laporan harian\n'
        msg += '• <code>/ps [dd/mm/yyyy]</code> - Laporan tanggal custom\n'
        msg += '• <code>/topteknisi [periode] [tanggal]</code> - Ranking teknisi\n'
        msg += '   Periode: all, daily, weekly, monthly\n'
        msg += '• <code>/allps</code> - Ringkasan total\n\n'

    msg += '<b>📊 Format Input:</b>\n'
    msg += '<code>AO : [value]\nCHANNEL : [value]\nSERVICE NO : [value]\n... (dan field lainnya)</code>\n\n'
    msg += '🚀 Bot siap membantu aktivasi Anda!'
    return msg
