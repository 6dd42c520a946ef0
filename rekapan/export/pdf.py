"""
PDF export of activation rows

Renders a paginated A4 landscape table; the header row repeats on every
page.
"""

import logging
from datetime import datetime
from typing import Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from xml.sax.saxutils import escape

from rekapan.reporting.periods import DEFAULT_TIMEZONE, format_timestamp, now_in

logger = logging.getLogger(__name__)

PAGE_MARGIN = 10
MAX_CELL_LENGTH = 50


def _cell_text(value, limit: int = MAX_CELL_LENGTH) -> str:
    return ('' if value is None else str(value))[:limit]


def render_pdf(
    headers: Sequence[str],
    rows: Sequence[Sequence],
    file_path: str,
    title: str = 'DATA AKTIVASI',
    generated_at: Optional[datetime] = None,
    tz_name: str = DEFAULT_TIMEZONE
) -> str:
    """
    Write rows as a PDF table

    Args:
        headers: Column titles
        rows: Data rows; missing cells render empty, long cells are cut at 50 characters
        file_path: Output path
        title: Document title
        generated_at: Timestamp printed under the title (default: now in tz_name)
        tz_name: Timezone of the default timestamp

    Returns:
        file_path
    """
    pagesize = landscape(A4)
    doc = SimpleDocTemplate(
        file_path,
        pagesize=pagesize,
        leftMargin=PAGE_MARGIN,
        rightMargin=PAGE_MARGIN,
        topMargin=PAGE_MARGIN,
        bottomMargin=PAGE_MARGIN,
        title=title
    )
    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        'ExportTitle',
        parent=styles['Heading1'],
        fontName='Helvetica-Bold',
        fontSize=16,
        alignment=TA_CENTER
    )
    subtitle_style = ParagraphStyle('ExportSubtitle', parent=styles['Normal'], fontSize=9, alignment=TA_CENTER)
    header_style = ParagraphStyle('ExportHeader', parent=styles['Normal'], fontName='Helvetica-Bold', fontSize=7, leading=8)
    cell_style = ParagraphStyle('ExportCell', parent=styles['Normal'], fontName='Helvetica', fontSize=6, leading=7)
    footer_style = ParagraphStyle('ExportFooter', parent=styles['Normal'], fontSize=8, alignment=TA_RIGHT)

    generated_at = generated_at or now_in(tz_name)
    story = [
        Paragraph(escape(title), title_style),
        Paragraph(f"Generated: {format_timestamp(generated_at)} WIB", subtitle_style),
        Spacer(1, 8)
    ]

    column_count = len(headers)
    table_data = [[Paragraph(escape(h), header_style) for h in headers]]
    for row in rows:
        cells = list(row) + [''] * (column_count - len(row))
        table_data.append([Paragraph(escape(_cell_text(c)), cell_style) for c in cells[:column_count]])

    col_width = (pagesize[0] - 2 * PAGE_MARGIN) / max(column_count, 1)
    table = Table(table_data, colWidths=[col_width] * column_count, repeatRows=1)
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#CCCCCC')),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('GRID', (0, 0), (-1, -1), 0.25, colors.grey),
        ('LEFTPADDING', (0, 0), (-1, -1), 2),
        ('RIGHTPADDING', (0, 0), (-1, -1), 2),
    ]))

    story.append(table)
    story.append(Spacer(1, 6))
    story.append(Paragraph(f"Total Records: {len(rows)}", footer_style))

    doc.build(story)
    logger.info(f"Rendered {len(rows)} rows to {file_path}")
    return file_path
