"""
Report export: PDF tables and CSV files
"""

from .csv_export import render_csv
from .pdf import render_pdf

__all__ = ['render_csv', 'render_pdf']
