"""
CSV export of activation rows
"""

import csv
import io
from typing import Sequence


def render_csv(headers: Sequence[str], rows: Sequence[Sequence]) -> str:
    """
    Render rows as comma separated text

    Values containing a comma, a double quote or a line break are quoted,
    embedded quotes are doubled. Empty cells stay empty.
    """
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL, lineterminator='\n')

    writer.writerow(headers)
    for row in rows:
        writer.writerow(['' if cell is None else str(cell) for cell in row])

    return output.getvalue()
