"""
Audit export of the access history.

Pure transformations from an already filtered and sorted event list to
a downloadable CSV file or a printable HTML report. Delivering the
artifact (download, print) is left to the HTTP layer.
"""

import csv
import html
import io
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, tzinfo

from condo_gate.domain.models import AccessEvent

CSV_HEADER = ["Timestamp", "Name", "Direction", "House", "Vehicle"]

DEFAULT_TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"
DEFAULT_DATE_FORMAT = "%d/%m/%Y"

_REPORT_STYLE = """\
body { font-family: Arial, sans-serif; margin: 20px; }
h1 { color: #333; border-bottom: 2px solid #333; padding-bottom: 10px; }
table { width: 100%; border-collapse: collapse; margin-top: 20px; }
th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
th { background-color: #f2f2f2; }
.entry { color: #22c55e; font-weight: bold; }
.exit { color: #ef4444; font-weight: bold; }"""


@dataclass(frozen=True)
class ExportArtifact:
    """
    A rendered export ready to be handed to a sink.

    Attributes:
        filename: Suggested download name.
        media_type: MIME type of ``content``.
        content: Rendered document.
        row_count: Number of event rows rendered.
    """

    filename: str
    media_type: str
    content: str
    row_count: int


def _format_timestamp(moment: datetime, fmt: str, tz: tzinfo | None) -> str:
    if tz is not None and moment.tzinfo is not None:
        moment = moment.astimezone(tz)
    return moment.strftime(fmt)


def _row(event: AccessEvent, fmt: str, tz: tzinfo | None) -> list[str]:
    return [
        _format_timestamp(event.timestamp, fmt, tz),
        event.person_name,
        event.direction.value,
        event.house_address,
        event.vehicle_plate or "",
    ]


def export_filename(today: date) -> str:
    """Download name for a CSV export, e.g. ``access_history_2024-07-17.csv``."""
    return f"access_history_{today.isoformat()}.csv"


def render_csv(
    events: Sequence[AccessEvent],
    today: date,
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
    tz: tzinfo | None = None,
) -> ExportArtifact:
    """
    Render events as CSV.

    Every field is quoted and embedded quotes are doubled. Rows keep the
    order of ``events``.

    Args:
        events: Events to export, already filtered and sorted.
        today: Export date, used in the filename.
        timestamp_format: strftime format of the timestamp column.
        tz: Timezone timestamps are rendered in.

    Returns:
        ExportArtifact: ``text/csv`` artifact with a header row.

    Example:
        >>> render_csv([], date(2024, 7, 17)).content
        '"Timestamp","Name","Direction","House","Vehicle"\\n'
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for event in events:
        writer.writerow(_row(event, timestamp_format, tz))

    return ExportArtifact(
        filename=export_filename(today),
        media_type="text/csv",
        content=buffer.getvalue(),
        row_count=len(events),
    )


def render_print_document(
    events: Sequence[AccessEvent],
    generated_at: datetime,
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    tz: tzinfo | None = None,
) -> ExportArtifact:
    """
    Render events as a printable HTML report.

    The report carries a heading with the generation date, a total count
    and one table row per event. Missing plates are shown as "-".
    """
    rows = []
    for event in events:
        cells = _row(event, timestamp_format, tz)
        timestamp, name, direction, house, plate = (html.escape(cell) for cell in cells)
        rows.append(
            "<tr>"
            f"<td>{timestamp}</td>"
            f"<td>{name}</td>"
            f'<td class="{direction.lower()}">{direction}</td>'
            f"<td>{house}</td>"
            f"<td>{plate or '-'}</td>"
            "</tr>"
        )

    heading = f"Access Report - {generated_at.strftime(date_format)}"
    header_cells = "".join(f"<th>{html.escape(title)}</th>" for title in CSV_HEADER)
    content = "\n".join(
        [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '<meta charset="utf-8">',
            f"<title>{html.escape(heading)}</title>",
            f"<style>\n{_REPORT_STYLE}\n</style>",
            "</head>",
            "<body>",
            f"<h1>{html.escape(heading)}</h1>",
            f"<p>Total records: {len(events)}</p>",
            "<table>",
            f"<thead><tr>{header_cells}</tr></thead>",
            "<tbody>",
            *rows,
            "</tbody>",
            "</table>",
            "</body>",
            "</html>",
        ]
    )

    return ExportArtifact(
        filename=f"access_report_{generated_at.date().isoformat()}.html",
        media_type="text/html",
        content=content + "\n",
        row_count=len(events),
    )
