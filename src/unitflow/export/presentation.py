"""Printable table of entries, as a standalone HTML document."""

from dataclasses import dataclass
from datetime import datetime
from html import escape

from unitflow.views.cards import format_when
from unitflow.views.windows import oldest_first

DETAIL_COLUMNS = 9

_STYLE = """
    body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif; padding: 16px; }
    h1 { margin: 0 0 6px 0; font-size: 18px; }
    .meta { margin: 0 0 14px 0; color: #555; font-size: 12px; }
    table { width: 100%; border-collapse: collapse; font-size: 12px; }
    th, td { border: 1px solid #ddd; padding: 8px; vertical-align: top; }
    th { background: #f5f5f5; text-align: left; }
    .tip { margin-top: 12px; font-size: 12px; color: #555; }
    @media print { .tip { display: none; } }
"""


@dataclass(frozen=True)
class PresentationRow:
    when: str
    mode_label: str
    cells: tuple[str, ...]


def presentation_row(entry) -> PresentationRow:
    if entry.is_crash:
        cells = (
            entry.cart_type,
            entry.location,
            entry.cart_number,
            entry.reason,
            entry.central_new,
            entry.med_new,
            entry.checked_by,
            entry.seal,
            entry.notes,
        )
        mode_label = "Crash"
    else:
        cells = (
            entry.author,
            entry.shift,
            entry.unit,
            entry.entry_type,
            entry.severity,
            entry.qty,
            entry.notes,
        )
        mode_label = "Supply"
    return PresentationRow(
        when=format_when(entry.timestamp),
        mode_label=mode_label,
        cells=tuple(cell or "" for cell in cells),
    )


def presentation_rows(entries) -> list[PresentationRow]:
    return [presentation_row(entry) for entry in oldest_first(entries)]


def _row_html(row: PresentationRow) -> str:
    cells = [f"<td>{escape(cell)}</td>" for cell in row.cells]
    # Supply rows have fewer columns; the notes cell spans the remainder
    spare = DETAIL_COLUMNS - len(row.cells)
    if spare:
        cells[-1] = f'<td colspan="{spare + 1}">{escape(row.cells[-1])}</td>'
    return f"<tr><td>{escape(row.when)}</td><td>{row.mode_label}</td>{''.join(cells)}</tr>"


def to_presentation_view(entries, title: str = "UnitFlow - Selected", generated_at: datetime | None = None) -> str:
    rows = presentation_rows(entries)
    generated = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M")
    body = "\n      ".join(_row_html(row) for row in rows)

    return f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width,initial-scale=1" />
  <title>{escape(title)}</title>
  <style>{_STYLE}</style>
</head>
<body>
  <h1>{escape(title)}</h1>
  <p class="meta">Generated: {escape(generated)} • Items: {len(rows)}</p>
  <table>
    <thead>
      <tr><th>Time</th><th>Mode</th><th colspan="{DETAIL_COLUMNS}">Details</th></tr>
    </thead>
    <tbody>
      {body}
    </tbody>
  </table>
  <p class="tip">Tip: Share, then Print, then Save to Files (PDF).</p>
</body>
</html>"""
