"""HTML rendering of an audit report.

The output is a fragment meant to be embedded in a page: a table with one row
per audited paragraph pair, then the summary and the style rules. Every piece
of model text is escaped.
"""

from html import escape as html_escape
from typing import List

from .schemas import AuditReport, AuditRow

COLUMNS = ["#", "Source", "Translation", "Issues", "Fix", "Acc/Idio/Cons", "Severity"]

PRE_STYLE = "white-space:pre-wrap;margin:0"

def escape_html(text: str = "") -> str:
    """Escape &, <, >, " and ' for use in element text or attribute values."""
    return html_escape(text, quote=True)

def _pre(text: str) -> str:
    return f'<pre style="{PRE_STYLE}">{escape_html(text)}</pre>'

def render_row(row: AuditRow) -> str:
    cells = [
        escape_html(row.index),
        _pre(row.source),
        _pre(row.translation),
        _pre(row.issues),
        _pre(row.fix),
        escape_html(row.score),
        escape_html(row.severity),
    ]
    return "<tr>" + "".join(f"<td>{cell}</td>" for cell in cells) + "</tr>"

def render_report(report: AuditReport) -> str:
    html_parts: List[str] = ["<table>", "<thead>", "<tr>"]
    html_parts.append("".join(f"<th>{html_escape(col)}</th>" for col in COLUMNS))
    html_parts.extend(["</tr>", "</thead>", "<tbody>"])
    for row in report.rows:
        html_parts.append(render_row(row))
    html_parts.extend(["</tbody>", "</table>"])

    html_parts.append("<h3>Summary</h3>")
    html_parts.append(f'<pre class="mono">{escape_html(report.summary)}</pre>')

    html_parts.append("<h3>Style Rules</h3>")
    rules = "".join(f"<li>{escape_html(rule)}</li>" for rule in report.rules)
    html_parts.append(f"<ul>{rules}</ul>")

    return "\n".join(html_parts)
