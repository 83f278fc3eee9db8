"""
Quotation Renderer.

Formats a Recipe + Breakdown + client name two ways:
1. Share message: line-oriented plain text handed to the share sink.
2. Quote document: a titled card (heading, client, cost details, total,
   notes) rendered to HTML here and to PDF by pdf_generator.

Every piece of user text (name, client, notes) is HTML-escaped before it is
placed into markup. The plain-text share message is never escaped.
"""

from dataclasses import dataclass, field
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import List, Optional

from .config import settings
from .schemas import Breakdown, Recipe

_CENTS = Decimal("0.01")
_WIDE = Context(prec=400)  # enough digits for any finite float

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
}
_HTML_TABLE = str.maketrans(_HTML_ESCAPES)


def escape_html(text) -> str:
    """Escape the five markup metacharacters. None renders as ''."""
    if text is None:
        return ""
    return str(text).translate(_HTML_TABLE)


def currency(amount, suffix: Optional[str] = None) -> str:
    """
    Format a money amount as "X.XX <suffix>".

    Rounds half-up on the shortest decimal form of the float, so a computed
    85.085 prints as 85.09 rather than 85.08.
    """
    suffix = settings.CURRENCY_SUFFIX if suffix is None else suffix
    amount = float(amount) or 0.0  # drop negative zero
    cents = Decimal(repr(amount)).quantize(_CENTS, rounding=ROUND_HALF_UP, context=_WIDE)
    return f"{cents} {suffix}"


def _plain(number) -> str:
    """25.0 -> '25', 12.5 -> '12.5'."""
    number = float(number)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def _labor_label(recipe: Recipe, suffix: str) -> str:
    return f"Labor ({_plain(recipe.labor_minutes)} min @ {_plain(recipe.hourly_rate)} {suffix}/h)"


def _cost_rows(recipe: Recipe, breakdown: Breakdown, suffix: str) -> List[tuple]:
    """(label, amount) pairs shared by the message and the document."""
    return [
        ("Materials", currency(recipe.material_cost, suffix)),
        (_labor_label(recipe, suffix), currency(breakdown.labor_cost, suffix)),
        ("Subtotal", currency(breakdown.base, suffix)),
        (f"Markup {_plain(recipe.markup_pct)}%", currency(breakdown.markup_amount, suffix)),
        (f"VAT {_plain(recipe.vat_pct)}%", currency(breakdown.vat_amount, suffix)),
    ]


def build_share_message(recipe: Recipe, breakdown: Breakdown, client: str,
                        suffix: Optional[str] = None) -> str:
    """Plain-text offer. Empty lines are dropped before joining."""
    suffix = settings.CURRENCY_SUFFIX if suffix is None else suffix
    lines = [
        f"Offer — {recipe.name}",
        f"Client: {client}",
        "",
    ]
    lines += [f"{label}: {amount}" for label, amount in _cost_rows(recipe, breakdown, suffix)]
    lines += [
        f"TOTAL: {currency(breakdown.with_vat, suffix)}",
        "",
        f"Notes: {recipe.notes}" if recipe.notes else "",
    ]
    return "\n".join(line for line in lines if line)


@dataclass(frozen=True)
class DocumentRow:
    label: str
    amount: str
    bold: bool = False


@dataclass(frozen=True)
class QuoteDocument:
    """Format-neutral quote card. Holds raw (unescaped) text."""
    name: str
    client: str
    rows: List[DocumentRow] = field(default_factory=list)
    notes: Optional[str] = None

    @property
    def title(self) -> str:
        return f"Offer — {self.name}"


def build_quote_document(recipe: Recipe, breakdown: Breakdown, client: str,
                         suffix: Optional[str] = None) -> QuoteDocument:
    suffix = settings.CURRENCY_SUFFIX if suffix is None else suffix
    rows = [DocumentRow(label, amount) for label, amount in _cost_rows(recipe, breakdown, suffix)]
    rows.append(DocumentRow("Total", currency(breakdown.with_vat, suffix), bold=True))
    return QuoteDocument(
        name=recipe.name,
        client=client,
        rows=rows,
        notes=recipe.notes or None,
    )


_HTML_TEMPLATE = """<html>
<head>
  <meta charset="utf-8" />
  <style>
    body{{font-family: system-ui, -apple-system, Segoe UI, Roboto, sans-serif; padding:24px;}}
    .card{{border:1px solid #e6e6e6; border-radius:12px; padding:20px;}}
    h1{{margin:0 0 8px 0; font-size:20px;}}
    h2{{margin:18px 0 6px 0; font-size:16px}}
    .row{{display:flex; justify-content:space-between; margin:6px 0}}
    .total{{font-weight:800; color:#000}}
    small{{color:#666}}
  </style>
</head>
<body>
  <div class="card">
    <h1>{title}</h1>
    <small>Client: {client}</small>
    <h2>Cost details</h2>
{rows}{notes}  </div>
</body>
</html>
"""


def render_html(document: QuoteDocument) -> str:
    """Render the quote card as an HTML page ready for PDF conversion."""
    rows = "".join(
        '    <div class="row{cls}"><span>{label}</span><span>{amount}</span></div>\n'.format(
            cls=" total" if row.bold else "",
            label=escape_html(row.label),
            amount=escape_html(row.amount),
        )
        for row in document.rows
    )
    notes = ""
    if document.notes:
        notes = f"    <h2>Notes</h2><div>{escape_html(document.notes)}</div>\n"
    return _HTML_TEMPLATE.format(
        title=escape_html(document.title),
        client=escape_html(document.client),
        rows=rows,
        notes=notes,
    )
