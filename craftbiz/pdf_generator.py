"""
PDF Offer Generator.

Generates a one-card PDF offer from a QuoteDocument.
Uses fpdf2 (pure Python, no system dependencies).

Sections:
1. Header (offer title + client)
2. Cost details (one row per line item)
3. Total bar
4. Notes (only when the recipe has notes)

The PDF is drawn directly from the document fields, so nothing here parses
markup; escaping only applies to the HTML rendition.
"""

from fpdf import FPDF

from .quote_renderer import QuoteDocument

# Core PDF fonts are latin-1 only; map what the seed data and users
# commonly type onto something printable.
_TRANSLITERATE = {
    "•": "-",    # bullet
    "—": " - ",  # em dash
    "–": "-",    # en dash
    "“": '"',    # left double quote
    "”": '"',    # right double quote
    "„": '"',    # low double quote
    "‘": "'",    # left single quote
    "’": "'",    # right single quote
    "…": "...",  # ellipsis
    "ă": "a", "Ă": "A",
    "ș": "s", "Ș": "S",
    "ş": "s", "Ş": "S",  # cedilla forms
    "ț": "t", "Ț": "T",
    "ţ": "t", "Ţ": "T",
}
_TRANSLITERATE_TABLE = str.maketrans(_TRANSLITERATE)


def _safe(text: str) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        text
        .translate(_TRANSLITERATE_TABLE)
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


class OfferPDF(FPDF):
    """Custom PDF class for single-card offer documents."""

    def __init__(self, shop_name=""):
        super().__init__()
        self.shop_name = shop_name
        self.set_auto_page_break(auto=True, margin=20)

    def header(self):
        pass  # Title is drawn as part of the card

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        label = f"Page {self.page_no()}/{{nb}}"
        if self.shop_name:
            label = f"{_safe(self.shop_name)} - {label}"
        self.cell(0, 10, label, align="C")

    def section_header(self, title):
        """Render a section header bar."""
        self.set_font("Helvetica", "B", 11)
        self.set_fill_color(30, 70, 63)
        self.set_text_color(255, 255, 255)
        self.cell(0, 8, f"  {title}", fill=True, new_x="LMARGIN", new_y="NEXT")
        self.set_text_color(0, 0, 0)
        self.ln(2)

    def cost_row(self, label, amount):
        """Label on the left, amount right-aligned."""
        self.set_font("Helvetica", "", 10)
        self.cell(130, 6, _safe(label))
        self.cell(60, 6, _safe(amount), align="R")
        self.ln()

    def total_bar(self, label, amount):
        self.ln(1)
        self.set_fill_color(30, 70, 63)
        self.set_text_color(242, 209, 75)
        self.set_font("Helvetica", "B", 13)
        self.cell(130, 10, f"  {_safe(label).upper()}", fill=True)
        self.cell(60, 10, f"{_safe(amount)}  ", fill=True, align="R")
        self.set_text_color(0, 0, 0)
        self.ln(14)


def generate_quote_pdf(document: QuoteDocument, shop_name: str = "") -> bytes:
    """
    Generate a PDF offer.

    Args:
        document: QuoteDocument from build_quote_document
        shop_name: optional footer branding

    Returns:
        PDF bytes
    """
    pdf = OfferPDF(shop_name=shop_name or "")
    pdf.alias_nb_pages()
    pdf.add_page()
    pw = pdf.w - pdf.l_margin - pdf.r_margin  # printable width

    # ── SECTION 1: Header ──
    pdf.set_font("Helvetica", "B", 18)
    pdf.multi_cell(pw, 9, _safe(document.title), new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 9)
    pdf.set_text_color(100, 100, 100)
    pdf.multi_cell(pw, 5, _safe(f"Client: {document.client}"), new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)
    pdf.ln(6)

    # ── SECTION 2: Cost details ──
    pdf.section_header("COST DETAILS")
    total = None
    for row in document.rows:
        if row.bold:
            total = row
            continue
        pdf.cost_row(row.label, row.amount)

    # ── SECTION 3: Total ──
    if total is not None:
        pdf.set_draw_color(200, 200, 200)
        pdf.line(pdf.l_margin, pdf.get_y(), pdf.w - pdf.r_margin, pdf.get_y())
        pdf.total_bar(total.label, total.amount)

    # ── SECTION 4: Notes ──
    if document.notes:
        pdf.section_header("NOTES")
        pdf.set_font("Helvetica", "", 9)
        pdf.set_x(pdf.l_margin)
        pdf.multi_cell(pw, 4.5, _safe(document.notes), new_x="LMARGIN", new_y="NEXT")

    return bytes(pdf.output())
