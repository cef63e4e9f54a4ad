"""
PDF Estimate Generator.

Renders a computed Quote as a one-page customer estimate.
Uses fpdf2 (pure Python, no system dependencies).

Sections:
1. Header — company, project, date, validity
2. Services — one row per line item
3. Totals — subtotal, overhead, tax, total
"""

from datetime import datetime
from decimal import Decimal

from fpdf import FPDF

from .quote_calculator import Quote, format_currency


def _safe(text: str) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        text
        .replace("\u2022", "-")    # bullet
        .replace("\u2014", " - ")  # em dash
        .replace("\u2013", "-")    # en dash
        .replace("\u201c", '"')    # left double quote
        .replace("\u201d", '"')    # right double quote
        .replace("\u2018", "'")    # left single quote
        .replace("\u2019", "'")    # right single quote
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


def _fmt_qty(quantity: Decimal) -> str:
    """50 → '50', 12.50 → '12.5'"""
    text = f"{quantity:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def _fmt_pct(fraction: Decimal) -> str:
    """0.08 → '8%', 0.075 → '7.5%'"""
    return f"{_fmt_qty(fraction * 100)}%"


class EstimatePDF(FPDF):
    """Custom PDF class for customer estimates."""

    def __init__(self, company_name=""):
        super().__init__()
        self.company_name = company_name
        self.set_auto_page_break(auto=True, margin=20)

    def header(self):
        pass  # Header is drawn once, on the first page

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        label = f"{_safe(self.company_name)} - " if self.company_name else ""
        self.cell(0, 10, f"{label}Page {self.page_no()}/{{nb}}", align="C")

    def section_header(self, title):
        """Render a section header bar."""
        self.set_font("Helvetica", "B", 11)
        self.set_fill_color(3, 105, 161)
        self.set_text_color(255, 255, 255)
        self.cell(0, 8, f"  {title}", fill=True, new_x="LMARGIN", new_y="NEXT")
        self.set_text_color(0, 0, 0)
        self.ln(2)

    def table_header(self, cols):
        """Render a table header row. cols: [(label, width), ...]"""
        self.set_font("Helvetica", "B", 8)
        self.set_fill_color(240, 240, 240)
        for label, width in cols:
            align = "R" if label in ("Qty", "Rate", "Cost") else "L"
            self.cell(width, 6, label, border="B", fill=True, align=align)
        self.ln()

    def table_row(self, values, widths):
        """Render a table data row. Last three columns are numeric."""
        self.set_font("Helvetica", "", 8)
        for i, (val, width) in enumerate(zip(values, widths)):
            align = "R" if i >= len(widths) - 3 else "L"
            self.cell(width, 5.5, str(val), align=align)
        self.ln()

    def total_row(self, label, amount):
        self.set_font("Helvetica", "", 10)
        self.cell(130, 6, label)
        self.cell(60, 6, format_currency(amount), align="R")
        self.ln()


def generate_quote_pdf(quote: Quote, company: dict, valid_days: int = 30) -> bytes:
    """
    Generate a PDF estimate document.

    Args:
        quote: Quote from compute_quote()
        company: {"name", "email", "phone"} — printed in the header
        valid_days: validity window printed under the date

    Returns:
        PDF bytes
    """
    company_name = company.get("name") or "Estimate"
    contact = " | ".join(p for p in [company.get("phone"), company.get("email")] if p)

    pdf = EstimatePDF(company_name=company_name)
    pdf.alias_nb_pages()
    pdf.add_page()

    # ── Header ──
    pdf.set_font("Helvetica", "B", 20)
    pdf.cell(0, 10, _safe(pdf.company_name), new_x="LMARGIN", new_y="NEXT")
    if contact:
        pdf.set_font("Helvetica", "", 9)
        pdf.set_text_color(100, 100, 100)
        pdf.cell(0, 5, _safe(contact), new_x="LMARGIN", new_y="NEXT")
        pdf.set_text_color(0, 0, 0)
    pdf.ln(4)

    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 8, "COST ESTIMATE", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 5, f"Date: {datetime.utcnow().strftime('%B %d, %Y')}", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, f"Valid for: {valid_days} days", new_x="LMARGIN", new_y="NEXT")
    if quote.project_name:
        pdf.cell(0, 5, _safe(f"Project: {quote.project_name}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(
        0, 5,
        f"Area: {_fmt_qty(quote.area)} sqm  |  Fixtures: {quote.fixtures}",
        new_x="LMARGIN", new_y="NEXT",
    )
    if quote.location_factor != 1:
        pdf.cell(0, 5, f"Location factor: {_fmt_qty(quote.location_factor)}x", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(6)

    # ── Services ──
    pdf.section_header("SERVICES")
    cols = [("Service", 80), ("Unit", 25), ("Qty", 25), ("Rate", 30), ("Cost", 30)]
    widths = [c[1] for c in cols]
    pdf.table_header(cols)
    for item in quote.items:
        pdf.table_row(
            [
                _safe(item.service_name[:45]),
                _safe(item.unit[:12]),
                _fmt_qty(item.quantity),
                format_currency(item.rate),
                format_currency(item.cost),
            ],
            widths,
        )
    pdf.ln(4)

    # ── Totals ──
    pdf.section_header("TOTAL")
    pdf.total_row("Subtotal", quote.subtotal)
    pdf.total_row(f"Overhead ({_fmt_pct(quote.overhead_pct)})", quote.overhead)
    pdf.total_row(f"Tax ({_fmt_pct(quote.tax_pct)})", quote.tax)

    pdf.ln(1)
    pdf.set_fill_color(3, 105, 161)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font("Helvetica", "B", 13)
    pdf.cell(130, 10, "  ESTIMATE TOTAL", fill=True)
    pdf.cell(60, 10, f"{format_currency(quote.total)}  ", fill=True, align="R")
    pdf.set_text_color(0, 0, 0)
    pdf.ln(14)

    pdf.set_font("Helvetica", "I", 8)
    pdf.set_text_color(100, 100, 100)
    pdf.cell(0, 4, f"This estimate is valid for {valid_days} days from the date above.", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 4, "Final pricing subject to on-site inspection.", new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)

    return pdf.output()
