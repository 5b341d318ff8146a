"""
PDF Proposal Generator.

Renders a PricedQuote (from PricingEngine) as a one-page commercial proposal.
Uses fpdf2 (pure Python, no system dependencies).

Sections:
1. Header (company, title, date)
2. Client details
3. Staircase specifications for the chosen option
4. Cost breakdown + project total
5. Footer (validity, thanks)
"""

import re
import unicodedata

from fpdf import FPDF
from fpdf.enums import MethodReturnValue

from .config import settings
from .pricing_engine import format_currency_brl

TITLE = "Proposta Comercial - Escada Pré-Moldada"
HEADER_FILL = (45, 55, 72)
TITLE_COLOR = (246, 173, 85)
ROW_LINE_HEIGHT = 6.5


def _safe(text) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        str(text)
        .replace("\u00a0", " ")    # nbsp
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


def proposal_filename(client_name: str) -> str:
    """proposta_escada_<name>.pdf, whitespace replaced by underscores."""
    # Header values must be plain ASCII: "João" -> "Joao"
    name = unicodedata.normalize("NFKD", client_name or "").encode("ascii", "ignore").decode("ascii")
    name = re.sub(r"\s", "_", name.strip()).replace('"', "").replace("/", "_")
    return f"proposta_escada_{name or 'cliente'}.pdf"


class ProposalPDF(FPDF):
    """Custom PDF class for staircase proposals."""

    def __init__(self):
        super().__init__()
        self.set_auto_page_break(auto=True, margin=20)

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 10, f"Página {self.page_no()}/{{nb}}", align="C")

    def section_header(self, title):
        self.set_font("Helvetica", "B", 12)
        self.set_text_color(40, 40, 40)
        self.cell(0, 8, _safe(title), new_x="LMARGIN", new_y="NEXT")
        self.ln(1)

    def table_header(self, cols):
        """cols: [(label, width), ...]"""
        self.set_font("Helvetica", "B", 9)
        self.set_fill_color(*HEADER_FILL)
        self.set_text_color(255, 255, 255)
        for label, width in cols:
            self.cell(width, 7, _safe(label), border=1, fill=True)
        self.ln()
        self.set_text_color(0, 0, 0)

    def table_row(self, values, widths, striped=False, align_last="L"):
        """One bordered row; long values wrap inside their column and the row grows."""
        self.set_font("Helvetica", "", 9)
        self.set_fill_color(245, 245, 245)
        texts = [_safe(val) for val in values]
        line_counts = [
            max(len(self.multi_cell(width, ROW_LINE_HEIGHT, text, dry_run=True,
                                    output=MethodReturnValue.LINES)), 1)
            for text, width in zip(texts, widths)
        ]
        row_height = ROW_LINE_HEIGHT * max(line_counts)
        if self.will_page_break(row_height):
            self.add_page()

        x, y = self.l_margin, self.get_y()
        for i, (text, width) in enumerate(zip(texts, widths)):
            align = align_last if i == len(widths) - 1 else "L"
            self.rect(x, y, width, row_height, style="DF" if striped else "D")
            self.set_xy(x, y)
            self.multi_cell(width, ROW_LINE_HEIGHT, text, align=align,
                            new_x="RIGHT", new_y="TOP")
            x += width
        self.set_xy(self.l_margin, y + row_height)


def build_proposal_pdf(priced_quote: dict, company: dict = None) -> ProposalPDF:
    """
    Lay out the proposal document.

    Args:
        priced_quote: PricedQuote dict from PricingEngine.build_priced_quote
        company: optional {"name", "phone", "email"}; defaults to settings

    Returns:
        ProposalPDF, not yet serialized
    """
    company = company or {}
    company_name = company.get("name") or settings.COMPANY_NAME
    info_parts = [p for p in (company.get("phone", settings.COMPANY_PHONE),
                              company.get("email", settings.COMPANY_EMAIL)) if p]
    company_info = " | ".join(info_parts)

    pdf = ProposalPDF()
    pdf.alias_nb_pages()
    pdf.add_page()
    pw = pdf.w - pdf.l_margin - pdf.r_margin

    # ── Header ──
    pdf.set_font("Helvetica", "B", 18)
    pdf.set_text_color(*TITLE_COLOR)
    pdf.cell(0, 10, _safe(TITLE), new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(100, 100, 100)
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 5, _safe(company_name), new_x="LMARGIN", new_y="NEXT")
    if company_info:
        pdf.cell(0, 5, _safe(company_info), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, f"Data: {priced_quote.get('quote_date_display', '')}",
             new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)
    pdf.ln(6)

    # ── Client ──
    client = priced_quote.get("client", {})
    pdf.section_header("Dados do Cliente")
    client_widths = [55, 40, pw - 95]
    pdf.table_header(list(zip(["Nome", "CPF/CNPJ", "Endereço da Obra"], client_widths)))
    pdf.table_row(
        [client.get("name", ""), client.get("cpf") or "Não informado", client.get("address", "")],
        client_widths,
    )
    pdf.ln(6)

    # ── Specifications ──
    option = priced_quote.get("option", {})
    pdf.section_header(f"Especificações da Escada (Opção {option.get('option_number', '?')})")
    spec_widths = [pw * 0.6, pw * 0.4]
    pdf.table_header(list(zip(["Item", "Valor"], spec_widths)))
    for i, (label, value) in enumerate(priced_quote.get("specifications", [])):
        pdf.table_row([label, value], spec_widths, striped=(i % 2 == 1))
    pdf.ln(6)

    # ── Costs ──
    pdf.section_header("Detalhamento de Valores")
    cost_widths = [pw * 0.6, pw * 0.4]
    pdf.table_header(list(zip(["Descrição", "Valor"], cost_widths)))
    for item in priced_quote.get("line_items", []):
        amount = item.get("amount_display") or format_currency_brl(item.get("amount", 0))
        pdf.table_row([item.get("description", ""), amount], cost_widths, align_last="R")

    pdf.ln(4)
    pdf.set_font("Helvetica", "B", 13)
    pdf.cell(cost_widths[0], 9, "Valor Total do Projeto:")
    total = priced_quote.get("total_display") or format_currency_brl(priced_quote.get("total", 0))
    pdf.cell(cost_widths[1], 9, _safe(total), align="R")
    pdf.ln(16)

    # ── Footer ──
    pdf.set_font("Helvetica", "", 10)
    pdf.set_text_color(150, 150, 150)
    valid_days = priced_quote.get("valid_days", settings.QUOTE_VALID_DAYS)
    pdf.cell(pw, 5, _safe(f"Proposta válida por {valid_days} dias."), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(pw, 5, _safe("Agradecemos a preferência!"), new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)

    return pdf


def generate_proposal_pdf(priced_quote: dict, company: dict = None) -> bytes:
    """Render the proposal and return the PDF bytes."""
    return bytes(build_proposal_pdf(priced_quote, company).output())
