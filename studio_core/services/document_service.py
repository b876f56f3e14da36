# =============================================================================
# studio_core/services/document_service.py
# Invoice and financial report PDFs
# =============================================================================
"""
DocumentService - renders order invoices and transaction reports with ReportLab.

Both documents are returned as PDF bytes; saving or downloading them is up to
the caller (e.g. ``st.download_button(data=pdf, file_name=...)``).
"""

from __future__ import annotations
import re
from datetime import datetime
from io import BytesIO
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from studio_core.errors import DocumentError
from studio_core.models.entities import CURRENCIES, Client, Currency, CurrencyCode, Order, Transaction
from studio_core.services.base_service import BaseService
from studio_core.services.finance_service import FinanceService

BRAND_NAME = "BA BAKE"
BRAND_TAGLINE = "Haute Couture & Bespoke Tailoring"
BRAND_CONTACT = "Yangon, Myanmar • htethtetmu@babake.pro"

TERMS = (
    "1. 50% deposit required for fabrication commencement.",
    "2. Garments will not be released until final balance is cleared.",
)

_WHITESPACE = re.compile(r"\s")


def _money(amount: float) -> str:
    return f"{amount:,.0f}" if float(amount).is_integer() else f"{amount:,.2f}"


def _short_date(value: str) -> str:
    try:
        return datetime.fromisoformat(value).strftime("%d/%m/%Y")
    except (TypeError, ValueError):
        return value or "-"


class DocumentService(BaseService):
    """PDF invoices for orders and period reports for transactions."""

    def __init__(self, finance: Optional[FinanceService] = None):
        super().__init__()
        self.finance = finance or FinanceService()

        self.primary_color = colors.HexColor("#9C27B0")
        self.panel_color = colors.HexColor("#F8F8FA")
        self.gray_color = colors.HexColor("#646464")
        self.paid_color = colors.HexColor("#009600")
        self.due_color = colors.HexColor("#FF0000")

    def _get_styles(self):
        styles = getSampleStyleSheet()
        styles.add(ParagraphStyle(
            name="Brand",
            parent=styles["Heading1"],
            fontSize=24,
            textColor=self.primary_color,
            spaceAfter=2 * mm,
        ))
        styles.add(ParagraphStyle(
            name="SectionHeader",
            parent=styles["Heading2"],
            fontSize=12,
            textColor=self.primary_color,
            spaceBefore=4 * mm,
            spaceAfter=2 * mm,
        ))
        styles.add(ParagraphStyle(
            name="SmallText",
            parent=styles["Normal"],
            fontSize=8,
            textColor=self.gray_color,
        ))
        styles.add(ParagraphStyle(
            name="RightAlign",
            parent=styles["Normal"],
            fontSize=10,
            alignment=TA_RIGHT,
        ))
        return styles

    def _render(self, elements: List, document: str) -> bytes:
        buffer = BytesIO()
        try:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=A4,
                rightMargin=20 * mm,
                leftMargin=20 * mm,
                topMargin=20 * mm,
                bottomMargin=20 * mm,
                title=document,
            )
            doc.build(elements)
        except Exception as e:
            raise DocumentError(f"Could not render {document}: {e}", document=document) from e
        return buffer.getvalue()

    def _grid_style(self) -> TableStyle:
        return TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), self.primary_color),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#E5E7EB")),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("ALIGN", (-1, 0), (-1, -1), "RIGHT"),
        ])

    # =========================================================================
    # INVOICE
    # =========================================================================

    @staticmethod
    def invoice_number(order: Order) -> str:
        return f"#INV-{order.id[:8].upper()}"

    @staticmethod
    def invoice_filename(client: Client, order: Order) -> str:
        return f"Invoice_{_WHITESPACE.sub('_', client.name)}_{order.id[:4]}.pdf"

    def invoice_pdf(self, client: Client, order: Order, currency: Optional[Currency] = None) -> bytes:
        """
        Render the bill for one order.

        Raises:
            DocumentError: If the PDF cannot be built
        """
        currency = currency or CURRENCIES[CurrencyCode.MMK]
        sym = currency.symbol
        styles = self._get_styles()
        elements = []

        # ===== HEADER =====
        elements.append(Paragraph(BRAND_NAME, styles["Brand"]))
        elements.append(Paragraph(escape(BRAND_TAGLINE), styles["SmallText"]))
        elements.append(Paragraph(escape(BRAND_CONTACT), styles["SmallText"]))
        elements.append(Spacer(1, 8 * mm))

        # ===== BILL TO / META =====
        bill_to = f"<b>BILL TO:</b><br/><b>{escape(client.name)}</b><br/>{escape(client.phone)}"
        if client.address:
            bill_to += f"<br/>{escape(client.address)}"
        meta = (
            f"Invoice No: {self.invoice_number(order)}<br/>"
            f"Order Date: {_short_date(order.created_at)}<br/>"
            f"Deadline: {_short_date(order.deadline)}"
        )
        header_table = Table(
            [[Paragraph(bill_to, styles["Normal"]), Paragraph(meta, styles["RightAlign"])]],
            colWidths=[95 * mm, 75 * mm],
        )
        header_table.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
        elements.append(header_table)
        elements.append(Spacer(1, 6 * mm))

        # ===== DESIGN =====
        design = Table(
            [[Paragraph(f"<b>DESIGN DESCRIPTION:</b><br/>{escape(order.description)}", styles["Normal"])]],
            colWidths=[170 * mm],
        )
        design.setStyle(TableStyle([("BACKGROUND", (0, 0), (-1, -1), self.panel_color)]))
        elements.append(design)
        elements.append(Spacer(1, 6 * mm))

        # ===== ITEMS =====
        labour = order.total_amount - order.fabric_cost
        items = Table(
            [
                ["Item Description", f"Amount ({sym})"],
                ["Fabric Price", _money(order.fabric_cost)],
                ["Dress Price (Labor / Tailoring)", _money(labour)],
            ],
            colWidths=[120 * mm, 50 * mm],
        )
        items.setStyle(self._grid_style())
        elements.append(items)

        # ===== SUMMARY =====
        elements.append(Paragraph("BILL SUMMARY", styles["SectionHeader"]))
        summary = Table(
            [
                ["Total Amount:", f"{_money(order.total_amount)} {sym}"],
                ["Paid (Deposits):", f"- {_money(order.paid_amount)} {sym}"],
                ["BALANCE DUE:", f"{_money(order.balance_due)} {sym}"],
            ],
            colWidths=[120 * mm, 50 * mm],
        )
        summary.setStyle(TableStyle([
            ("ALIGN", (1, 0), (1, -1), "RIGHT"),
            ("TEXTCOLOR", (1, 1), (1, 1), self.paid_color),
            ("LINEABOVE", (0, 2), (-1, 2), 0.5, colors.black),
            ("FONTNAME", (0, 2), (-1, 2), "Helvetica-Bold"),
            ("TEXTCOLOR", (0, 2), (-1, 2), self.due_color),
        ]))
        elements.append(summary)
        elements.append(Spacer(1, 15 * mm))

        # ===== TERMS =====
        elements.append(Paragraph("Terms &amp; Conditions:", styles["SmallText"]))
        for line in TERMS:
            elements.append(Paragraph(escape(line), styles["SmallText"]))

        pdf = self._render(elements, "invoice")
        self.logger.info(f"Invoice {self.invoice_number(order)} rendered ({len(pdf)} bytes)")
        return pdf

    # =========================================================================
    # FINANCIAL REPORT
    # =========================================================================

    @staticmethod
    def report_filename(period: str) -> str:
        return f"BaBake_Report_{_WHITESPACE.sub('_', period)}.pdf"

    def financial_report_pdf(
        self,
        transactions: Sequence[Transaction],
        period: str,
        currency: Optional[Currency] = None,
    ) -> bytes:
        """
        Render totals and a table of the given transactions.

        Raises:
            DocumentError: If the PDF cannot be built
        """
        currency = currency or CURRENCIES[CurrencyCode.MMK]
        sym = currency.symbol
        styles = self._get_styles()
        summary = self.finance.summarize(transactions)

        elements = [
            Paragraph(f"{BRAND_NAME} FINANCIAL REPORT", styles["Brand"]),
            Paragraph(f"Period: {escape(period)}", styles["SmallText"]),
            Spacer(1, 6 * mm),
            Paragraph(f"Total Income: {_money(summary.income)} {sym}", styles["Normal"]),
            Paragraph(f"Total Expense: {_money(summary.expense)} {sym}", styles["Normal"]),
            Paragraph(f"<b>Net Balance: {_money(summary.net)} {sym}</b>", styles["Heading3"]),
            Spacer(1, 4 * mm),
        ]

        rows = [["Date", "Category", "Description", "Type", f"Amount ({sym})"]]
        for t in transactions:
            rows.append([
                t.date,
                Paragraph(escape(t.category), styles["Normal"]),
                Paragraph(escape(t.description), styles["Normal"]),
                t.type.value.upper(),
                _money(t.amount),
            ])
        table = Table(rows, colWidths=[25 * mm, 35 * mm, 60 * mm, 20 * mm, 30 * mm], repeatRows=1)
        table.setStyle(self._grid_style())
        elements.append(table)

        pdf = self._render(elements, "financial report")
        self.logger.info(f"Financial report for {period} rendered ({len(transactions)} transactions)")
        return pdf
