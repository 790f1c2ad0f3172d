"""ReportLab PDF Generation Service Implementation

Implements PDF generation using ReportLab library.
"""

from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from src.app.services.pdf_service import InvoiceDocument, PdfService

PRIMARY = colors.HexColor("#1A237E")
PANEL = colors.HexColor("#F9F9F9")
BORDER = colors.HexColor("#DDDDDD")

CONTENT_WIDTH = 162 * mm


def text(value) -> str:
    """Escape user text for Paragraph markup"""
    return escape(str(value or ""))


class ReportLabPdfService(PdfService):
    """
    ReportLab implementation of PdfService

    Lays out an A4 invoice: issuer header with invoice details, Bill To
    block, item table, payment information beside the summary, and a
    footer line.
    """

    def render_invoice(self, document: InvoiceDocument) -> bytes:
        """
        Render an invoice PDF

        Args:
            document: Structured invoice description

        Returns:
            PDF document as bytes
        """
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=24 * mm,
            leftMargin=24 * mm,
            topMargin=24 * mm,
            bottomMargin=24 * mm,
            title=f"Invoice {document.header.invoice_number}",
        )

        styles = getSampleStyleSheet()
        heading_style = ParagraphStyle(
            "HeadingStyle",
            parent=styles["Heading1"],
            fontSize=18,
            leading=22,
            textColor=PRIMARY,
            spaceAfter=6,
        )
        small_style = ParagraphStyle(
            "SmallStyle",
            parent=styles["Normal"],
            fontSize=9,
            leading=13,
        )
        section_style = ParagraphStyle(
            "SectionStyle",
            parent=styles["Normal"],
            fontSize=11,
            fontName="Helvetica-Bold",
            textColor=PRIMARY,
            spaceAfter=4,
        )
        footer_style = ParagraphStyle(
            "FooterStyle",
            parent=styles["Normal"],
            fontSize=9,
            fontName="Helvetica-Oblique",
            textColor=PRIMARY,
            alignment=1,
        )

        elements = []

        # Header - issuer on the left, invoice details on the right
        header = document.header
        issuer = [Paragraph(text(header.company_name), heading_style)]
        issuer += [Paragraph(text(line), small_style) for line in header.company_lines]

        details_table = Table(
            [
                ["Invoice #:", header.invoice_number],
                ["Date:", header.issue_date],
                ["Due Date:", header.due_date],
                ["Type:", header.payment_type],
            ],
            colWidths=[22 * mm, 42 * mm],
        )
        details_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
                ]
            )
        )
        details = [Paragraph("Invoice Details", heading_style), details_table]

        header_table = Table([[issuer, details]], colWidths=[95 * mm, 67 * mm])
        header_table.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
        elements.append(header_table)
        elements.append(Spacer(1, 8 * mm))

        # Bill To
        client = document.client
        bill_to = [
            Paragraph("Bill To:", section_style),
            Paragraph(text(client.name), styles["Normal"]),
            Paragraph(text(client.address), small_style),
        ]
        if client.gstin:
            bill_to.append(Paragraph(f"GSTIN: {text(client.gstin)}", small_style))
        elements.append(self._panel(bill_to, CONTENT_WIDTH))
        elements.append(Spacer(1, 6 * mm))

        # Line Items Table
        line_data = [["Description", "Qty", "Unit Price", "Total"]]
        for item in document.items:
            line_data.append(
                [
                    Paragraph(text(item.description), small_style),
                    item.quantity,
                    item.unit_price,
                    item.total,
                ]
            )

        line_table = Table(
            line_data, colWidths=[81 * mm, 24 * mm, 28.5 * mm, 28.5 * mm], repeatRows=1
        )
        line_table.setStyle(
            TableStyle(
                [
                    # Header row
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F5F6FA")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), PRIMARY),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                    ("LINEBELOW", (0, 0), (-1, -1), 0.5, BORDER),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    # Alternate row colors
                    (
                        "ROWBACKGROUNDS",
                        (0, 1),
                        (-1, -1),
                        [colors.white, colors.HexColor("#FCFCFC")],
                    ),
                ]
            )
        )
        elements.append(line_table)
        elements.append(Spacer(1, 6 * mm))

        # Payment information and summary side by side
        summary = document.summary
        summary_data = [[label, value] for label, value in summary.rows]
        summary_data.append(["Grand Total:", summary.grand_total])
        summary_table = Table(summary_data, colWidths=[40 * mm, 35 * mm])
        summary_table.setStyle(
            TableStyle(
                [
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("ALIGN", (1, 0), (1, -1), "RIGHT"),
                    ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, -1), (-1, -1), 11),
                    ("TEXTCOLOR", (0, -1), (-1, -1), PRIMARY),
                    ("LINEABOVE", (0, -1), (-1, -1), 1, PRIMARY),
                    ("TOPPADDING", (0, -1), (-1, -1), 6),
                ]
            )
        )

        if document.payment is not None:
            payment = document.payment
            payment_block = [
                Paragraph("Payment Information:", section_style),
                Paragraph(f"Account Name: {text(payment.account_name)}", small_style),
                Paragraph(f"A/C No: {text(payment.account_number)}", small_style),
                Paragraph(f"IFSC: {text(payment.ifsc)}", small_style),
            ]
            info_table = Table(
                [[self._panel(payment_block, 78 * mm), self._panel([summary_table], 80 * mm)]],
                colWidths=[81 * mm, 81 * mm],
            )
        else:
            info_table = Table(
                [["", self._panel([summary_table], 80 * mm)]],
                colWidths=[81 * mm, 81 * mm],
            )
        info_table.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 0),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 0),
                ]
            )
        )
        elements.append(info_table)

        if document.remark:
            elements.append(Spacer(1, 6 * mm))
            elements.append(Paragraph("Remark:", section_style))
            elements.append(Paragraph(text(document.remark), small_style))

        # Footer note
        if document.footer:
            elements.append(Spacer(1, 8 * mm))
            elements.append(Paragraph(text(document.footer), footer_style))

        # Build PDF
        doc.build(elements)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes

    @staticmethod
    def _panel(content: list, width: float) -> Table:
        panel = Table([[content]], colWidths=[width])
        panel.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, -1), PANEL),
                    ("BOX", (0, 0), (-1, -1), 0.75, BORDER),
                    ("LEFTPADDING", (0, 0), (-1, -1), 8),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 8),
                    ("TOPPADDING", (0, 0), (-1, -1), 8),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
                ]
            )
        )
        return panel
