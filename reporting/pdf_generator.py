"""
Market Study Report (Estudo de Mercado)

Generates client-ready PDF reports from a valuated MarketStudy.
Uses ReportLab for deterministic PDF generation.

Output Structure:
1. Cover Page
2. Subject Property
3. Comparable Samples (accepted and rejected)
4. Statistical Analysis
5. Valuation by Standard
6. Recommended Value
7. Methodology
8. Disclaimer
"""

import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    HRFlowable,
    KeepTogether,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from core.market_study import MarketStudy, SampleStatus
from utils.formatting import format_percent


logger = logging.getLogger(__name__)


# =============================================================================
# Report Generation Result Types
# =============================================================================

@dataclass
class ReportSuccess:
    """Returned when PDF generation succeeds."""
    path: Path
    samples_included: int
    size_bytes: int


STATUS_LABELS = {
    SampleStatus.FOR_SALE: "À venda",
    SampleStatus.SOLD: "Vendido",
    SampleStatus.RENTED: "Alugado",
}

EVALUATION_LABELS = {
    "sale": "Venda",
    "rent": "Locação",
}


# =============================================================================
# Color Palette - Clean, print-friendly institutional style
# =============================================================================

class Palette:
    """Print-friendly palette: light background, charcoal text."""
    BLACK = colors.Color(0.1, 0.1, 0.1)
    CHARCOAL = colors.Color(0.2, 0.2, 0.22)
    SLATE = colors.Color(0.35, 0.38, 0.42)
    GRAY = colors.Color(0.5, 0.5, 0.5)
    LIGHT_GRAY = colors.Color(0.85, 0.85, 0.85)
    PALE_GRAY = colors.Color(0.95, 0.95, 0.95)
    WHITE = colors.white

    ACCENT = colors.Color(0.15, 0.25, 0.4)
    ACCENT_LIGHT = colors.Color(0.92, 0.94, 0.97)

    SUCCESS = colors.Color(0.15, 0.4, 0.25)
    SUCCESS_LIGHT = colors.Color(0.9, 0.95, 0.9)
    WARNING = colors.Color(0.5, 0.4, 0.15)
    WARNING_LIGHT = colors.Color(0.98, 0.96, 0.9)


# =============================================================================
# Style Configuration
# =============================================================================

def get_report_styles() -> dict:
    """
    Create paragraph styles for the market study report.
    Returns a StyleSheet with custom styles for each document element.
    """
    styles = getSampleStyleSheet()

    styles.add(ParagraphStyle(
        name='CoverBrand',
        parent=styles['Normal'],
        fontSize=11,
        leading=14,
        textColor=Palette.BLACK,
        alignment=TA_LEFT,
        fontName='Helvetica',
        letterSpacing=1.5,
    ))

    styles.add(ParagraphStyle(
        name='CoverTitle',
        parent=styles['Normal'],
        fontSize=22,
        leading=28,
        textColor=Palette.CHARCOAL,
        alignment=TA_LEFT,
        fontName='Helvetica-Bold',
        spaceAfter=10*mm,
    ))

    styles.add(ParagraphStyle(
        name='CoverSubtitle',
        parent=styles['Normal'],
        fontSize=11,
        leading=15,
        textColor=Palette.SLATE,
        alignment=TA_LEFT,
        fontName='Helvetica',
        spaceAfter=3*mm,
    ))

    styles.add(ParagraphStyle(
        name='SectionTitle',
        parent=styles['Normal'],
        fontSize=14,
        leading=18,
        textColor=Palette.CHARCOAL,
        fontName='Helvetica-Bold',
        spaceBefore=22,
        spaceAfter=14,
    ))

    styles.add(ParagraphStyle(
        name='SubsectionTitle',
        parent=styles['Normal'],
        fontSize=11,
        leading=14,
        textColor=Palette.ACCENT,
        fontName='Helvetica-Bold',
        spaceBefore=10,
        spaceAfter=6,
    ))

    # getSampleStyleSheet already defines BodyText; adjust it in place
    body = styles['BodyText']
    body.fontSize = 9.5
    body.leading = 13.5
    body.textColor = Palette.CHARCOAL
    body.spaceAfter = 6

    styles.add(ParagraphStyle(
        name='HighlightValue',
        parent=styles['Normal'],
        fontSize=20,
        leading=26,
        textColor=Palette.ACCENT,
        alignment=TA_CENTER,
        fontName='Helvetica-Bold',
        spaceBefore=6,
        spaceAfter=6,
    ))

    styles.add(ParagraphStyle(
        name='SmallNote',
        parent=styles['Normal'],
        fontSize=7.5,
        leading=10,
        textColor=Palette.GRAY,
        fontName='Helvetica',
    ))

    return styles


def _table_style(header_bg=Palette.CHARCOAL) -> list:
    """Shared table commands: dark header row, zebra body."""
    return [
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
        ('FONTSIZE', (0, 0), (-1, -1), 8),
        ('BACKGROUND', (0, 0), (-1, 0), header_bg),
        ('TEXTCOLOR', (0, 0), (-1, 0), Palette.WHITE),
        ('TEXTCOLOR', (0, 1), (-1, -1), Palette.CHARCOAL),
        ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
        ('ALIGN', (0, 0), (0, -1), 'LEFT'),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('GRID', (0, 0), (-1, -1), 0.5, Palette.LIGHT_GRAY),
        ('TOPPADDING', (0, 0), (-1, -1), 2.5*mm),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 2.5*mm),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [Palette.WHITE, Palette.PALE_GRAY]),
    ]


class MarketStudyReportGenerator:
    """
    Generates market study PDFs.

    Usage:
        generator = MarketStudyReportGenerator(study)
        pdf_bytes = generator.generate_to_buffer()

    The same study always produces the same content.
    """

    PAGE_WIDTH, PAGE_HEIGHT = A4
    MARGIN_LEFT = 18*mm
    MARGIN_RIGHT = 18*mm
    MARGIN_TOP = 18*mm
    MARGIN_BOTTOM = 22*mm

    OUTPUT_DIR = Path("reports")

    def __init__(self, study: MarketStudy, output_dir: Optional[Path] = None):
        self.study = study
        self.styles = get_report_styles()
        if output_dir is not None:
            self.OUTPUT_DIR = Path(output_dir)

    def generate_report(self, filename: Optional[str] = None) -> ReportSuccess:
        """
        Generate the PDF and write it to the output directory.

        Args:
            filename: Output file name (default: estudo-de-mercado-<id>.pdf)

        Returns:
            ReportSuccess with the written path
        """
        self.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
        output_path = self.OUTPUT_DIR / (filename or f"estudo-de-mercado-{self.study.id[:8]}.pdf")

        pdf_bytes = self.generate_to_buffer()
        output_path.write_bytes(pdf_bytes)

        logger.info("Market study report written to %s (%d bytes)", output_path, len(pdf_bytes))
        return ReportSuccess(
            path=output_path,
            samples_included=len(self.study.samples),
            size_bytes=len(pdf_bytes),
        )

    def generate_to_buffer(self) -> bytes:
        """Generate PDF and return as bytes (for testing or streaming)."""
        buffer = BytesIO()
        self._build_document(buffer)
        return buffer.getvalue()

    def _build_document(self, buffer: BytesIO):
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=self.MARGIN_LEFT,
            rightMargin=self.MARGIN_RIGHT,
            topMargin=self.MARGIN_TOP,
            bottomMargin=self.MARGIN_BOTTOM,
            title=f"Estudo de Mercado - {self.study.address}",
            author="Market Study Valuation Engine",
            subject="Avaliação comparativa de imóvel",
        )

        story = []
        story.extend(self._build_cover_page())
        story.append(PageBreak())

        story.extend(self._build_subject())
        story.extend(self._build_samples_table())
        story.append(PageBreak())

        story.extend(self._build_statistics())
        story.extend(self._build_valuations_table())
        story.extend(self._build_recommended_value())
        story.append(PageBreak())

        story.extend(self._build_methodology())
        story.extend(self._build_disclaimer())

        doc.build(
            story,
            onFirstPage=self._draw_cover_page,
            onLaterPages=self._draw_page_frame,
        )

    # =========================================================================
    # Page Drawing Functions
    # =========================================================================

    def _draw_cover_page(self, canvas_obj: canvas.Canvas, doc):
        """Cover page has no header/footer."""
        pass

    def _draw_page_frame(self, canvas_obj: canvas.Canvas, doc):
        """Footer: address left, page number right."""
        canvas_obj.saveState()
        canvas_obj.setFont('Helvetica', 7)
        canvas_obj.setFillColor(Palette.GRAY)
        canvas_obj.drawString(
            self.MARGIN_LEFT,
            self.MARGIN_BOTTOM - 10*mm,
            f"ESTUDO DE MERCADO  ·  {self.study.address[:70]}",
        )
        canvas_obj.drawRightString(
            self.PAGE_WIDTH - self.MARGIN_RIGHT,
            self.MARGIN_BOTTOM - 10*mm,
            f"{doc.page}",
        )
        canvas_obj.restoreState()

    # =========================================================================
    # Section 1: Cover Page
    # =========================================================================

    def _build_cover_page(self) -> list:
        study = self.study
        recommended = study.recommended_valuation
        elements = [
            Paragraph("ESTUDO DE MERCADO", self.styles['CoverBrand']),
            Spacer(1, 60*mm),
            Paragraph("Avaliação pelo Método Comparativo", self.styles['CoverTitle']),
            Paragraph(escape(study.address), self.styles['CoverSubtitle']),
            Paragraph(
                f"Finalidade: {EVALUATION_LABELS.get(study.evaluation_type.value, study.evaluation_type.value)}",
                self.styles['CoverSubtitle'],
            ),
            Paragraph(
                f"Data: {study.created_at.strftime('%d/%m/%Y')}",
                self.styles['CoverSubtitle'],
            ),
            Spacer(1, 20*mm),
            HRFlowable(width="100%", thickness=0.5, color=Palette.LIGHT_GRAY),
            Paragraph("Valor recomendado", self.styles['SubsectionTitle']),
            Paragraph(recommended.total_value.format(), self.styles['HighlightValue']),
            Paragraph(
                f"Padrão {escape(recommended.description)}",
                self.styles['BodyText'],
            ),
        ]
        return elements

    # =========================================================================
    # Section 2: Subject Property
    # =========================================================================

    def _build_subject(self) -> list:
        study = self.study
        elements = [Paragraph("Imóvel Avaliando", self.styles['SectionTitle'])]

        rows = [
            ["Endereço", study.address],
            ["Área", study.property_area.format()],
            ["Características", study.characteristics.describe()],
            ["Fatores de homogeneização", ", ".join(study.factor_names)],
            ["Fator de percepção", format_percent(study.perception_factor, 1)],
        ]
        table = Table(rows, colWidths=[55*mm, 119*mm])
        table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTNAME', (1, 0), (1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 8.5),
            ('TEXTCOLOR', (0, 0), (-1, -1), Palette.CHARCOAL),
            ('BACKGROUND', (0, 0), (0, -1), Palette.ACCENT_LIGHT),
            ('GRID', (0, 0), (-1, -1), 0.5, Palette.LIGHT_GRAY),
            ('TOPPADDING', (0, 0), (-1, -1), 2.5*mm),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 2.5*mm),
        ]))
        elements.append(table)
        return elements

    # =========================================================================
    # Section 3: Comparable Samples
    # =========================================================================

    def _build_samples_table(self) -> list:
        study = self.study
        rejected_ids = set(study.analysis.rejected_ids)

        elements = [Paragraph("Amostras Comparativas", self.styles['SectionTitle'])]

        rows = [["Amostra", "Situação", "Área", "Preço", "R$/m²", "R$/m² homog.", "Status"]]
        for sample in study.samples:
            rows.append([
                sample.id[:14],
                STATUS_LABELS.get(sample.status, sample.status.value),
                f"{sample.area.square_meters:.2f}",
                sample.price.format(),
                f"{sample.unit_price:,.2f}",
                f"{sample.homogenized_unit_price:,.2f}",
                "Rejeitada" if sample.id in rejected_ids else "Aceita",
            ])

        style = _table_style()
        for row_index, sample in enumerate(study.samples, 1):
            if sample.id in rejected_ids:
                style.append(('BACKGROUND', (0, row_index), (-1, row_index), Palette.WARNING_LIGHT))
                style.append(('TEXTCOLOR', (-1, row_index), (-1, row_index), Palette.WARNING))

        table = Table(
            rows,
            colWidths=[26*mm, 20*mm, 18*mm, 32*mm, 24*mm, 28*mm, 26*mm],
            repeatRows=1,
        )
        table.setStyle(TableStyle(style))
        elements.append(table)

        counts = study.analysis.sample_counts
        elements.append(Spacer(1, 4*mm))
        elements.append(Paragraph(
            f"{counts['total']} amostras analisadas: {counts['accepted']} aceitas, "
            f"{counts['rejected']} rejeitadas como outliers.",
            self.styles['BodyText'],
        ))
        if study.analysis.floor_applied:
            elements.append(Paragraph(
                "O saneamento eliminaria amostras demais; todas as amostras foram mantidas.",
                self.styles['SmallNote'],
            ))
        return elements

    # =========================================================================
    # Section 4: Statistical Analysis
    # =========================================================================

    def _build_statistics(self) -> list:
        analysis = self.study.analysis
        lower, upper = analysis.confidence_interval

        elements = [Paragraph("Análise Estatística", self.styles['SectionTitle'])]

        rows = [
            ["Indicador", "Valor"],
            ["Média (R$/m²)", analysis.mean.format()],
            ["Mediana (R$/m²)", analysis.median.format()],
            ["Desvio padrão (R$/m²)", analysis.std_dev.format()],
            ["Mínimo (R$/m²)", analysis.minimum.format()],
            ["Máximo (R$/m²)", analysis.maximum.format()],
            ["Coeficiente de variação", format_percent(analysis.coefficient_of_variation)],
            ["Intervalo de confiança", f"{lower.format()} a {upper.format()}"],
            ["Confiabilidade", "Alta" if analysis.is_reliable else "Baixa"],
        ]
        table = Table(rows, colWidths=[80*mm, 94*mm])
        table.setStyle(TableStyle(_table_style(Palette.ACCENT)))
        elements.append(table)

        elements.append(Spacer(1, 4*mm))
        grade_style = 'BodyText' if analysis.is_reliable else 'SmallNote'
        elements.append(Paragraph(analysis.precision_grade.description, self.styles[grade_style]))
        return elements

    # =========================================================================
    # Section 5: Valuation by Standard
    # =========================================================================

    def _build_valuations_table(self) -> list:
        study = self.study
        recommended = study.recommended_valuation

        elements = [Paragraph("Valores por Padrão de Acabamento", self.styles['SectionTitle'])]

        rows = [["Padrão", "Fator", "R$/m²", "Valor total"]]
        style = _table_style()
        for row_index, valuation in enumerate(study.valuations.values(), 1):
            rows.append([
                valuation.description,
                f"{valuation.multiplier:.2f}",
                valuation.price_per_sqm.format(),
                valuation.total_value.format(),
            ])
            if valuation.standard == recommended.standard:
                style.append(('BACKGROUND', (0, row_index), (-1, row_index), Palette.SUCCESS_LIGHT))
                style.append(('FONTNAME', (0, row_index), (-1, row_index), 'Helvetica-Bold'))

        table = Table(rows, colWidths=[70*mm, 20*mm, 40*mm, 44*mm])
        table.setStyle(TableStyle(style))
        elements.append(table)
        return elements

    # =========================================================================
    # Section 6: Recommended Value
    # =========================================================================

    def _build_recommended_value(self) -> list:
        study = self.study
        recommended = study.recommended_valuation
        low, high = study.valuation_range()

        block = [
            Paragraph("Valor Recomendado", self.styles['SectionTitle']),
            Paragraph(recommended.total_value.format(), self.styles['HighlightValue']),
            Paragraph(
                f"Padrão {escape(recommended.description)}, "
                f"{recommended.price_per_sqm.format()}/m² sobre {study.property_area.format()}.",
                self.styles['BodyText'],
            ),
            Paragraph(
                f"Faixa de valores: {low.total_value.format()} a {high.total_value.format()}.",
                self.styles['BodyText'],
            ),
        ]
        return [KeepTogether(block)]

    # =========================================================================
    # Section 7: Methodology
    # =========================================================================

    def _build_methodology(self) -> list:
        elements = [Paragraph("Metodologia", self.styles['SectionTitle'])]
        paragraphs = [
            "A avaliação segue o método comparativo direto de dados de mercado "
            "(NBR 14653-2). Cada amostra é homogeneizada em relação às "
            "características do imóvel avaliando: para cada unidade de diferença "
            "em um fator, o preço é ajustado pelo peso desse fator.",
            "Sobre os preços unitários homogeneizados é calculada a média e o "
            "desvio padrão. Amostras a mais de dois desvios padrão da média são "
            "descartadas, mantendo sempre ao menos três amostras.",
            "O valor unitário médio é projetado para cinco padrões de acabamento "
            "(de 0,90 a 1,10 do padrão reformado) e multiplicado pela área do "
            "imóvel. O fator de percepção de mercado é aplicado igualmente a "
            "todos os padrões.",
        ]
        for text in paragraphs:
            elements.append(Paragraph(text, self.styles['BodyText']))
        return elements

    # =========================================================================
    # Section 8: Disclaimer
    # =========================================================================

    def _build_disclaimer(self) -> list:
        return [
            Spacer(1, 8*mm),
            HRFlowable(width="100%", thickness=0.5, color=Palette.LIGHT_GRAY),
            Spacer(1, 3*mm),
            Paragraph(
                "Este estudo tem caráter informativo e não substitui laudo de "
                "avaliação elaborado por profissional habilitado. Os valores "
                "dependem das amostras fornecidas e das condições de mercado "
                "na data de emissão.",
                self.styles['SmallNote'],
            ),
            Paragraph(f"Estudo {self.study.id}", self.styles['SmallNote']),
        ]


# =============================================================================
# Convenience Function
# =============================================================================

def generate_report(
    study: MarketStudy,
    output_dir: Optional[Path] = None,
    filename: Optional[str] = None,
) -> ReportSuccess:
    """
    Generate a market study PDF.

    Args:
        study: Valuated market study
        output_dir: Directory to write to (default: ./reports)
        filename: Output file name

    Returns:
        ReportSuccess with the path and size of the written PDF
    """
    generator = MarketStudyReportGenerator(study, output_dir=output_dir)
    return generator.generate_report(filename)
