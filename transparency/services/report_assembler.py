"""Builds the ordered block sequence of a transparency report.

The assembler only decides *what* appears and in which order. Page layout,
fonts and fills belong to ``doc_builder``. Given the same product, analysis
and report date it always returns the same blocks.
"""

import re
from datetime import date

from transparency.models.assistant_models import ReportAnalysis
from transparency.models.product import AttributeValue
from transparency.models.product import Product
from transparency.models.report_models import Block
from transparency.models.report_models import Heading
from transparency.models.report_models import InfoBox
from transparency.models.report_models import KeyValueBlock
from transparency.models.report_models import ListBlock
from transparency.models.report_models import PageBreak
from transparency.models.report_models import Paragraph

REASONING_SUMMARY_KEY = "reasoningSummary"

REPORT_TITLE = "PRODUCT TRANSPARENCY REPORT"
REPORT_SUBTITLE = "Comprehensive Supply Chain & Ethics Analysis"
DISCLAIMER = (
    "This report was generated by an AI-powered Product Transparency System. "
    "While we strive for accuracy, this analysis should be considered alongside other verification methods."
)

PRIMARY = "#1e40af"
ACCENT = "#7c3aed"
TEXT = "#111827"
MUTED = "#6b7280"
GOOD = "#059669"
FAIR = "#d97706"
POOR = "#dc2626"

EXCELLENT_THRESHOLD = 75
MODERATE_THRESHOLD = 50

_BOLD_MARKERS = re.compile(r"\*\*(.*?)\*\*")


def score_band(score: int) -> tuple[str, str]:
    """Return (label, colour) for a score. Lower bounds are inclusive."""
    if score >= EXCELLENT_THRESHOLD:
        return "Excellent Transparency", GOOD
    if score >= MODERATE_THRESHOLD:
        return "Moderate Transparency", FAIR
    return "Limited Transparency", POOR


def strip_bold_markers(text: str) -> str:
    return _BOLD_MARKERS.sub(r"\1", text)


def display_value(value: AttributeValue) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    return strip_bold_markers(str(value))


def _score_blocks(product: Product) -> list[Block]:
    blocks: list[Block] = [Heading(text="TRANSPARENCY SCORE", level=2, color=TEXT)]
    score = product.transparency_score
    if score is None:
        blocks.append(Heading(text="N/A", level=1, color=MUTED))
    else:
        label, color = score_band(score)
        blocks.append(Heading(text=f"{score}/100", level=1, color=color))
        blocks.append(Paragraph(text=label, alignment="center", style="subtitle"))

    rationale = product.attributes.get(REASONING_SUMMARY_KEY)
    if rationale not in (None, ""):
        blocks.append(Heading(text="Scoring Rationale", level=3, color=MUTED))
        blocks.append(Paragraph(text=display_value(rationale), alignment="justify"))
    return blocks


def _key_findings(analysis: ReportAnalysis) -> list[Block]:
    if not analysis.strengths and not analysis.concerns:
        return []
    blocks: list[Block] = [PageBreak(), Heading(text="KEY FINDINGS", level=2, color=PRIMARY)]
    if analysis.strengths:
        blocks.append(Heading(text="Strengths:", level=3, color=GOOD))
        blocks.append(ListBlock(items=tuple(analysis.strengths)))
    if analysis.concerns:
        blocks.append(Heading(text="Areas of Concern:", level=3, color=POOR))
        blocks.append(ListBlock(items=tuple(analysis.concerns)))
    return blocks


def _category_analysis(analysis: ReportAnalysis) -> list[Block]:
    if not analysis.category_analysis:
        return []
    blocks: list[Block] = [PageBreak(), Heading(text="DETAILED CATEGORY ANALYSIS", level=2, color=PRIMARY)]
    for topic, text in analysis.category_analysis.items():
        blocks.append(Heading(text=topic.upper(), level=3, color=ACCENT))
        blocks.append(Paragraph(text=text, alignment="justify"))
    return blocks


def _disclosed_information(product: Product) -> list[Block]:
    blocks: list[Block] = [PageBreak(), Heading(text="DISCLOSED INFORMATION", level=2, color=PRIMARY)]
    for key, value in product.attributes.items():
        if key == REASONING_SUMMARY_KEY:
            continue
        blocks.append(KeyValueBlock(key=key, value=display_value(value)))
    return blocks


def _recommendations(analysis: ReportAnalysis) -> list[Block]:
    if not analysis.recommendations:
        return []
    return [
        PageBreak(),
        Heading(text="RECOMMENDATIONS", level=2, color=PRIMARY),
        ListBlock(items=tuple(analysis.recommendations), alignment="justify"),
    ]


def assemble_report(product: Product, analysis: ReportAnalysis, report_date: date) -> list[Block]:
    blocks: list[Block] = [
        Heading(text=REPORT_TITLE, level=1, color=PRIMARY),
        Paragraph(text=REPORT_SUBTITLE, alignment="center", style="subtitle"),
        InfoBox(
            title="PRODUCT DETAILS",
            lines=(
                f"Name: {product.name}",
                f"Category: {product.category}",
                f"Report Date: {report_date.isoformat()}",
            ),
        ),
    ]
    blocks.extend(_score_blocks(product))

    if analysis.executive_summary:
        blocks.append(Heading(text="EXECUTIVE SUMMARY", level=2, color=ACCENT))
        blocks.append(Paragraph(text=analysis.executive_summary, alignment="justify"))

    blocks.extend(_key_findings(analysis))
    blocks.extend(_category_analysis(analysis))
    blocks.extend(_disclosed_information(product))
    blocks.extend(_recommendations(analysis))

    blocks.append(Paragraph(text=DISCLAIMER, alignment="center", style="footnote"))
    return blocks
