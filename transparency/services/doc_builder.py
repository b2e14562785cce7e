import asyncio
import io
import logging
from collections.abc import Sequence
from uuid import uuid4
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.enums import TA_JUSTIFY
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Flowable
from reportlab.platypus import PageBreak as RLPageBreak
from reportlab.platypus import Paragraph as RLParagraph
from reportlab.platypus import SimpleDocTemplate
from reportlab.platypus import Spacer
from reportlab.platypus import Table
from reportlab.platypus import TableStyle

from transparency.models.report_models import Block
from transparency.models.report_models import Heading
from transparency.models.report_models import InfoBox
from transparency.models.report_models import KeyValueBlock
from transparency.models.report_models import ListBlock
from transparency.models.report_models import PageBreak
from transparency.models.report_models import Paragraph

# Configure module logger
logger = logging.getLogger(__name__)

PAGE_MARGIN = 50
BODY_COLOR = colors.HexColor("#374151")
KEY_COLOR = colors.HexColor("#1e40af")
BOX_FILL = colors.HexColor("#f0f9ff")
BOX_STROKE = colors.HexColor("#3b82f6")
BOX_TITLE = colors.HexColor("#1e3a8a")

_ALIGNMENTS = {"left": TA_LEFT, "center": TA_CENTER, "justify": TA_JUSTIFY}
# level -> (font size, space after)
_HEADING_SIZES = {1: (28, 8), 2: (16, 10), 3: (13, 4)}


class DocBuilderError(Exception):
    """Raised when PDF generation fails"""


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "body": ParagraphStyle("TRBody", parent=base["Normal"], fontSize=10, leading=14, textColor=BODY_COLOR, spaceAfter=8),
        "subtitle": ParagraphStyle("TRSubtitle", parent=base["Normal"], fontSize=11, leading=14, textColor=colors.HexColor("#6b7280"), spaceAfter=12),
        "label": ParagraphStyle("TRLabel", parent=base["Normal"], fontName="Helvetica-Bold", fontSize=11, leading=14, textColor=KEY_COLOR),
        "footnote": ParagraphStyle("TRFootnote", parent=base["Normal"], fontSize=8, leading=10, textColor=colors.HexColor("#9ca3af"), spaceBefore=24),
        "heading": ParagraphStyle("TRHeading", parent=base["Heading2"], fontName="Helvetica-Bold"),
    }


def _paragraph(text: str, style: ParagraphStyle, alignment: str = "left", **overrides) -> RLParagraph:
    return RLParagraph(escape(text), ParagraphStyle(f"{style.name}-{alignment}", parent=style, alignment=_ALIGNMENTS[alignment], **overrides))


def _heading(block: Heading, styles: dict[str, ParagraphStyle]) -> RLParagraph:
    size, space_after = _HEADING_SIZES.get(block.level, _HEADING_SIZES[3])
    # Level 1 headings are centred display text (title, score)
    alignment = "center" if block.level == 1 else "left"
    return _paragraph(
        block.text,
        styles["heading"],
        alignment,
        fontSize=size,
        leading=size * 1.2,
        spaceAfter=space_after,
        textColor=colors.HexColor(block.color),
    )


def _info_box(block: InfoBox, styles: dict[str, ParagraphStyle]) -> Table:
    rows = [[_paragraph(block.title, styles["label"], textColor=BOX_TITLE)]]
    rows.extend([[_paragraph(line, styles["body"], spaceAfter=0)] for line in block.lines])
    table = Table(rows, colWidths=[A4[0] - 2 * PAGE_MARGIN])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), BOX_FILL),
                ("BOX", (0, 0), (-1, -1), 1, BOX_STROKE),
                ("LEFTPADDING", (0, 0), (-1, -1), 20),
                ("TOPPADDING", (0, 0), (-1, 0), 12),
                ("BOTTOMPADDING", (0, -1), (-1, -1), 12),
            ]
        )
    )
    return table


def _to_flowables(blocks: Sequence[Block]) -> list[Flowable]:
    styles = _styles()
    story: list[Flowable] = []
    for block in blocks:
        if isinstance(block, Heading):
            story.append(_heading(block, styles))
        elif isinstance(block, Paragraph):
            story.append(_paragraph(block.text, styles[block.style], block.alignment))
        elif isinstance(block, ListBlock):
            for i, item in enumerate(block.items, start=1):
                text = f"{i}. {item}" if block.numbered else f"• {item}"
                story.append(_paragraph(text, styles["body"], block.alignment, leftIndent=20, spaceAfter=4))
            story.append(Spacer(1, 10))
        elif isinstance(block, KeyValueBlock):
            story.append(_paragraph(f"{block.key}:", styles["label"]))
            story.append(_paragraph(block.value, styles["body"], "justify", leftIndent=20))
        elif isinstance(block, PageBreak):
            story.append(RLPageBreak())
        elif isinstance(block, InfoBox):
            story.append(_info_box(block, styles))
            story.append(Spacer(1, 24))
        else:
            raise DocBuilderError(f"Unsupported block type: {type(block).__name__}")
    return story


async def render_pdf(blocks: Sequence[Block], title: str = "Transparency Report") -> bytes:
    """Typeset *blocks* into an A4 PDF document."""

    def _sync(report_blocks: Sequence[Block]) -> bytes:
        rid = str(uuid4())
        logger.info("[%s] Rendering PDF report from %d blocks", rid, len(report_blocks))
        try:
            bio = io.BytesIO()
            doc = SimpleDocTemplate(
                bio,
                pagesize=A4,
                leftMargin=PAGE_MARGIN,
                rightMargin=PAGE_MARGIN,
                topMargin=PAGE_MARGIN,
                bottomMargin=PAGE_MARGIN,
                title=title,
            )
            doc.build(_to_flowables(report_blocks))
            size = bio.tell()
            logger.info("[%s] Report ready (%d bytes)", rid, size)
            return bio.getvalue()
        except DocBuilderError:
            raise
        except Exception as err:
            logger.exception("[%s] Report generation failed (other error)", rid)
            raise DocBuilderError("unexpected rendering error") from err

    # run sync work in a thread
    return await asyncio.to_thread(_sync, blocks)
