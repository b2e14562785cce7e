import pytest

from transparency.models.report_models import Heading
from transparency.models.report_models import InfoBox
from transparency.models.report_models import KeyValueBlock
from transparency.models.report_models import ListBlock
from transparency.models.report_models import PageBreak
from transparency.models.report_models import Paragraph
from transparency.services import doc_builder
from transparency.services.doc_builder import DocBuilderError
from transparency.services.doc_builder import render_pdf


@pytest.mark.asyncio
async def test_render_pdf_all_block_types():
    blocks = [
        Heading(text="PRODUCT TRANSPARENCY REPORT", level=1, color="#1e40af"),
        Paragraph(text="Supply chain & <ethics>", alignment="center", style="subtitle"),
        InfoBox(title="PRODUCT DETAILS", lines=("Name: EcoMug", "Category: kitchenware")),
        PageBreak(),
        ListBlock(items=("first", "second")),
        ListBlock(items=("bullet",), numbered=False, alignment="justify"),
        KeyValueBlock(key="material", value="bamboo"),
        Paragraph(text="footer", alignment="center", style="footnote"),
    ]

    result = await render_pdf(blocks)

    assert isinstance(result, bytes)
    assert result[:4] == b"%PDF"


@pytest.mark.asyncio
async def test_render_pdf_wraps_unexpected_errors(monkeypatch):
    def _explode(_blocks):
        raise RuntimeError("layout failure")

    monkeypatch.setattr(doc_builder, "_to_flowables", _explode)

    with pytest.raises(DocBuilderError) as exc:
        await render_pdf([Paragraph(text="x")])
    assert "unexpected rendering error" in str(exc.value)
