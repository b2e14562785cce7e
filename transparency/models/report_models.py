"""Structural blocks of an assembled report, prior to layout."""

from typing import Annotated
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

Alignment = Literal["left", "center", "justify"]


class _Block(BaseModel):
    model_config = ConfigDict(frozen=True)


class Heading(_Block):
    """Section or sub-section title. Level 1 is the largest."""

    kind: Literal["heading"] = "heading"
    text: str
    level: int = 1
    color: str = "#111827"


class Paragraph(_Block):
    """A run of text. ``style`` selects the renderer's type size and colour."""

    kind: Literal["paragraph"] = "paragraph"
    text: str
    alignment: Alignment = "left"
    style: Literal["body", "subtitle", "label", "footnote"] = "body"


class ListBlock(_Block):
    kind: Literal["list"] = "list"
    items: tuple[str, ...]
    numbered: bool = True
    alignment: Alignment = "left"


class KeyValueBlock(_Block):
    kind: Literal["key_value"] = "key_value"
    key: str
    value: str


class PageBreak(_Block):
    kind: Literal["page_break"] = "page_break"


class InfoBox(_Block):
    """Boxed, titled group of short lines."""

    kind: Literal["info_box"] = "info_box"
    title: str
    lines: tuple[str, ...]


Block = Annotated[
    Heading | Paragraph | ListBlock | KeyValueBlock | PageBreak | InfoBox,
    Field(discriminator="kind"),
]
