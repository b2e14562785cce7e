"""Response shapes returned by the assistant service."""

from typing import Annotated

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator
from pydantic.alias_generators import to_camel


class ScoreResult(BaseModel):
    """Parsed score-answers response. Both fields may be absent; the pipeline applies defaults."""

    score: Annotated[float, Field(allow_inf_nan=False)] | None = None
    summary: str | None = None


class ReportAnalysis(BaseModel):
    """Narrative analysis used to assemble the transparency report."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    executive_summary: str = ""
    strengths: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    category_analysis: dict[str, str] = Field(default_factory=dict)

    @field_validator("executive_summary", mode="before")
    @classmethod
    def _null_text(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("strengths", "concerns", "recommendations", mode="before")
    @classmethod
    def _null_list(cls, v: object) -> object:
        return [] if v is None else v

    @field_validator("category_analysis", mode="before")
    @classmethod
    def _null_mapping(cls, v: object) -> object:
        return {} if v is None else v
