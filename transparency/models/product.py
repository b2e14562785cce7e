from datetime import datetime
from datetime import timezone
from enum import Enum

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import computed_field
from pydantic import field_validator
from pydantic.alias_generators import to_camel

# Scalar or text value stored against a disclosed attribute key.
# bool comes first so JSON true/false are not coerced to 1/0.
AttributeValue = bool | int | float | str | None


class Stage(str, Enum):
    """Lifecycle position of a product. Products only ever move forward."""

    DRAFT = "draft"
    ASSESSED = "assessed"
    SCORED = "scored"


class Product(BaseModel):
    """The entity under transparency assessment."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    category: str
    # dict preserves insertion order, which the report relies on
    attributes: dict[str, AttributeValue] = Field(default_factory=dict)
    questions: list[str] = Field(default_factory=list)
    asked_questions: list[str] = Field(default_factory=list)
    previous_answers: dict[str, AttributeValue] = Field(default_factory=dict)
    transparency_score: int | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("attributes", "previous_answers", mode="before")
    @classmethod
    def _null_mapping(cls, v: object) -> object:
        return {} if v is None else v

    @field_validator("questions", "asked_questions", mode="before")
    @classmethod
    def _null_sequence(cls, v: object) -> object:
        return [] if v is None else v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def stage(self) -> Stage:
        if self.transparency_score is not None:
            return Stage.SCORED
        if self.questions:
            return Stage.ASSESSED
        return Stage.DRAFT


class ProductCreate(BaseModel):
    """Body of ``POST /products``.

    name and category are optional here so the pipeline can report them as a
    ValidationError instead of a generic schema failure.
    """

    name: str | None = None
    category: str | None = None
    attributes: dict[str, AttributeValue] | None = None


class ScoreResponse(BaseModel):
    """Body returned by ``POST /products/{id}/score``."""

    score: int
    product: Product
