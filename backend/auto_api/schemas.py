"""
Pydantic schemas for the Auto API.

Request schemas carry the input rules of the aggregate (ranges, mechanic name
pattern, ISO dates, non-negative decimals); the services assume their input
already passed them. JSON uses camelCase, Python uses snake_case.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from auto_api.models import Auto, Engine, Repair
from shared.config.constants import AutoCategory, Limits
from shared.utils.validators import validate_mechanic


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


Price = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]
MechanicName = Annotated[
    str,
    Field(min_length=1, max_length=Limits.MAX_MECHANIC_LENGTH),
    AfterValidator(validate_mechanic),
]
SafetyFeatures = Annotated[list[Annotated[str, Field(min_length=1, max_length=20)]], Field(max_length=10)]


# =============================================================================
# Engine / Repair
# =============================================================================


class EngineInput(CamelModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_ENGINE_NAME_LENGTH)
    horsepower: int = Field(ge=0, le=Limits.MAX_HORSEPOWER)
    cylinders: int = Field(ge=0, le=Limits.MAX_CYLINDERS)
    rated_speed: Decimal = Field(ge=0, max_digits=7, decimal_places=3)


class EngineOutput(CamelModel):
    id: int
    name: str
    horsepower: int
    cylinders: int
    rated_speed: Decimal


class RepairInput(CamelModel):
    cost: Price
    mechanic: MechanicName
    date: date


class RepairOutput(CamelModel):
    id: int
    cost: Decimal
    mechanic: str
    date: date


# =============================================================================
# Auto
# =============================================================================


class AutoUpdate(CamelModel):
    """Scalar business fields of an Auto, as replaced by PUT."""

    make: str = Field(min_length=1, max_length=Limits.MAX_MAKE_LENGTH)
    model: str = Field(min_length=1, max_length=Limits.MAX_MODEL_LENGTH)
    model_year: int = Field(ge=Limits.MIN_MODEL_YEAR, le=Limits.MAX_MODEL_YEAR)
    category: AutoCategory | None = None
    price: Price
    safety_features: SafetyFeatures = Field(default_factory=list)


class AutoCreate(AutoUpdate):
    """A new Auto with its Engine and Repairs."""

    chassis_number: str = Field(min_length=1, max_length=Limits.MAX_CHASSIS_NUMBER_LENGTH)
    engine: EngineInput
    repairs: list[RepairInput] = Field(default_factory=list)

    def to_entity(self) -> Auto:
        """Build the transient aggregate (ids and version are assigned on insert)."""
        auto = Auto(chassis_number=self.chassis_number, **self.scalar_fields())
        auto.safety_feature_list = self.safety_features
        auto.engine = Engine(**self.engine.model_dump())
        auto.repairs = [Repair(**r.model_dump()) for r in self.repairs]
        return auto

    def scalar_fields(self) -> dict[str, Any]:
        """Scalar columns of the new Auto."""
        return self.model_dump(exclude={"safety_features", "chassis_number", "engine", "repairs"})


class AutoOutput(CamelModel):
    id: int
    version: int
    chassis_number: str
    make: str
    model: str
    model_year: int
    category: AutoCategory | None = None
    price: Decimal
    safety_features: list[str] = Field(default_factory=list)
    engine: EngineOutput
    repairs: list[RepairOutput] | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, auto: Auto, include_repairs: bool = False) -> "AutoOutput":
        """Map an Auto; repairs are only read when requested."""
        return cls(
            id=auto.id,
            version=auto.version,
            chassis_number=auto.chassis_number,
            make=auto.make,
            model=auto.model,
            model_year=auto.model_year,
            category=auto.category,
            price=auto.price,
            safety_features=auto.safety_feature_list,
            engine=EngineOutput.model_validate(auto.engine),
            repairs=[RepairOutput.model_validate(r) for r in auto.repairs] if include_repairs else None,
            created_at=auto.created_at,
            updated_at=auto.updated_at,
        )


class PageMeta(CamelModel):
    size: int
    number: int
    total_elements: int
    total_pages: int


class AutoPage(CamelModel):
    content: list[AutoOutput]
    page: PageMeta


class AutoFileOutput(CamelModel):
    id: int
    filename: str
    mimetype: str | None = None
    auto_id: int
