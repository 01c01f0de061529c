"""
GraphQL schema of the Auto API (strawberry), mounted at /graphql.

Queries:    auto(id), autos(suchkriterien)
Mutations:  create(input) -> {id}, update(input) -> {version}, delete(id)

Service errors become GraphQL errors with extensions.code taken from the
exception (BAD_USER_INPUT unless it is an authentication or role failure).
"""

import functools
from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Callable, Optional

import pydantic
import strawberry
from fastapi import Depends
from graphql import GraphQLError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from strawberry.fastapi import BaseContext, GraphQLRouter
from strawberry.types import Info

from auto_api.models import Auto, Engine, Repair
from auto_api.schemas import AutoCreate, AutoUpdate
from auto_api.services.domain import (
    ID_PATTERN,
    AutoReadService,
    AutoWriteService,
    create_pageable,
    format_version_token,
    id_in_range,
)
from auto_api.services.notification import MailService
from shared.config.constants import DELETE_ROLES, WRITE_ROLES, AutoCategory
from shared.config.logging import graphql_logger as logger
from shared.infrastructure.db import get_db
from shared.security.auth import optional_user_context, require_roles
from shared.utils.exceptions import AppException, AutoNotFoundError, DatabaseError


# =============================================================================
# Context
# =============================================================================


class AutoContext(BaseContext):
    """
    Per-request context: DB session and principal.

    strawberry fills in request, response and background_tasks.
    """

    def __init__(self, db: Session, user: dict[str, Any] | None):
        super().__init__()
        self.db = db
        self.user = user


def get_context(
    db: Session = Depends(get_db),
    user: dict | None = Depends(optional_user_context),
) -> AutoContext:
    return AutoContext(db=db, user=user)


# =============================================================================
# Error mapping
# =============================================================================


def graphql_errors(resolver: Callable) -> Callable:
    """Translate service and validation errors into coded GraphQL errors."""

    @functools.wraps(resolver)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return resolver(*args, **kwargs)
        except AppException as e:
            raise GraphQLError(e.detail, extensions={"code": e.graphql_code}) from e
        except pydantic.ValidationError as e:
            messages = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            ]
            logger.warning("GraphQL input rejected", errors=messages)
            raise GraphQLError("; ".join(messages), extensions={"code": "BAD_USER_INPUT"}) from e
        except SQLAlchemyError as e:
            error = DatabaseError(resolver.__name__, error_type=type(e).__name__)
            raise GraphQLError(error.detail, extensions={"code": error.graphql_code}) from e

    return wrapper


def _parse_id(auto_id: strawberry.ID) -> int:
    if not ID_PATTERN.match(str(auto_id)):
        raise AutoNotFoundError(auto_id)
    try:
        parsed = int(auto_id)
    except ValueError:
        raise AutoNotFoundError(auto_id) from None
    if not id_in_range(parsed):
        raise AutoNotFoundError(auto_id)
    return parsed


# =============================================================================
# Types
# =============================================================================


AutoCategoryType = strawberry.enum(AutoCategory, name="AutoCategory")


@strawberry.type(name="Engine")
class EngineType:
    id: int
    name: str
    horsepower: int
    cylinders: int
    rated_speed: Decimal

    @classmethod
    def from_entity(cls, engine: Engine) -> "EngineType":
        return cls(
            id=engine.id,
            name=engine.name,
            horsepower=engine.horsepower,
            cylinders=engine.cylinders,
            rated_speed=engine.rated_speed,
        )


@strawberry.type(name="Repair")
class RepairType:
    id: int
    cost: Decimal
    mechanic: str
    date: date

    @classmethod
    def from_entity(cls, repair: Repair) -> "RepairType":
        return cls(id=repair.id, cost=repair.cost, mechanic=repair.mechanic, date=repair.date)


@strawberry.type(name="Auto")
class AutoType:
    id: int
    version: int
    chassis_number: str
    make: str
    model: str
    model_year: int
    category: Optional[AutoCategoryType]
    price: Decimal
    safety_features: list[str]
    engine: EngineType
    entity: strawberry.Private[Auto]

    @strawberry.field
    def repairs(self) -> list[RepairType]:
        return [RepairType.from_entity(r) for r in self.entity.repairs]

    @classmethod
    def from_entity(cls, auto: Auto) -> "AutoType":
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
            engine=EngineType.from_entity(auto.engine),
            entity=auto,
        )


@strawberry.input
class Suchkriterien:
    engine_name: Optional[str] = None
    model_year_min: Optional[int] = None
    price_max: Optional[Decimal] = None
    esb: Optional[bool] = None
    abs: Optional[bool] = None
    airbag: Optional[bool] = None
    parking_assist: Optional[bool] = None
    chassis_number: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    category: Optional[AutoCategoryType] = None

    def to_criteria(self) -> dict[str, Any]:
        """Search keys as understood by the predicate builder."""
        criteria = {
            "engineName": self.engine_name,
            "modelYearMin": self.model_year_min,
            "priceMax": self.price_max,
            "esb": self.esb,
            "abs": self.abs,
            "airbag": self.airbag,
            "parkingAssist": self.parking_assist,
            "chassis_number": self.chassis_number,
            "make": self.make,
            "model": self.model,
            "category": self.category,
        }
        return {k: v for k, v in criteria.items() if v is not None}


@strawberry.input
class EngineInput:
    name: str
    horsepower: int
    cylinders: int
    rated_speed: Decimal


@strawberry.input
class RepairInput:
    cost: Decimal
    mechanic: str
    date: date


@strawberry.input
class AutoInput:
    chassis_number: str
    make: str
    model: str
    model_year: int
    price: Decimal
    engine: EngineInput
    category: Optional[AutoCategoryType] = None
    safety_features: Optional[list[str]] = None
    repairs: Optional[list[RepairInput]] = None


@strawberry.input
class AutoUpdateInput:
    id: strawberry.ID
    version: int
    make: str
    model: str
    model_year: int
    price: Decimal
    category: Optional[AutoCategoryType] = None
    safety_features: Optional[list[str]] = None


@strawberry.type
class CreatePayload:
    id: int


@strawberry.type
class UpdatePayload:
    version: int


def _input_data(value: Any) -> dict[str, Any]:
    data = strawberry.asdict(value)
    return {k: v for k, v in data.items() if v is not None}


# =============================================================================
# Resolvers
# =============================================================================


@strawberry.type
class Query:
    @strawberry.field
    @graphql_errors
    def auto(self, info: Info[AutoContext, None], id: strawberry.ID) -> AutoType:
        auto = AutoReadService(info.context.db).find_by_id(_parse_id(id), include_repairs=True)
        return AutoType.from_entity(auto)

    @strawberry.field
    @graphql_errors
    def autos(
        self,
        info: Info[AutoContext, None],
        criteria: Annotated[Optional[Suchkriterien], strawberry.argument(name="suchkriterien")] = None,
    ) -> list[AutoType]:
        """First page of matches with the default page size."""
        search = criteria.to_criteria() if criteria is not None else {}
        page = AutoReadService(info.context.db).find(search, create_pageable())
        return [AutoType.from_entity(a) for a in page.content]


@strawberry.type
class Mutation:
    @strawberry.mutation
    @graphql_errors
    def create(self, info: Info[AutoContext, None], input: AutoInput) -> CreatePayload:
        require_roles(info.context.user, WRITE_ROLES)
        body = AutoCreate.model_validate(_input_data(input))

        notifier = MailService(info.context.background_tasks)
        auto_id = AutoWriteService(info.context.db, notifier=notifier).create(body.to_entity())
        return CreatePayload(id=auto_id)

    @strawberry.mutation
    @graphql_errors
    def update(self, info: Info[AutoContext, None], input: AutoUpdateInput) -> UpdatePayload:
        require_roles(info.context.user, WRITE_ROLES)
        data = _input_data(input)
        auto_id = _parse_id(data.pop("id"))
        version = data.pop("version")
        body = AutoUpdate.model_validate(data)

        new_version = AutoWriteService(info.context.db).update(
            auto_id, body.model_dump(), format_version_token(version)
        )
        return UpdatePayload(version=new_version)

    @strawberry.mutation
    @graphql_errors
    def delete(self, info: Info[AutoContext, None], id: strawberry.ID) -> bool:
        require_roles(info.context.user, DELETE_ROLES)
        return AutoWriteService(info.context.db).delete(_parse_id(id))


schema = strawberry.Schema(query=Query, mutation=Mutation)

graphql_router = GraphQLRouter(schema, context_getter=get_context, path="/graphql")
