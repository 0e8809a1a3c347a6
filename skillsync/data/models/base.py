"""
Base model classes for SkillSync data models.

Raw records from the SkillSync API use camelCase keys; models accept
either camelCase aliases or snake_case field names.
"""

from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


class ApiModel(BaseModel):
    """
    Base model for records exchanged with the SkillSync API.

    Use this for mutable input records (applications, jobs, profiles).
    """

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class FrozenModel(ApiModel):
    """Base model for immutable values (timeline events, analytics rows)."""

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
        frozen=True,
    )
