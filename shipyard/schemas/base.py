from datetime import datetime, timezone
from typing import Annotated, ClassVar

from pydantic import AfterValidator, BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


def _ensure_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UTCDateTime = Annotated[datetime, AfterValidator(_ensure_utc)]


class APIModel(BaseModel):
    """camelCase on the wire, snake_case in Python; accepts either on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PartialUpdate(APIModel):
    """Update payload: only fields the caller actually sent are applied.

    ``NON_NULLABLE`` names fields that may be omitted but not cleared.
    """

    NON_NULLABLE: ClassVar[frozenset] = frozenset()

    @model_validator(mode="after")
    def _reject_nulls(self):
        cleared = sorted(
            name for name in self.model_fields_set
            if name in self.NON_NULLABLE and getattr(self, name) is None
        )
        if cleared:
            raise ValueError(f"Field(s) cannot be null: {', '.join(cleared)}")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
