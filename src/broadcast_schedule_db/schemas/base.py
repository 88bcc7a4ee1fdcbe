"""Base schema classes shared by the cache and wire schemas."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator


class SchemaBase(BaseModel):
    """Base class for cache schemas with ORM conversion support."""

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
    )

    @classmethod
    def from_orm(cls, obj: Any) -> Self:
        """
        Factory method to create a schema instance from a SQLAlchemy model.

        Args:
            obj: SQLAlchemy model instance

        Returns:
            Pydantic schema instance
        """
        return cls.model_validate(obj)

    @classmethod
    def from_orm_list(cls, objs: list[Any]) -> list[Self]:
        """
        Factory method to create schema instances from a list of SQLAlchemy models.

        Args:
            objs: List of SQLAlchemy model instances

        Returns:
            List of Pydantic schema instances
        """
        return [cls.from_orm(obj) for obj in objs]


class WireModel(BaseModel):
    """Base class for records decoded from a remote service.

    Fields are populated by their wire alias (e.g. ``TID``) or by name.
    Blank strings decode to None for every optional field.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any, info: ValidationInfo) -> Any:
        """Treat empty elements as missing values."""
        if isinstance(v, str) and not v.strip():
            field = cls.model_fields.get(info.field_name)
            if field is not None and not field.is_required():
                return None
        return v
