"""Base model shared by all job-costing records.

Records arrive from the persistence layer as loosely typed dictionaries
(camelCase keys, numbers as strings, optional fields missing). The base
model accepts both the snake_case field names and their camelCase aliases
and ignores columns the engine does not use.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseDataModel(BaseModel):
    """Base class for all data models.

    Example:
        >>> class Unit(BaseDataModel):
        ...     unit_id: str
        ...     plate_number: str
        >>> unit = Unit.model_validate({"unitId": "u-1", "plateNumber": "AB12"})
        >>> unit.plate_number
        'AB12'
        >>> unit.model_dump(by_alias=True)
        {'unitId': 'u-1', 'plateNumber': 'AB12'}
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        strict=False,
        # Records carry unrelated columns (unitId, ticketIds, imageUrls, ...)
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=False,
    )
