"""Basic Model for all pyDVHMetrics Datastructures."""

from pydantic import (
    AliasGenerator,
    BaseModel,
    ConfigDict,
)
from pydantic.alias_generators import to_camel


class PyDVHMetricsBaseModel(BaseModel):
    """
    Base class for all pyDVHMetrics data structures.

    Fields are exposed in snake_case and accepted in camelCase as well, e.g.
    ``prescribed_dose`` / ``prescribedDose``, so configurations written by
    other tools can be validated directly.
    """

    model_config = ConfigDict(
        alias_generator=AliasGenerator(alias=to_camel),
        populate_by_name=True,  # Allows both snake_case and camelCase attributes
        arbitrary_types_allowed=True,  # Needed for pint units
        validate_assignment=True,  # Validate assignment of values to fields
        from_attributes=True,  # Allows to create a model from an object's attributes
    )
