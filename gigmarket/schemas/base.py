"""Shared schema config: camelCase on the wire, snake_case in Python."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every JSON body the marketplace API reads or writes."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Scalar request values taken as sent. bool comes first so JSON true/false
# is not coerced to 1/0; the service layer decides what is valid and
# answers 400 validation_error.
RawNumber = bool | int | float | str | None
