"""Base record model for resources returned by the remote service."""

from typing import Union

from pydantic import BaseModel, ConfigDict

# Identifiers and numbers arrive as ints, floats or numeric strings depending
# on the endpoint; unions keep the wire type intact.
Id = Union[int, str]
Number = Union[int, float, str]
Flag = Union[int, bool, str]


class FloatRecord(BaseModel):
    """Permissive record: declared fields are type-checked, unknown fields kept."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)
