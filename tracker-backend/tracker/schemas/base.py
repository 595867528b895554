# File: tracker/schemas/base.py

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    JSON uses camelCase keys (startDate, createdAt, ...).
    Input accepts either camelCase or the Python field name.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
