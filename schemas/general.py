from typing import Any, Dict, Iterable

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (the dashboard's naming)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ORMCamelModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PatchModel(CamelModel):
    """
    Partial update body. Only fields present in the request are applied;
    an explicit null is honoured only for fields listed in `clearable`
    (nullable columns such as foreign keys) and ignored everywhere else.
    """

    def changes(self, clearable: Iterable[str] = ()) -> Dict[str, Any]:
        allowed_null = set(clearable)
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in allowed_null
        }


class DeleteResult(BaseModel):
    success: bool = True
