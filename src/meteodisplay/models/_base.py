"""Base model for display payloads.

Every display model inherits from :class:`DisplayBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase wire keys (``maxSpeed``,
  ``hPa``) map automatically to snake_case fields.
* A ``model_validator(mode="before")`` that drops ``None`` and
  non-finite floats so the field stays absent.
* ``allow_inf_nan=False`` so non-finite strings (``"nan"``, ``"inf"``)
  fail validation instead of reaching the store or the encoder.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


def _is_absent(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and not math.isfinite(value)


class DisplayBaseModel(BaseModel):
    """Base for sparse display models.

    All fields default to ``None`` meaning "absent"; absent fields never
    touch their region of the encoded code.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
        allow_inf_nan=False,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_absent_values(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return {key: value for key, value in values.items() if not _is_absent(value)}

    def to_patch(self) -> dict[str, Any]:
        """Return present fields as a nested snake_case dict.

        Empty nested groups are pruned so a patch never carries ``{}``.
        """
        patch: dict[str, Any] = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, DisplayBaseModel):
                nested = value.to_patch()
                if nested:
                    patch[name] = nested
                continue
            patch[name] = value
        return patch
