"""
loglane_core.models
~~~~~~~~~~~~~~~~~~~
Pydantic v2 models for records built by loglane itself.

Models are immutable (``model_config = ConfigDict(frozen=True)``) and
dump with the camelCase keys log consumers expect.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HttpAccessRecord(BaseModel):
    """One completed HTTP request/response cycle.

    Captured only after the response has finished, so ``status`` and
    ``response_time`` are final.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    method: str
    url: str
    status: int
    response_time: float = Field(ge=0, alias="responseTime")
    headers: dict[str, Any] = Field(default_factory=dict)
    query: dict[str, Any] = Field(default_factory=dict)
    body: Any = None

    @property
    def is_error(self) -> bool:
        """True for client and server error statuses (>= 400)."""
        return self.status >= 400

    def to_log_data(self) -> dict[str, Any]:
        """Return the record as a plain dict with camelCase keys."""
        return self.model_dump(by_alias=True)
