# cloud_console/schemas/common.py
"""
Shared schema plumbing.

The dashboard speaks camelCase JSON (documentCount, requestsPerMin, ...), while
Python code uses snake_case attributes. Every schema inherits from
`ConsoleModel`, which serializes by alias and accepts either spelling on input.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ConsoleModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def supplied_fields(self) -> Dict[str, Any]:
        """Fields the caller actually sent with a non-null value (partial updates)."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }


class SuccessResponse(ConsoleModel):
    """Body returned by delete-style and fire-and-forget routes."""
    success: bool = Field(True, description="Always true; failures use the error envelope")
