"""
Shared schema base classes.
Request bodies use camelCase keys; responses use the snake_case record keys.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelRequest(BaseModel):
    """Request body accepting camelCase keys (snake_case also accepted)."""
    
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
    
    def to_update_dict(self) -> dict:
        """Fields the client actually sent, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class SuccessResponse(BaseModel):
    success: bool = Field(True, examples=[True])
