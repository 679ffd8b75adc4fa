"""
Data models for localised text handles.
"""

from pydantic import BaseModel, ConfigDict, Field


class TextHandle(BaseModel):
    """An opaque reference into the text map.

    A plain handle resolves to a finished string. A dynamic handle resolves to
    a template whose positional placeholders are filled from a numeric
    parameter list at resolution time.

    Attributes:
        key: Text map key (usually a numeric hash rendered as a string)
        dynamic: Whether the text is a parameterised template
        fallback_language: Language tried before the resolver-wide fallback
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Text map key")
    dynamic: bool = Field(default=False, description="Template with positional parameters")
    fallback_language: str | None = Field(
        default=None, description="Entity-declared fallback language"
    )
