"""
Localised text resolution: text handles, language fallback and positional
parameter templates.
"""

from .models import TextHandle
from .resolver import TextResolver
from .templates import apply_params, format_number, format_stat_value, has_placeholders

__all__ = [
    "TextHandle",
    "TextResolver",
    "apply_params",
    "format_number",
    "format_stat_value",
    "has_placeholders",
]
