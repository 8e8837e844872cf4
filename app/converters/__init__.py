"""
app/converters package marker.
"""

from app.converters.number_formatter import NumberFormatter, ParsedNumber
from app.converters.scale_converter import Scale, ScaleConversion, ScaleConverter

__all__ = [
    "NumberFormatter",
    "ParsedNumber",
    "Scale",
    "ScaleConversion",
    "ScaleConverter",
]
