"""StylePass: style-driven password suggestions with strength analysis."""

from .analyzer import Grade, Remark, StrengthReport, analyze

__all__ = ["Grade", "Remark", "StrengthReport", "analyze"]
__version__ = "0.1.0"
