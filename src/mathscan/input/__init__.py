from .base import InputJax
from .tex import TexInput
from .mathml import MathMLInput

__all__ = ["InputJax", "TexInput", "MathMLInput"]
