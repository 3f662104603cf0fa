"""Static SVG previews of decoded boards.

PNG export lives in `boardview.svg.render`, which needs the native cairo
library at import time.
"""
from .generator import SVGGenerator

__all__ = ["SVGGenerator"]
