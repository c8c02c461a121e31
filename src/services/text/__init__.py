from .factory import make_text_normalizer
from .normalizer import HtmlTextNormalizer, TextNormalizer

__all__ = ["HtmlTextNormalizer", "TextNormalizer", "make_text_normalizer"]
