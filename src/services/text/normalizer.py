import logging
import unicodedata
from typing import Protocol, Union

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


class TextNormalizer(Protocol):
    """String utility consumed by the document projector."""

    encoding: str

    def strip_tags(self, text: Union[str, bytes, None]) -> str:
        ...


class HtmlTextNormalizer:
    """
    Encoding-aware markup stripper.

    Whole tag spans are dropped (attributes included) and only the text nodes
    are kept, so ``"<p>Hello <b>World</b></p>"`` becomes ``"Hello World"``.
    This is tag removal, not sanitization. Character entities are decoded.
    """

    def __init__(self, features: str = "html.parser", language: str = "en", encoding: str = "utf-8"):
        self.features = features
        self.language = language
        self.encoding = encoding

    def decode(self, text: Union[str, bytes, None]) -> str:
        if text is None:
            return ""
        if isinstance(text, bytes):
            return text.decode(self.encoding, errors="replace")
        return text

    def strip_tags(self, text: Union[str, bytes, None]) -> str:
        text = self.decode(text)
        if not text:
            return ""
        soup = BeautifulSoup(text, self.features)
        return unicodedata.normalize("NFC", soup.get_text())

    def strlen(self, text: Union[str, bytes, None]) -> int:
        """Length in characters, not bytes."""
        return len(unicodedata.normalize("NFC", self.decode(text)))

    def __repr__(self) -> str:
        return f"HtmlTextNormalizer(features={self.features!r}, language={self.language!r}, encoding={self.encoding!r})"
