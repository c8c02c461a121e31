import logging

from bs4.builder import builder_registry

from .normalizer import HtmlTextNormalizer

logger = logging.getLogger(__name__)

# Tree builders in order of preference
PREFERRED_FEATURES = ("lxml", "html.parser")


def select_parser_features() -> str:
    """Return the best HTML tree builder installed on this platform."""
    for features in PREFERRED_FEATURES:
        if builder_registry.lookup(features) is not None:
            return features
    return "html.parser"


def make_text_normalizer(language: str = "en", encoding: str = "utf-8") -> HtmlTextNormalizer:
    """Factory function to create the text normalizer once at startup."""
    features = select_parser_features()
    logger.info(f"Text normalizer using '{features}' tree builder ({encoding}, {language})")
    return HtmlTextNormalizer(features=features, language=language, encoding=encoding)
