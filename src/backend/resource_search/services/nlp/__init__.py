"""NLP services: NLTK text helpers and keyword variation generation."""

from .keyword_variations import KeywordVariationGenerator
from .nlp_utils import NlpUtils, ensure_nltk_data, get_nlp_utils, nltk_data_available

__all__ = [
    "KeywordVariationGenerator",
    "NlpUtils",
    "ensure_nltk_data",
    "get_nlp_utils",
    "nltk_data_available",
]
