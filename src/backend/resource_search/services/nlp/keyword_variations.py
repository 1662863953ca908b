"""
Keyword Variation Generator

Derives the lexical views of a query used by the keyword strategies.
"""

import logging
from typing import Iterable, List, Optional

from ...models.intent import KeywordVariations
from .nlp_utils import NlpUtils, get_nlp_utils

logger = logging.getLogger(__name__)


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    unique = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


class KeywordVariationGenerator:
    """
    Pipeline:
        expand contractions -> extract nouns -> singular + plural forms ->
        drop generic nouns -> dedupe -> stem -> synonyms -> topics

    Example:
        >>> generator.generate("where can't I find food pantries in Chicago")
        KeywordVariations(
            original=["where cannot I find food pantries in Chicago"],
            nouns=["food", "foods", "pantries", "pantry", "chicago", "chicagos"],
            stemmed_nouns=["food", "pantr", "chicago"],
            synonyms=[...],
            topics=["chicago"],
        )
    """

    def __init__(self, nlp: Optional[NlpUtils] = None):
        self.nlp = nlp or get_nlp_utils()

    def generate(self, query: str) -> KeywordVariations:
        """
        Args:
            query: Raw query text

        Returns:
            KeywordVariations; every list is empty for blank input
        """
        query = (query or "").strip()
        if not query:
            return KeywordVariations()

        expanded = self.nlp.expand_contractions(query)

        forms = []
        for noun in self.nlp.extract_nouns(expanded):
            forms.extend(self.nlp.get_singular_and_plural_forms(noun))

        nouns = _dedupe(form for form in forms if not self.nlp.is_generic_noun(form))
        stemmed_nouns = _dedupe(self.nlp.stem_words(nouns))

        stems = set(stemmed_nouns)
        synonyms = _dedupe(
            synonym
            for noun in nouns
            for synonym in self.nlp.get_synonyms(noun)
            if synonym not in stems
        )

        topics = _dedupe(self.nlp.extract_topics(expanded))

        variations = KeywordVariations(
            original=[expanded],
            nouns=nouns,
            stemmed_nouns=stemmed_nouns,
            synonyms=synonyms,
            topics=topics,
        )

        logger.debug(
            f"Keyword variations for '{query}': {len(nouns)} nouns, {len(stemmed_nouns)} stems, "
            f"{len(synonyms)} synonyms, {len(topics)} topics"
        )
        return variations
