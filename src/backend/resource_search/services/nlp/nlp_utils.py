"""
NLP Utilities

Linguistic primitives used to derive keyword variations and text snippets:
contraction expansion, POS-based noun extraction, singular/plural forms,
Porter stemming, WordNet synonyms and named-entity topics (NLTK).
"""

import logging
import os
import re
from typing import List, Optional

import nltk
from nltk.corpus import wordnet
from nltk.stem import PorterStemmer, WordNetLemmatizer
from nltk.tokenize import wordpunct_tokenize

logger = logging.getLogger(__name__)

# resource path -> download package name
NLTK_RESOURCES = {
    "taggers/averaged_perceptron_tagger_eng": "averaged_perceptron_tagger_eng",
    "chunkers/maxent_ne_chunker_tab": "maxent_ne_chunker_tab",
    "corpora/words": "words",
    "corpora/wordnet": "wordnet",
}

NLTK_DATA_DIR = os.getenv("NLTK_DATA_DIR")
if NLTK_DATA_DIR and NLTK_DATA_DIR not in nltk.data.path:
    nltk.data.path.append(NLTK_DATA_DIR)

TOPIC_ENTITY_LABELS = {"PERSON", "ORGANIZATION", "GPE", "LOCATION", "FACILITY"}

# Nouns too broad to help retrieval in a resource directory
GENERIC_NOUNS = {
    "help", "helps", "service", "services", "program", "programs", "resource",
    "resources", "assistance", "support", "need", "needs", "thing", "things",
    "place", "places", "information", "info", "option", "options", "way", "ways",
    "area", "areas", "someone", "somebody", "something", "anything", "stuff",
    "lot", "lots", "kind", "type", "people", "person", "time",
}

WHOLE_WORD_CONTRACTIONS = {
    "can't": "cannot",
    "won't": "will not",
    "shan't": "shall not",
    "ain't": "is not",
    "let's": "let us",
}

SUFFIX_CONTRACTIONS = [
    (re.compile(r"\b(\w+)n't\b", re.IGNORECASE), r"\1 not"),
    (re.compile(r"\b(\w+)'re\b", re.IGNORECASE), r"\1 are"),
    (re.compile(r"\b(\w+)'m\b", re.IGNORECASE), r"\1 am"),
    (re.compile(r"\b(\w+)'ll\b", re.IGNORECASE), r"\1 will"),
    (re.compile(r"\b(\w+)'ve\b", re.IGNORECASE), r"\1 have"),
    (re.compile(r"\b(\w+)'d\b", re.IGNORECASE), r"\1 would"),
]

IRREGULAR_PLURALS = {
    "child": "children",
    "man": "men",
    "woman": "women",
    "foot": "feet",
    "tooth": "teeth",
    "mouse": "mice",
    "goose": "geese",
}

_VOWELS = set("aeiou")


def nltk_data_available() -> bool:
    """True when every required NLTK resource is installed locally"""
    for resource in NLTK_RESOURCES:
        try:
            nltk.data.find(resource)
        except LookupError:
            return False
    return True


def ensure_nltk_data() -> None:
    """Download any missing NLTK resources"""
    for resource, package in NLTK_RESOURCES.items():
        try:
            nltk.data.find(resource)
        except LookupError:
            logger.info(f"NLTK resource '{resource}' not found. Downloading {package}...")
            nltk.download(package, download_dir=NLTK_DATA_DIR, quiet=True)


def _pluralize(word: str) -> Optional[str]:
    """Plural of a singular noun, None when it has no separate plural form"""
    if word in IRREGULAR_PLURALS:
        return IRREGULAR_PLURALS[word]
    # news, series, analysis, diabetes
    if word.endswith("s") and not word.endswith("ss"):
        return None
    if word.endswith("y") and len(word) > 1 and word[-2] not in _VOWELS:
        return word[:-1] + "ies"
    if word.endswith(("ss", "x", "z", "ch", "sh")):
        return word + "es"
    return word + "s"


class NlpUtils:
    """
    NLTK-backed text helpers.

    Corpora are located (and downloaded if missing) on first use of a
    tagger, chunker or WordNet lookup.
    """

    def __init__(self, max_synonyms_per_word: int = 5):
        self.max_synonyms_per_word = max_synonyms_per_word
        self._stemmer = PorterStemmer()
        self._lemmatizer = WordNetLemmatizer()
        self._data_ready = False

    def _ensure_data(self):
        if not self._data_ready:
            ensure_nltk_data()
            self._data_ready = True

    def expand_contractions(self, text: str) -> str:
        """
        Example:
            >>> nlp.expand_contractions("I can't pay and I'm hungry")
            'I cannot pay and I am hungry'
        """
        if not text:
            return text

        text = text.replace("’", "'")
        for contraction, expansion in WHOLE_WORD_CONTRACTIONS.items():
            text = re.sub(rf"\b{re.escape(contraction)}\b", expansion, text, flags=re.IGNORECASE)
        for pattern, replacement in SUFFIX_CONTRACTIONS:
            text = pattern.sub(replacement, text)
        return text

    def _tag(self, text: str):
        self._ensure_data()
        tokens = [token for token in wordpunct_tokenize(text) if token.strip()]
        return nltk.pos_tag(tokens)

    def extract_nouns(self, text: str) -> List[str]:
        """Lowercased common and proper nouns, in query order"""
        if not text or not text.strip():
            return []

        return [word.lower() for word, tag in self._tag(text) if tag.startswith("NN") and word.isalpha()]

    def lemmatize_noun(self, word: str) -> str:
        """WordNet base form of a noun; unknown words come back unchanged"""
        self._ensure_data()
        return self._lemmatizer.lemmatize(word, pos=wordnet.NOUN)

    def get_singular_and_plural_forms(self, noun: str) -> List[str]:
        """
        The noun followed by its other number form.

        The singular comes from WordNet. Singular nouns ending in a single "s"
        (news, series, analysis) get no plural.

        Example:
            >>> nlp.get_singular_and_plural_forms("shelters")
            ['shelters', 'shelter']
        """
        word = noun.lower()
        singular = self.lemmatize_noun(word)
        if singular != word:
            return [word, singular]
        plural = _pluralize(word)
        return [word, plural] if plural else [word]

    def is_generic_noun(self, noun: str) -> bool:
        return noun.lower() in GENERIC_NOUNS

    def stem_word(self, word: str) -> str:
        """
        Porter stem with a trailing "i" trimmed for prefix matching.

        Example:
            >>> nlp.stem_word("laundry")
            'laundr'
        """
        if not word or not word.strip():
            return word

        stemmed = self._stemmer.stem(word.lower())
        if stemmed.endswith("i") and len(stemmed) > 2:
            stemmed = stemmed[:-1]
        return stemmed

    def stem_words(self, words: List[str]) -> List[str]:
        return [self.stem_word(word) for word in words]

    def get_synonyms(self, word: str) -> List[str]:
        """WordNet noun lemmas for word, excluding the word itself"""
        self._ensure_data()

        synonyms: List[str] = []
        for synset in wordnet.synsets(word, pos=wordnet.NOUN):
            for lemma in synset.lemma_names():
                candidate = lemma.replace("_", " ").lower()
                if candidate != word.lower() and candidate not in synonyms:
                    synonyms.append(candidate)
                if len(synonyms) >= self.max_synonyms_per_word:
                    return synonyms
        return synonyms

    def extract_topics(self, text: str) -> List[str]:
        """Named entities (people, places, organizations) found in text"""
        if not text or not text.strip():
            return []

        tree = nltk.ne_chunk(self._tag(text))
        topics: List[str] = []
        for subtree in tree:
            if isinstance(subtree, nltk.Tree) and subtree.label() in TOPIC_ENTITY_LABELS:
                topic = " ".join(token for token, _ in subtree.leaves()).lower()
                if topic not in topics:
                    topics.append(topic)
        return topics


# Singleton instance
_nlp_utils: Optional[NlpUtils] = None


def get_nlp_utils() -> NlpUtils:
    """Get singleton NlpUtils instance"""
    global _nlp_utils
    if _nlp_utils is None:
        _nlp_utils = NlpUtils()
    return _nlp_utils
