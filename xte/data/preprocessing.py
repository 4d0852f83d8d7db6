"""
Linguistic preprocessing: tokenization, dictionary phrase splitting,
normalization, dependency parsing and clause counting.
"""

import copy
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Tuple

import nltk
import spacy
from nltk.corpus import wordnet as wn
from spacy.lang.en.stop_words import STOP_WORDS
from spacy.tokens import Doc

from .schema import Phrase, Token
from ..rules.lexicon import IDFCalculator
from ..utils.logger import get_logger

logger = get_logger("preprocessing")

VALID_POS = ("NN", "NNS", "NNP", "NNPS", "VB", "VBD", "VBG", "VBN", "VBP", "VBZ", "VBT", "FW")
VERB_FORMS = ("VB", "VBD", "VBG", "VBN", "VBP", "VBZ", "VBT")

# Dictionary lookup order for phrases
DICTIONARY_POS = (("n", "NN"), ("v", "VB"), ("a", "JJ"), ("r", "RB"))

MIN_NOUN_IDF = 4.0
MIN_VERB_IDF = 6.0

NON_WORD = re.compile(r"[^\w\-']")
SPACES = re.compile(r"\s+")

SUBORDINATE_DEPS = ("advcl", "ccomp", "csubj", "relcl")
VERBAL_POS = ("VERB", "AUX")


def clean_text(text: str) -> str:
    """Replace all non-alphanumerics but dashes and apostrophes by blanks."""
    text = text.replace("''", '"')
    return SPACES.sub(" ", NON_WORD.sub(" ", text)).strip()


@dataclass
class DependencyGraph:
    """Dependency parse of one sentence: lemmas plus (head, relation, child) edges."""
    lemmas: List[str]
    edges: List[Tuple[int, str, int]] = field(default_factory=list)
    roots: List[int] = field(default_factory=list)

    def children(self, index: int) -> List[Tuple[str, int]]:
        """Get the (relation, child) edges leaving a node, sorted by relation."""
        return sorted((rel, child) for head, rel, child in self.edges if head == index)


class Preprocessor:
    """Base class for linguistic preprocessing."""

    def __init__(self, stop_words: Iterable[str], idf: Optional[IDFCalculator] = None):
        self.stop_words = {word.lower() for word in stop_words}
        self.idf = idf or IDFCalculator()

    def tokenize(self, sentence: str) -> List[Token]:
        """Split a sentence into lemmatized, tagged tokens."""
        raise NotImplementedError

    def split(self, sentence: str) -> List[Phrase]:
        """Split a sentence into the longest dictionary phrases."""
        raise NotImplementedError

    def normalize(self, word: str, pos: str) -> str:
        """Find the base form of a word."""
        raise NotImplementedError

    def parse_dependencies(self, text: str) -> List[DependencyGraph]:
        """Get one dependency graph per sentence."""
        raise NotImplementedError

    def count_clauses(self, text: str) -> int:
        """Count clause-introducing constructs in the first sentence."""
        raise NotImplementedError

    def with_idf(self, idf: IDFCalculator) -> "Preprocessor":
        """Get a copy of the preprocessor gated by another gloss corpus."""
        other = copy.copy(self)
        other.idf = idf
        return other

    def is_stop_word(self, word: str) -> bool:
        return word.lower() in self.stop_words

    def remove_low_idf(self, phrases: List[Phrase]) -> List[Phrase]:
        """Remove nouns and verbs that are too common to be informative."""
        kept = []
        for phrase in phrases:
            if phrase.pos.startswith("N") and self.idf.idf(phrase.text) < MIN_NOUN_IDF:
                continue
            if phrase.pos.startswith("V") and self.idf.idf(phrase.text) < MIN_VERB_IDF:
                continue
            kept.append(phrase)
        return kept

    def clean_pair(self, text: str, hyp: str) -> Tuple[List[Token], List[Token]]:
        """Remove the overlap and stop words that are irrelevant for the decision."""
        text_tokens = self.tokenize(text)
        hyp_tokens = self.tokenize(hyp)

        text_words = {token.lemma for token in text_tokens}
        overlap = {token.lemma for token in hyp_tokens if token.lemma in text_words}

        hyp_tokens = [t for t in hyp_tokens if t.lemma not in overlap and not self.is_stop_word(t.lemma)]

        # The text is only cleaned if something is left in the hypothesis
        if hyp_tokens:
            text_tokens = [t for t in text_tokens if t.lemma not in overlap and not self.is_stop_word(t.lemma)]

        return text_tokens, hyp_tokens

    @staticmethod
    def list_to_string(words: List[str]) -> str:
        return " ".join(words).strip()


class SpacyPreprocessor(Preprocessor):
    """Preprocessor built on spaCy for tagging/parsing and WordNet for the dictionary."""

    def __init__(self, model_name: str = "en_core_web_sm", stop_words: Optional[Iterable[str]] = None,
                 idf: Optional[IDFCalculator] = None, wordnet_path: Optional[str] = None,
                 nlp: Optional[Callable[[str], Doc]] = None):
        super().__init__(STOP_WORDS if stop_words is None else stop_words, idf)

        if wordnet_path and wordnet_path not in nltk.data.path:
            nltk.data.path.append(wordnet_path)

        if nlp is None:
            logger.info("Loading spaCy model %s", model_name)
            nlp = spacy.load(model_name)
        self.nlp = nlp

    def tokenize(self, sentence: str) -> List[Token]:
        doc = self.nlp(clean_text(sentence))
        return [Token(t.lemma_.lower(), t.tag_) for t in doc if not t.is_space]

    def normalize(self, word: str, pos: str) -> str:
        if word == "'s":
            return word

        word = word.replace("'s", "").replace(" ", "_").lower()
        wn_pos = None
        for dictionary_pos, prefix in DICTIONARY_POS:
            if pos.startswith(prefix):
                wn_pos = dictionary_pos
                break

        if wn_pos is None or not word:
            return word

        stem = wn.morphy(word, wn_pos)
        return stem if stem else word

    def _in_dictionary(self, entry: str, wn_pos: str) -> bool:
        return len(wn.synsets(entry, pos=wn_pos)) > 0

    def split(self, sentence: str) -> List[Phrase]:
        doc = self.nlp(clean_text(sentence))
        tagged = [(self.normalize(t.text, t.tag_), t.tag_) for t in doc if not t.is_space]
        tagged = [(word, tag) for word, tag in tagged if word]

        chunks = []
        end = len(tagged)

        # Scan from the right: take the whole span, drop its leftmost word
        # until a dictionary entry is found, then continue with the rest.
        while end > 0:
            start = 0
            while start < end:
                words = [word for word, _ in tagged[start:end]]
                entry = "_".join(words)
                tag = tagged[end - 1][1]

                if end - start == 1:
                    if tag not in VALID_POS:
                        chunks.append(Phrase(entry, tag))
                        end -= 1
                        break
                    if tag in VERB_FORMS:
                        chunks.append(Phrase(entry.replace("_", " "), tag))
                        end -= 1
                        break

                found = None
                for wn_pos, dictionary_tag in DICTIONARY_POS:
                    if self._in_dictionary(entry, wn_pos):
                        found = dictionary_tag
                        break

                if found:
                    chunks.append(Phrase(entry.replace("_", " "), found))
                    end = start
                    break

                if end - start > 1:
                    start += 1
                else:
                    chunks.append(Phrase(entry, tag))
                    end -= 1
                    break

        chunks.reverse()
        return chunks

    def parse_dependencies(self, text: str) -> List[DependencyGraph]:
        doc = self.nlp(text)
        graphs = []

        for sent in doc.sents:
            offset = sent.start
            tokens = [t for t in sent]
            graph = DependencyGraph(lemmas=[t.lemma_.lower() for t in tokens])
            for token in tokens:
                if token.head.i == token.i:
                    graph.roots.append(token.i - offset)
                else:
                    graph.edges.append((token.head.i - offset, token.dep_.lower(), token.i - offset))
            graphs.append(graph)

        return graphs

    def count_clauses(self, text: str) -> int:
        doc = self.nlp(text)
        sentences = list(doc.sents)
        if not sentences:
            return 0

        count = 0
        for token in sentences[0]:
            if token.dep_ == "cc":
                # Conjunction joining clauses or verb phrases
                if any(child.dep_ == "conj" and child.pos_ in VERBAL_POS for child in token.head.children):
                    count += 1
            elif token.dep_ in SUBORDINATE_DEPS and token.pos_ in VERBAL_POS:
                count += 1

        return count
