"""
Lexical resources: synonym, antonym and hypernym lookups plus IDF scoring.
"""

import math
import re
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from nltk.corpus import wordnet as wn

from ..utils.logger import get_logger

logger = get_logger("lexicon")

TABLE_POS = {"noun": "NN", "verb": "VB", "adjective": "JJ", "adverb": "RB"}

NON_WORD = re.compile(r"[^\w\-']")


def coarse_pos(pos: str) -> str:
    """Map a Penn Treebank tag to NN, VB, JJ or RB (or the tag itself)."""
    for prefix in ("NN", "VB", "JJ", "RB"):
        if pos.startswith(prefix):
            return prefix
    return pos


def _key(word: str) -> str:
    return word.strip().lower().replace(" ", "_")


def _dedupe(words: Iterable[str]) -> List[str]:
    seen = []
    for word in words:
        if word not in seen:
            seen.append(word)
    return seen


class Lexicon(ABC):
    """Synonym, antonym and hypernym lookups.

    Multi-word entries are returned with underscores; callers replace them
    with blanks where a surface form is needed.
    """

    @abstractmethod
    def synonyms(self, word: str, pos: str) -> List[str]:
        """Get the synonyms of a word for a part of speech."""

    @abstractmethod
    def antonyms(self, word: str) -> List[str]:
        """Get the antonyms of a word."""

    @abstractmethod
    def hypernyms(self, word: str, pos: str) -> List[str]:
        """Get the direct hypernyms of a word for a part of speech."""

    def are_synonyms(self, word1: str, word2: str, pos: str) -> bool:
        """Check whether two words are synonyms."""
        return _key(word2) in [_key(s) for s in self.synonyms(word1, pos)]


class TableLexicon(Lexicon):
    """Lexicon backed by in-memory tables."""

    def __init__(self, synonyms: Optional[Dict[str, List[str]]] = None,
                 antonyms: Optional[Dict[str, List[str]]] = None,
                 hypernyms: Optional[Dict[str, List[str]]] = None):
        # Synonym and hypernym keys are "<word>_<POS>", antonym keys are words
        self.synonym_table = defaultdict(list)
        self.antonym_table = defaultdict(list)
        self.hypernym_table = defaultdict(list)

        for key, values in (synonyms or {}).items():
            self.synonym_table[key].extend(_key(v) for v in values)
        for word, values in (antonyms or {}).items():
            self.add_antonyms(word, values)
        for key, values in (hypernyms or {}).items():
            self.hypernym_table[key].extend(_key(v) for v in values)

    def add_synset(self, pos: str, words: List[str]):
        """Register every word of a synonym set as synonym of the others."""
        words = [_key(w) for w in words]
        for word in words:
            entry = self.synonym_table[f"{word}_{pos}"]
            for synonym in words:
                if synonym != word and synonym not in entry:
                    entry.append(synonym)

    def add_antonyms(self, word: str, antonyms: List[str]):
        """Register antonyms in both directions."""
        word = _key(word)
        for antonym in (_key(a) for a in antonyms):
            if antonym not in self.antonym_table[word]:
                self.antonym_table[word].append(antonym)
            if word not in self.antonym_table[antonym]:
                self.antonym_table[antonym].append(word)

    def add_hypernyms(self, pos: str, words: List[str], hypernyms: List[str]):
        """Register the hypernyms shared by a synonym set."""
        for word in (_key(w) for w in words):
            entry = self.hypernym_table[f"{word}_{pos}"]
            for hypernym in (_key(h) for h in hypernyms):
                if hypernym not in entry:
                    entry.append(hypernym)

    def synonyms(self, word: str, pos: str) -> List[str]:
        return list(self.synonym_table.get(f"{_key(word)}_{coarse_pos(pos)}", []))

    def antonyms(self, word: str) -> List[str]:
        return list(self.antonym_table.get(_key(word), []))

    def hypernyms(self, word: str, pos: str) -> List[str]:
        return list(self.hypernym_table.get(f"{_key(word)}_{coarse_pos(pos)}", []))

    @classmethod
    def from_files(cls, synonyms: Optional[str] = None, antonyms: Optional[str] = None,
                   hypernyms: Optional[str] = None) -> "TableLexicon":
        """Load pipe-delimited table files.

        Synonyms: ``<pos>|w1, w2, ...``; antonyms: ``<word>|a1, a2, ...``;
        hypernyms: ``<pos>|w1, w2|h1, h2``.
        """
        lexicon = cls()

        for fields in _read_table(synonyms, 2):
            pos, words = fields[0], fields[1].split(", ")
            if pos not in TABLE_POS:
                logger.warning("Invalid part of speech in synonym table: %s", pos)
                continue
            if len(words) > 1:
                lexicon.add_synset(TABLE_POS[pos], words)

        for fields in _read_table(antonyms, 2):
            lexicon.add_antonyms(fields[0], fields[1].split(", "))

        for fields in _read_table(hypernyms, 3):
            pos = "NN" if fields[0] == "noun" else "VB"
            lexicon.add_hypernyms(pos, fields[1].split(", "), fields[2].split(", "))

        return lexicon


def _read_table(path: Optional[str], num_fields: int) -> List[List[str]]:
    if not path:
        return []

    rows = []
    with open(path, "r", encoding="utf-8") as f:
        for number, line in enumerate(f, start=1):
            line = line.rstrip("\r\n")
            if not line:
                continue
            fields = line.split("|")
            if len(fields) < num_fields:
                logger.warning("Skipping malformed line %d in %s", number, path)
                continue
            rows.append(fields)
    return rows


class WordNetLexicon(Lexicon):
    """Lexicon backed by the NLTK WordNet corpus."""

    POS = {"NN": "n", "VB": "v", "JJ": "a", "RB": "r"}

    def _synsets(self, word: str, pos: str):
        wn_pos = self.POS.get(coarse_pos(pos))
        if wn_pos is None:
            return []
        return wn.synsets(_key(word), pos=wn_pos)

    def synonyms(self, word: str, pos: str) -> List[str]:
        word = _key(word)
        names = (lemma.name().lower() for synset in self._synsets(word, pos) for lemma in synset.lemmas())
        return _dedupe(name for name in names if name != word)

    def antonyms(self, word: str) -> List[str]:
        word = _key(word)
        names = (antonym.name().lower()
                 for synset in wn.synsets(word)
                 for lemma in synset.lemmas() if lemma.name().lower() == word
                 for antonym in lemma.antonyms())
        return _dedupe(names)

    def hypernyms(self, word: str, pos: str) -> List[str]:
        names = (lemma.name().lower()
                 for synset in self._synsets(word, pos)
                 for hypernym in synset.hypernyms()
                 for lemma in hypernym.lemmas())
        return _dedupe(names)


class IDFCalculator:
    """Inverse document frequency over a gloss corpus (one document per line)."""

    MAX_IDF = 15.0

    def __init__(self, idfs: Optional[Dict[str, float]] = None):
        self.idfs = idfs or {}

    @classmethod
    def from_documents(cls, documents: Iterable[str]) -> "IDFCalculator":
        """Compute IDF values for all the words in the documents."""
        frequencies = defaultdict(int)
        total = 0

        for document in documents:
            total += 1
            words = set(NON_WORD.sub(" ", document.replace("''", '"')).lower().split())
            for word in words:
                frequencies[word] += 1

        idfs = {word: math.log(total / freq) for word, freq in frequencies.items()}
        return cls(idfs)

    @classmethod
    def from_file(cls, path: Optional[str]) -> "IDFCalculator":
        """Load a gloss corpus; no corpus means every word gets the maximum IDF."""
        if not path:
            return cls()
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_documents(line for line in f if line.strip())

    def idf(self, word: str) -> float:
        """Get the IDF of a word, or the maximum for unseen words."""
        return self.idfs.get(word.lower(), self.MAX_IDF)
