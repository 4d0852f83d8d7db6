"""
Context checks that veto an entailment before any model runs.
"""

from typing import List, Tuple

from ..data.preprocessing import Preprocessor
from ..data.schema import Decision, EntailmentDecision
from ..rules.lexicon import Lexicon
from ..utils.logger import get_logger

logger = get_logger("context")

# Leftover words that only express a negation
NEGATIONS = {
    1: ("not",),
    2: ("there no", "there not", "do not"),
    3: ("there be no", "there be not"),
}


class ContextVeto:
    """Four heuristic tests; any positive one forces a ``no`` decision."""

    def __init__(self, preprocessor: Preprocessor, lexicon: Lexicon):
        self.preprocessor = preprocessor
        self.lexicon = lexicon

    def _leftovers(self, text: str, hyp: str) -> Tuple[List[str], List[str]]:
        """Remove the words shared by text and hypothesis from both sides."""
        text_words = [token.lemma for token in self.preprocessor.tokenize(text)]
        hyp_words = [token.lemma for token in self.preprocessor.tokenize(hyp)]

        overlap = {word for word in hyp_words if word in text_words}

        return ([w for w in text_words if w not in overlap],
                [w for w in hyp_words if w not in overlap])

    def _is_bare_negation(self, words: List[str]) -> bool:
        phrase = self.preprocessor.list_to_string(words).lower()
        return phrase in NEGATIONS.get(len(words), ())

    def total_overlap(self, text: str, hyp: str) -> bool:
        """Check whether every content word of the text appears in the hypothesis."""
        text_words = [t.lemma for t in self.preprocessor.tokenize(text) if not self.preprocessor.is_stop_word(t.lemma)]
        hyp_words = {t.lemma for t in self.preprocessor.tokenize(hyp) if not self.preprocessor.is_stop_word(t.lemma)}
        return all(word in hyp_words for word in text_words)

    def is_negation(self, text: str, hyp: str) -> bool:
        """Check whether one side is a bare negation of the other."""
        text_words, hyp_words = self._leftovers(text, hyp)

        if self._is_bare_negation(text_words):
            return True
        return not text_words and self._is_bare_negation(hyp_words)

    def is_opposition(self, text: str, hyp: str) -> bool:
        """Check whether the text and the hypothesis contain antonyms."""
        text_words, hyp_words = self._leftovers(text, hyp)

        # Search the hypothesis as a string to catch multi-word antonyms
        hyp_string = self.preprocessor.list_to_string(hyp_words)

        for word in text_words:
            for antonym in self.lexicon.antonyms(word.replace(" ", "_")):
                if antonym.replace("_", " ") in hyp_string:
                    return True
        return False

    def clause_overflow(self, text: str, hyp: str) -> bool:
        """Check whether the hypothesis has more clauses than the text can satisfy."""
        text_clauses = self.preprocessor.count_clauses(text)
        hyp_clauses = self.preprocessor.count_clauses(hyp)

        return hyp_clauses > text_clauses and not self.total_overlap(text, hyp)

    def _are_synonyms(self, word1: str, word2: str) -> bool:
        # Both noun and verb senses count
        return self.lexicon.are_synonyms(word1, word2, "NN") or self.lexicon.are_synonyms(word1, word2, "VB")

    def has_inverse_specialization(self, text: str, hyp: str) -> bool:
        """Check whether the hypothesis specializes a concept the text only states generically."""
        if self.total_overlap(text, hyp):
            return False

        text_phrases = self.preprocessor.split(text)
        hyp_phrases = self.preprocessor.split(hyp)

        overlap = {phrase for phrase in text_phrases if phrase in hyp_phrases}
        text_words = [p.text for p in text_phrases if p not in overlap]
        hyp_phrases = [p for p in hyp_phrases if p not in overlap]

        for phrase in hyp_phrases:
            for hypernym in self.lexicon.hypernyms(phrase.text.replace(" ", "_"), phrase.pos):
                hypernym = hypernym.replace("_", " ")
                if hypernym in text_words and not self._are_synonyms(phrase.text, hypernym) and hypernym != "be":
                    return True
        return False

    def check_context(self, text: str, hyp: str) -> EntailmentDecision:
        """Run the four tests; ``no`` if any fires, ``pending`` otherwise."""
        checks = (
            ("negation", self.is_negation),
            ("opposition", self.is_opposition),
            ("clause overflow", self.clause_overflow),
            ("inverse specialization", self.has_inverse_specialization),
        )

        for name, check in checks:
            if check(text, hyp):
                logger.debug("Context veto (%s) for hypothesis %r", name, hyp)
                return EntailmentDecision(Decision.NO)

        return EntailmentDecision(Decision.PENDING)
