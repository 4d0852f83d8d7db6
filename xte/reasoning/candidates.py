"""
Selection of the (source, target) concept pairs explored by graph navigation.
"""

from typing import List, Tuple

from .similarity import SimilarityScorer
from ..data.preprocessing import Preprocessor
from ..data.schema import Phrase, Token

MAX_CANDIDATES = 5


class CandidateSelector:
    """Pairs text phrases with hypothesis phrases by semantic similarity."""

    def __init__(self, preprocessor: Preprocessor, scorer: SimilarityScorer,
                 max_candidates: int = MAX_CANDIDATES):
        self.preprocessor = preprocessor
        self.scorer = scorer
        self.max_candidates = max_candidates

    def match_phrases(self, tokens: List[Token], phrases: List[Phrase]) -> List[Phrase]:
        """Map each token to the first dictionary phrase that starts or ends with it."""
        matched = []

        for token in tokens:
            word = self.preprocessor.normalize(token.lemma, token.pos)

            for phrase in phrases:
                if phrase.text.startswith(word) or phrase.text.endswith(word):
                    entry = Phrase(phrase.text, token.pos)
                    if entry not in matched:
                        matched.append(entry)
                    break

        return matched

    def select(self, text: str, hyp: str) -> List[Tuple[Phrase, Phrase]]:
        """Get the most similar (text phrase, hypothesis phrase) pairs."""
        text_tokens, hyp_tokens = self.preprocessor.clean_pair(text, hyp)
        text_phrases = self.match_phrases(text_tokens, self.preprocessor.split(text))
        hyp_phrases = self.match_phrases(hyp_tokens, self.preprocessor.split(hyp))

        # Score every combination of text and hypothesis phrases
        scored = []
        for source in text_phrases:
            for target in hyp_phrases:
                result = self.scorer.score(source.text, [target.text])
                for pair in result.value:
                    scored.append((Phrase(pair.term1, source.pos), Phrase(pair.term2, target.pos), pair.score))

        scored.sort(key=lambda item: -abs(item[2]))

        return [(source, target) for source, target, _ in scored[:self.max_candidates]]
