"""
Chooses the reasoning strategy for a text-hypothesis pair.
"""

from ..data.preprocessing import Preprocessor
from ..data.schema import ModelName


class ModelRouter:
    """Routes a pair to the structural or the graph navigation model."""

    def __init__(self, preprocessor: Preprocessor):
        self.preprocessor = preprocessor

    def null_overlap(self, text: str, hyp: str) -> bool:
        """Check whether text and hypothesis share no content word."""
        is_stop_word = self.preprocessor.is_stop_word
        text_words = {t.lemma for t in self.preprocessor.tokenize(text) if not is_stop_word(t.lemma)}
        hyp_words = [t.lemma for t in self.preprocessor.tokenize(hyp) if not is_stop_word(t.lemma)]

        return not any(word in text_words for word in hyp_words)

    def choose_strategy(self, text: str, hyp: str) -> ModelName:
        """Pick the model to use for the pair."""
        if self.null_overlap(text, hyp):
            # Nothing to navigate from
            return ModelName.STRUCTURAL_SIMILARITY

        text_tokens, hyp_tokens = self.preprocessor.clean_pair(text, hyp)
        if not text_tokens or not hyp_tokens:
            return ModelName.STRUCTURAL_SIMILARITY

        return ModelName.GRAPH_NAVIGATION
