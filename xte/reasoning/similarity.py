"""
Semantic similarity scoring between a target term and candidate terms.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
import torch.nn.functional as F
from sentence_transformers import SentenceTransformer

from ..data.schema import ErrorKind, Result, ScoredPair
from ..utils.http import default_timeout, transient_retry
from ..utils.logger import get_logger

logger = get_logger("similarity")


def rank_by_score(pairs: List[ScoredPair]) -> List[ScoredPair]:
    """Sort by descending absolute score, keeping the input order among ties."""
    return sorted(pairs, key=lambda pair: -abs(pair.score))


class SimilarityScorer(ABC):
    """Scores a target term against a list of candidate terms."""

    def score(self, target: str, candidates: List[str]) -> Result[List[ScoredPair]]:
        """Get one (target, candidate, score) triple per candidate, in any order."""
        if not candidates:
            return Result([])
        return self._score(target, candidates)

    @abstractmethod
    def _score(self, target: str, candidates: List[str]) -> Result[List[ScoredPair]]:
        pass


class IndraScorer(SimilarityScorer):
    """Client for the Indra relatedness web service."""

    def __init__(self, url: str, corpus: str = "wiki-2018", model: str = "W2V",
                 language: str = "EN", score_function: str = "COSINE",
                 timeout: float = 30.0, retries: int = 3,
                 client: Optional[httpx.Client] = None):
        self.url = url
        self.corpus = corpus
        self.model = model
        self.language = language
        self.score_function = score_function
        self.client = client or httpx.Client(timeout=default_timeout(timeout))
        self._post = transient_retry(retries)(self._send)

    def build_request(self, target: str, candidates: List[str]) -> Dict[str, Any]:
        """Create the JSON body for a relatedness query."""
        return {
            "corpus": self.corpus,
            "model": self.model,
            "language": self.language,
            "scoreFunction": self.score_function,
            "pairs": [{"t1": target, "t2": candidate} for candidate in candidates],
        }

    def _send(self, payload: Dict[str, Any]) -> httpx.Response:
        response = self.client.post(self.url, json=payload)
        response.raise_for_status()
        return response

    def _score(self, target: str, candidates: List[str]) -> Result[List[ScoredPair]]:
        try:
            response = self._post(self.build_request(target, candidates))
        except httpx.HTTPError as e:
            logger.error("Relatedness service unavailable: %s", e)
            return Result([], ErrorKind.SERVICE_UNAVAILABLE, str(e))

        try:
            data = response.json()
            pairs = [ScoredPair(str(p["t1"]), str(p["t2"]), float(p["score"])) for p in data["pairs"]]
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Response is not a valid relatedness result: %s", e)
            return Result([], ErrorKind.MALFORMED_INPUT, str(e))

        return Result(pairs)

    def close(self):
        self.client.close()


class SentenceTransformerScorer(SimilarityScorer):
    """Cosine similarity between sentence-transformer embeddings."""

    def __init__(self, model_name: str = "sentence-transformers/all-MiniLM-L6-v2"):
        self.encoder = SentenceTransformer(model_name)

    def _score(self, target: str, candidates: List[str]) -> Result[List[ScoredPair]]:
        # Encode target and candidates
        target_embedding = self.encoder.encode([target], convert_to_tensor=True)
        candidate_embeddings = self.encoder.encode(candidates, convert_to_tensor=True)

        # Compute similarities
        similarities = F.cosine_similarity(target_embedding, candidate_embeddings)

        return Result([
            ScoredPair(target, candidate, similarities[i].item())
            for i, candidate in enumerate(candidates)
        ])


def create_scorer(config) -> SimilarityScorer:
    """Create the similarity scorer selected in the configuration."""
    if config.similarity == "indra":
        return IndraScorer(
            url=config.indra_url,
            corpus=config.indra_corpus,
            model=config.indra_model,
            language=config.indra_language,
            score_function=config.indra_score_function,
            timeout=config.similarity_timeout,
            retries=config.similarity_retries,
        )
    if config.similarity == "sentence-transformers":
        return SentenceTransformerScorer(config.sentence_model)

    raise ValueError(f"Unknown similarity scorer: {config.similarity}. Available: ['indra', 'sentence-transformers']")
