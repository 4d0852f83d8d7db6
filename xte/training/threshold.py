"""
Threshold learning for the structural similarity model.
"""

from typing import Dict, Any, List, Sequence, Tuple

import numpy as np
import wandb
from sklearn.metrics import f1_score
from tqdm import tqdm

from ..data.schema import EntailmentPair
from ..utils.logger import get_logger

logger = get_logger("training")


class ThresholdLearner:
    """Learns the distance threshold that maximizes F1 on a labeled dataset."""

    def __init__(self, model, config: Dict[str, Any] = None):
        self.model = model
        self.config = config or {}

    def compute_distances(self, pairs: List[EntailmentPair]) -> List[float]:
        """Compute the normalized distance of every pair."""
        distances = []
        for pair in tqdm(pairs, desc="Computing distances"):
            distances.append(self.model.distance(pair.text, pair.hypothesis))
        return distances

    @staticmethod
    def learn(distances: Sequence[float], labels: Sequence[str]) -> Tuple[float, float]:
        """Pick the observed distance whose split gives the best F1.

        A pair is predicted ``yes`` when its distance is strictly below the
        candidate. Candidates are scanned in ascending order and only a
        strictly better F1 replaces the current best, so ties keep the
        smallest threshold.
        """
        if len(distances) == 0:
            raise ValueError("Cannot learn a threshold from an empty dataset")

        values = np.asarray(distances, dtype=float)
        gold = np.array([str(label).lower() == "yes" for label in labels], dtype=int)

        best_threshold = None
        best_f1 = -1.0

        for candidate in np.unique(values):
            predicted = (values < candidate).astype(int)
            f1 = f1_score(gold, predicted, zero_division=0)
            if f1 > best_f1:
                best_f1 = f1
                best_threshold = float(candidate)

        return best_threshold, float(best_f1)

    def fit(self, pairs: List[EntailmentPair]) -> Tuple[float, float]:
        """Learn the threshold from the labeled pairs of a dataset."""
        labeled = [pair for pair in pairs if pair.label is not None]
        if len(labeled) < len(pairs):
            logger.warning("Ignoring %d unlabeled pairs", len(pairs) - len(labeled))

        distances = self.compute_distances(labeled)
        threshold, f1 = self.learn(distances, [pair.label for pair in labeled])

        logger.info("Best F1: %.2f, obtained with the threshold %s", f1, threshold)

        if self.config.get("use_wandb", False):
            wandb.log({"train/f1": f1, "train/threshold": threshold, "train/pairs": len(labeled)})

        return threshold, f1
