"""
Evaluation metrics for entailment decisions.
"""

import numpy as np
from typing import Dict, List, Optional, Sequence, Tuple
from sklearn.metrics import f1_score, precision_score, recall_score

from ..data.schema import EntailmentDecision, EntailmentPair, ModelName


SECTIONS = (
    (ModelName.STRUCTURAL_SIMILARITY, "Structural Similarity"),
    (ModelName.GRAPH_NAVIGATION, "Graph Navigation"),
)


def compute_metrics(predictions: Sequence[str], labels: Sequence[Optional[str]]) -> Dict[str, float]:
    """Compute confusion counts, precision, recall and F1 for yes/no decisions.

    Pairs without a gold label are ignored. Undefined ratios are 0.
    """
    labeled = [(p, l) for p, l in zip(predictions, labels) if l is not None]

    metrics = {"tp": 0, "fp": 0, "tn": 0, "fn": 0, "precision": 0.0, "recall": 0.0, "f1": 0.0}
    if not labeled:
        return metrics

    predicted = np.array([str(p).lower() == "yes" for p, _ in labeled], dtype=int)
    gold = np.array([str(l).lower() == "yes" for _, l in labeled], dtype=int)

    metrics["tp"] = int(np.sum((predicted == 1) & (gold == 1)))
    metrics["fp"] = int(np.sum((predicted == 1) & (gold == 0)))
    metrics["tn"] = int(np.sum((predicted == 0) & (gold == 0)))
    metrics["fn"] = int(np.sum((predicted == 0) & (gold == 1)))

    metrics["precision"] = float(precision_score(gold, predicted, zero_division=0))
    metrics["recall"] = float(recall_score(gold, predicted, zero_division=0))
    metrics["f1"] = float(f1_score(gold, predicted, zero_division=0))

    return metrics


def metrics_for(results: List[Tuple[EntailmentPair, EntailmentDecision]],
                model: Optional[ModelName] = None) -> Dict[str, float]:
    """Metrics of the results decided by one model, or of all results."""
    selected = [(pair, decision) for pair, decision in results if model is None or decision.model == model]
    return compute_metrics(
        [decision.decision.value for _, decision in selected],
        [pair.label for pair, _ in selected],
    )


def _render(metrics: Dict[str, float]) -> str:
    return "\n".join([
        "Summary",
        "-------",
        f"True positives: {metrics['tp']}",
        f"False positives: {metrics['fp']}",
        f"True negatives: {metrics['tn']}",
        f"False negatives: {metrics['fn']}",
        "",
        f"Precision: {metrics['precision']:.2f}",
        f"Recall: {metrics['recall']:.2f}",
        f"F-measure: {metrics['f1']:.2f}",
    ])


def format_summary(results: List[Tuple[EntailmentPair, EntailmentDecision]]) -> str:
    """Render the summary of all results followed by one summary per model."""
    blocks = [_render(metrics_for(results))]

    for model, title in SECTIONS:
        blocks.append(f"\n***** Model: {title} *****\n")
        blocks.append(_render(metrics_for(results, model)))

    return "\n".join(blocks)
