"""
Structural similarity model: tree edit distance between dependency trees.
"""

import math
from typing import Any, Dict, List, Set, Tuple

from apted import APTED, Config
from apted.helpers import Tree

from .base import BaseModel
from ..data.preprocessing import DependencyGraph, Preprocessor
from ..data.schema import Decision, EntailmentDecision, EntailmentPair, ModelName
from ..training.threshold import ThresholdLearner
from ..utils.logger import get_logger

logger = get_logger("tree_edit")

JUSTIFICATION = "Hypothesis is a syntactic variation of the text."


class TreeFormatError(RuntimeError):
    """A rendered dependency tree has unbalanced brackets."""


def _lemma(graph: DependencyGraph, index: int) -> str:
    return graph.lemmas[index].lower().replace("{", "").replace("}", "")


def _append_children(graph: DependencyGraph, node: int, tree: List[str], visited: Set[int]):
    visited.add(node)
    edges = graph.children(node)

    if not edges:
        tree.append("}}")
        return

    for relation, child in edges:
        tree.append("{" + relation + "{" + _lemma(graph, child))
        if child not in visited:
            _append_children(graph, child, tree, visited)
        else:
            tree.append("}}")
    tree.append("}}")


def convert_to_tree(graph: DependencyGraph) -> str:
    """Convert a dependency graph to a bracketed tree, e.g. ``{see{nsubj{i}}}``."""
    visited: Set[int] = set()
    parts = []

    roots = list(graph.roots)
    # Nodes unreachable from a root are rendered as extra trees
    for index in range(len(graph.lemmas)):
        if index not in roots and not any(child == index for _, _, child in graph.edges):
            roots.append(index)

    for root in roots:
        if root in visited:
            continue
        tree = ["{" + _lemma(graph, root)]
        _append_children(graph, root, tree, visited)
        # Last bracket is not necessary
        parts.append("".join(tree)[:-1])

    rendered = parts[0] if len(parts) == 1 else "{root" + "".join(parts) + "}"

    if rendered.count("{") != rendered.count("}"):
        raise TreeFormatError(f"Number of left and right brackets don't match: {rendered}")

    return rendered


def normalize_distance(distance: float, node_diff: int) -> float:
    """Scale a raw distance by the difference in tree sizes."""
    node_diff = max(1, abs(node_diff))
    return float(math.floor(distance / node_diff * 100 + 0.5))


def count_nodes(tree: Tree) -> int:
    return 1 + sum(count_nodes(child) for child in tree.children)


class EditCosts(Config):
    """Per-operation cost model for the tree edit distance."""

    def __init__(self, delete: float = 2, insert: float = 2, rename: float = 3):
        self.delete_cost = delete
        self.insert_cost = insert
        self.rename_cost = rename

    def delete(self, node):
        return self.delete_cost

    def insert(self, node):
        return self.insert_cost

    def rename(self, node1, node2):
        return 0 if node1.name == node2.name else self.rename_cost


class StructuralSimilarityModel(BaseModel):
    """Decides entailment by comparing the syntactic trees of text and hypothesis."""

    name = ModelName.STRUCTURAL_SIMILARITY

    DELETE_COST = 2
    INSERT_COST = 2
    RENAME_COST = 3

    def __init__(self, preprocessor: Preprocessor, threshold: float = 0.0):
        self.preprocessor = preprocessor
        self.threshold = threshold
        self.costs = EditCosts(self.DELETE_COST, self.INSERT_COST, self.RENAME_COST)

    def make_trees(self, text: str) -> List[str]:
        """Get one bracketed tree per sentence."""
        return [convert_to_tree(graph) for graph in self.preprocessor.parse_dependencies(text)]

    def tree_distance(self, text_tree: str, hyp_tree: str) -> float:
        """Normalized edit distance between two bracketed trees."""
        t_tree = Tree.from_text(text_tree)
        h_tree = Tree.from_text(hyp_tree)

        distance = APTED(t_tree, h_tree, self.costs).compute_edit_distance()
        node_diff = count_nodes(t_tree) - count_nodes(h_tree)

        return normalize_distance(distance, node_diff)

    def distance(self, text: str, hyp: str) -> float:
        """Minimum normalized distance over all (text tree, hypothesis tree) combinations."""
        min_distance = math.inf

        for text_tree in self.make_trees(text):
            for hyp_tree in self.make_trees(hyp):
                min_distance = min(min_distance, self.tree_distance(text_tree, hyp_tree))

        return min_distance

    def decide(self, text: str, hyp: str) -> EntailmentDecision:
        distance = self.distance(text, hyp)
        logger.debug("Tree edit distance %.1f (threshold %.1f)", distance, self.threshold)

        if distance <= self.threshold:
            return EntailmentDecision(Decision.YES, self.name, JUSTIFICATION)
        return EntailmentDecision(Decision.NO, self.name)

    def train(self, pairs: List[EntailmentPair], config: Dict[str, Any] = None) -> Tuple[float, float]:
        """Learn the decision threshold from labeled pairs."""
        threshold, f1 = ThresholdLearner(self, config).fit(pairs)
        self.threshold = threshold
        return threshold, f1
