"""
Graph navigation model: finds and explains a chain of lexical-semantic
relations from a text concept to a hypothesis concept in a definitions graph.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from .base import BaseModel
from ..data.preprocessing import Preprocessor
from ..data.schema import Decision, EntailmentDecision, ModelName, Phrase
from ..reasoning.candidates import CandidateSelector
from ..reasoning.paths import PathArena, PathStep, Role
from ..reasoning.similarity import SimilarityScorer, rank_by_score
from ..rules.knowledge import DefinitionGraph, HAS_SUPERTYPE, NOUN_NAMESPACE, VERB_NAMESPACE
from ..rules.lexicon import Lexicon
from ..utils.logger import get_logger

logger = get_logger("graph_navigation")

MAX_ENTRIES = 5
MAX_DEPTH = 5
MAX_PATHS = 100
SEARCH_LIMIT = 200
# Longer paths are probably looping
MAX_RAW_STEPS = 50

SUPERTYPE_ROLES = (Role.SUPERTYPE, Role.SUPERTYPE_HEAD)
DETERMINERS = ("to ", "a ", "an ", "the ")

RoleEntry = Tuple[str, str]


def _article(word: str) -> str:
    return "An" if word and word[0].lower() in "aeiou" else "A"


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def _strip_determiners(node: str) -> str:
    for determiner in DETERMINERS:
        if node.startswith(determiner):
            node = node[len(determiner):]
    return node


def _restore(best: List[str], entries: List[RoleEntry]) -> List[RoleEntry]:
    """Put the role label back on each ranked role text."""
    restored = []
    for text in best:
        for entry in entries:
            if entry[0] == text:
                restored.append(entry)
                break
    return restored


class GraphNavigationModel(BaseModel):
    """Decides entailment by searching the definitions graph for a connecting path."""

    name = ModelName.GRAPH_NAVIGATION

    def __init__(self, preprocessor: Preprocessor, lexicon: Lexicon, graph: DefinitionGraph,
                 scorer: SimilarityScorer, selector: Optional[CandidateSelector] = None):
        self.preprocessor = preprocessor
        self.lexicon = lexicon
        self.graph = graph
        self.scorer = scorer
        self.selector = selector or CandidateSelector(preprocessor, scorer)

    def decide(self, text: str, hyp: str) -> EntailmentDecision:
        return self.compute_entailment(self.selector.select(text, hyp))

    def compute_entailment(self, pairs: List[Tuple[Phrase, Phrase]]) -> EntailmentDecision:
        """Find the shortest path over all candidate pairs and justify it."""
        paths = []
        for source, target in pairs:
            found = self.find_paths(source.text, source.pos, target.text, target.pos)
            logger.debug("%d paths from %r to %r", len(found), source.text, target.text)
            paths.extend(found)

        if not paths:
            return EntailmentDecision(Decision.NO, self.name)

        best_path = self.shortest_path(paths)
        return EntailmentDecision(Decision.YES, self.name, self.write_justification(best_path))

    def best_matches(self, target: str, candidates: List[str], ascending: bool = False) -> List[str]:
        """Keep the candidates above the largest drop in similarity to the target."""
        ranked = rank_by_score(self.scorer.score(target, candidates).value)
        if not ranked:
            return []

        scores = [abs(pair.score) for pair in ranked]
        max_gap = 0.0
        cut = 0.0
        for current, following in zip(scores, scores[1:]):
            if current - following > max_gap:
                max_gap = current - following
                cut = following

        best = [pair.term2 for pair in ranked if abs(pair.score) >= cut]
        if not best:
            best = [ranked[0].term2]

        # Ascending order leaves the best match on top once pushed on a stack
        return best[::-1] if ascending else best

    def head_words(self, phrases: List[Phrase], target: str, ascending: bool = False) -> List[Phrase]:
        """Get the most informative words of a segment, ranked by similarity to the target."""
        phrases = [p for p in phrases if not self.preprocessor.is_stop_word(p.text)]
        phrases = self.preprocessor.remove_low_idf(phrases)
        if not phrases:
            return []

        ranked = rank_by_score(self.scorer.score(target, [p.text for p in phrases]).value)

        heads = []
        for pair in ranked[:MAX_ENTRIES]:
            for phrase in phrases:
                if phrase.text == pair.term2:
                    heads.append(phrase)
                    break

        return heads[::-1] if ascending else heads

    @staticmethod
    def filter_supertypes(grouped: Dict[str, List[RoleEntry]], segments: List[RoleEntry]) -> List[str]:
        """Select the supertypes linked to the given roles."""
        supertypes = []
        for segment in segments:
            for supertype, roles in grouped.items():
                if segment in roles and supertype not in supertypes:
                    supertypes.append(supertype)
        return supertypes

    @staticmethod
    def path_depth(path: Sequence[PathStep]) -> int:
        """Count the steps of a path that reach a new concept."""
        if len(path) > MAX_RAW_STEPS:
            return MAX_DEPTH + 1

        depth = 0
        previous = Role.SOURCE
        following = None

        for i, step in enumerate(path):
            if i + 1 < len(path):
                following = path[i + 1].role

            role = step.role
            if role not in (Role.SOURCE, Role.SUPERTYPE_HEAD, Role.HEAD, Role.SYNONYM):
                if (role != Role.SUPERTYPE or following == Role.SUPERTYPE
                        or (following in (Role.HEAD, Role.SUPERTYPE_HEAD) and previous == Role.SOURCE)):
                    depth += 1
            previous = role

        return depth

    @staticmethod
    def clean_path(path: Sequence[PathStep]) -> List[PathStep]:
        """Remove repeated steps and circular references from a path."""
        if len(path) <= 2:
            return list(path)

        # Source and its first supertype are always kept
        cleaned = list(path[:2])

        for i in range(2, len(path) - 1):
            step = path[i]
            previous = path[i - 1]
            following = path[i + 1]

            if step == previous or step == cleaned[-1]:
                continue
            if (step.role == Role.SUPERTYPE and step.detail == step.concept
                    and following.role in SUPERTYPE_ROLES):
                continue
            if previous == following:
                continue
            cleaned.append(step)

        cleaned.append(path[-1])
        return cleaned

    def shortest_path(self, paths: List[List[PathStep]]) -> List[PathStep]:
        """Get the path with the fewest meaningful steps (the first one on ties)."""
        best = paths[0]
        best_depth = self.path_depth(best)

        for path in paths[1:]:
            depth = self.path_depth(path)
            if depth < best_depth:
                best = path
                best_depth = depth

        return best

    def write_justification(self, path: List[PathStep]) -> str:
        """Render a path as one sentence per hop."""
        justification = ""
        current = path[0].concept.replace("_", " ")

        for i in range(len(path) - 1):
            step = path[i]
            following = path[i + 1]
            node = step.concept.replace("_", " ")
            verb = step.pos.startswith("VB")

            if step.role == Role.SUPERTYPE_HEAD or (step.role == Role.SUPERTYPE
                                                    and following.role != Role.SUPERTYPE_HEAD):
                subject = f"To {current} is " if verb else f"{_article(current)} {current} is "

                if following.role in (Role.SUPERTYPE, Role.SUPERTYPE_HEAD, Role.SYNONYM, Role.TARGET):
                    node = _strip_determiners(node)
                    if verb:
                        justification += subject + f"a way of {'' if node.endswith('ing') else 'to '}{node}\n"
                    else:
                        justification += subject + f"a kind of {node}\n"
                else:
                    # The role step that follows completes the sentence
                    if verb:
                        justification += subject + f"to {node} "
                    else:
                        justification += subject + f"{_article(node).lower()} {node} "
                current = node

            elif step.role == Role.SYNONYM:
                if verb:
                    justification += f"To {node} is synonym of to {step.detail}\n"
                else:
                    justification += f"{_capitalize(node)} is synonym of {step.detail}\n"
                current = node

            elif step.role == Role.ROLE:
                justification += node + "\n"

            elif step.role == Role.HEAD:
                current = node

        return justification.rstrip("\n")

    def find_paths(self, source: str, source_pos: str, target: str, target_pos: str) -> List[List[PathStep]]:
        """Find the valid paths between a source and a target concept."""
        return PathSearch(self, source, source_pos, target, target_pos).run()


class PathSearch:
    """Depth-first search from one source concept to one target concept.

    The best ranked supertype and role are followed inline; the others are
    pushed on a stack and resumed once the current branch terminates.
    """

    def __init__(self, model: GraphNavigationModel, source: str, source_pos: str,
                 target: str, target_pos: str):
        self.model = model
        self.graph = model.graph
        self.lexicon = model.lexicon
        self.preprocessor = model.preprocessor

        self.source = source
        self.pos = "VB" if source_pos.startswith("VB") else "NN"
        self.target = target
        target_pos = "VB" if target_pos.startswith("VB") else "NN"
        self.target_norm = self.preprocessor.normalize(target, target_pos)
        self.target_text = self.target_norm.replace("_", " ")

        self.arena = PathArena()
        self.stack: List[int] = []
        self.on_stack = defaultdict(int)

    def push(self, path: int):
        self.stack.append(path)
        self.on_stack[path] += 1

    def push_unique(self, path: int):
        if self.on_stack[path] == 0:
            self.push(path)

    def pop(self) -> int:
        path = self.stack.pop()
        self.on_stack[path] -= 1
        return path

    def extend(self, path: int, step: PathStep) -> int:
        return self.arena.extend(path, step)

    def depth(self, path: int) -> int:
        return self.model.path_depth(self.arena.steps(path))

    def run(self) -> List[List[PathStep]]:
        accepted = []
        seen = set()
        tried = 0
        target_reached = False

        self.push(self.arena.root(PathStep(self.source, self.pos, Role.SOURCE)))

        while self.stack:
            final = self.walk(self.pop())
            path = self.model.clean_path(self.arena.steps(final))

            key = tuple(path)
            if key not in seen:
                seen.add(key)
                accepted.append(path)
                if path[-1].role == Role.TARGET:
                    target_reached = True

            tried += 1
            if (target_reached and tried >= MAX_PATHS) or tried >= SEARCH_LIMIT:
                break

        return [path for path in accepted
                if path[-1].role == Role.TARGET and self.model.path_depth(path) <= MAX_DEPTH + 1]

    def synonym_step(self, synsets, node: str, pos: str) -> Optional[PathStep]:
        """Get a synonym step if any label of the synsets is a synonym of the target."""
        for synset in synsets:
            for word in self.graph.synonyms_of(synset):
                if self.lexicon.are_synonyms(word, self.target_text, pos):
                    return PathStep(node, pos, Role.SYNONYM, self.target_text)
        return None

    def rank_roles(self, roles: List[RoleEntry], ascending: bool) -> List[RoleEntry]:
        best = self.model.best_matches(self.target_text, [text for text, _ in roles], ascending)
        return _restore(best, roles)

    def push_role(self, path: int, role: RoleEntry):
        """Defer a role: one branch per head word, or the supertype itself."""
        text, label = role
        if label == HAS_SUPERTYPE:
            self.push_unique(path)
            return

        role_path = self.extend(path, PathStep(text, "", Role.ROLE, label))
        heads = self.model.head_words(self.preprocessor.split(text), self.target_text, ascending=True)
        for head in heads:
            self.push_unique(self.extend(role_path, PathStep(head.text, head.pos, Role.HEAD)))

    def push_supertype(self, path: int, synsets, supertype: str, pos: str):
        """Defer an alternative supertype of the current concept."""
        last_node = self.arena.last(path).concept
        best_synsets = self.graph.synsets_by_supertype(synsets, supertype)

        step = self.synonym_step(best_synsets, last_node, pos)
        if step is not None:
            self.push(self.extend(path, step))
            return

        roles = self.rank_roles(self.graph.roles_by_supertype(best_synsets, supertype), ascending=True)
        path = self.extend(path, PathStep(supertype, pos, Role.SUPERTYPE, last_node))
        for role in roles:
            self.push_role(path, role)

    def walk(self, path: int) -> int:
        """Follow a branch until it reaches the target or a dead end."""
        depth = self.depth(path)
        last = self.arena.last(path)
        pos = last.pos or self.pos
        last_node = last.concept
        next_node = self.preprocessor.normalize(last_node, pos)
        last_not_found = ""
        match = next_node == self.target_norm

        if self.lexicon.are_synonyms(next_node, self.target_norm, pos):
            path = self.extend(path, PathStep(next_node, pos, Role.SYNONYM, self.target_text))

        while next_node != self.target_norm and depth <= MAX_DEPTH:
            match = False
            current_role = self.arena.last(path).role

            if current_role == Role.SYNONYM:
                match = True
                break

            namespace = NOUN_NAMESPACE if pos.startswith("NN") else VERB_NAMESPACE
            synsets = self.graph.synsets_by_label(next_node, namespace)

            if synsets:
                # Before leaving the source, check its synonyms
                if current_role == Role.SOURCE:
                    step = self.synonym_step(synsets, last_node, pos)
                    if step is not None:
                        path = self.extend(path, step)
                        self.push(path)
                        match = True

                if match:
                    continue

                supertypes = self.graph.supertypes_of(synsets)
                grouped = self.graph.roles_grouped_by_supertype(synsets, supertypes)
                segments = [segment for roles in grouped.values() for segment in roles]
                best_supertypes = self.model.filter_supertypes(grouped, self.rank_roles(segments, ascending=False))

                if not best_supertypes:
                    break

                for supertype in best_supertypes[1:]:
                    self.push_supertype(path, synsets, supertype, pos)

                first = best_supertypes[0]
                best_synsets = self.graph.synsets_by_supertype(synsets, first)

                step = self.synonym_step(best_synsets, next_node.replace("_", " "), pos)
                if step is not None:
                    path = self.extend(path, step)
                    match = True
                    next_node = self.target_norm
                    continue

                roles = self.rank_roles(self.graph.roles_by_supertype(best_synsets, first), ascending=False)
                path = self.extend(path, PathStep(first, pos, Role.SUPERTYPE, self.arena.last(path).concept))

                for role in roles[1:]:
                    self.push_role(path, role)

                if not roles:
                    break

                text, label = roles[0]
                if label != HAS_SUPERTYPE:
                    path = self.extend(path, PathStep(text, "", Role.ROLE, label))
                    heads = self.model.head_words(self.preprocessor.split(text), self.target_text)

                    if heads:
                        for head in heads[1:]:
                            self.push_unique(self.extend(path, PathStep(head.text, head.pos, Role.HEAD)))
                        next_node = heads[0].text.replace(" ", "_")
                        pos = heads[0].pos
                        path = self.extend(path, PathStep(heads[0].text, heads[0].pos, Role.HEAD))
                else:
                    next_node = self.preprocessor.normalize(text, pos)

                if next_node == self.target_norm:
                    match = True
                if depth != MAX_DEPTH + 1:
                    depth = self.depth(path)

            elif current_role in SUPERTYPE_ROLES and "_" in next_node and next_node != last_not_found:
                # A supertype missing from the graph may be a badly chunked
                # phrase; retry with its head words
                last_not_found = next_node
                heads = self.model.head_words(self.preprocessor.split(next_node.replace("_", " ")),
                                              self.target_text)

                if heads:
                    for head in heads[1:]:
                        self.push_unique(self.extend(path, PathStep(head.text, head.pos, Role.SUPERTYPE_HEAD)))
                    next_node = heads[0].text.replace(" ", "_")
                    pos = heads[0].pos
                    path = self.extend(path, PathStep(heads[0].text, heads[0].pos, Role.SUPERTYPE_HEAD))

                    if next_node == self.target_norm:
                        match = True
                    depth = self.depth(path)

            else:
                break

        self.pos = pos

        if match:
            return self.extend(path, PathStep(self.target, "", Role.TARGET))
        return self.extend(path, PathStep("", "", Role.DEAD_END))
