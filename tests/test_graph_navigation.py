"""
Unit tests for graph navigation.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from xte.data.schema import Decision, ErrorKind, ModelName, Phrase
from xte.models.graph_navigation import MAX_DEPTH, GraphNavigationModel
from xte.reasoning.candidates import CandidateSelector
from xte.reasoning.paths import PathStep, Role
from xte.rules.knowledge import DefinitionGraph, NOUN_NAMESPACE, RoleTriple
from xte.rules.lexicon import IDFCalculator, TableLexicon

from stubs import (
    BUDAPEST_HYP, BUDAPEST_JUSTIFICATION, BUDAPEST_TEXT, StubPreprocessor, StubScorer,
    budapest_graph, budapest_preprocessor, budapest_scorer,
)


def step(concept, role, pos="NN", detail=""):
    return PathStep(concept, pos, role, detail)


class TestBestMatches:
    """Test maximum-gap ranking."""

    def setup_method(self):
        """Setup test fixtures."""
        scorer = StubScorer({("t", "a"): 0.9, ("t", "b"): 0.8, ("t", "c"): 0.2, ("t", "d"): 0.1})
        self.model = GraphNavigationModel(StubPreprocessor(), TableLexicon(), DefinitionGraph("g"), scorer)

    def test_keeps_candidates_down_to_largest_drop(self):
        assert self.model.best_matches("t", ["d", "c", "b", "a"]) == ["a", "b", "c"]

    def test_ascending_reverses(self):
        assert self.model.best_matches("t", ["d", "c", "b", "a"], ascending=True) == ["c", "b", "a"]

    def test_equal_scores_keep_input_order(self):
        scorer = StubScorer({("t", "x"): 0.5, ("t", "y"): 0.5})
        model = GraphNavigationModel(StubPreprocessor(), TableLexicon(), DefinitionGraph("g"), scorer)

        assert model.best_matches("t", ["y", "x"]) == ["y", "x"]

    def test_negative_scores_rank_by_magnitude(self):
        scorer = StubScorer({("t", "x"): -0.9, ("t", "y"): 0.1})
        model = GraphNavigationModel(StubPreprocessor(), TableLexicon(), DefinitionGraph("g"), scorer)

        assert model.best_matches("t", ["y", "x"]) == ["x", "y"]

    def test_service_failure_gives_no_match(self):
        scorer = StubScorer(error=ErrorKind.SERVICE_UNAVAILABLE)
        model = GraphNavigationModel(StubPreprocessor(), TableLexicon(), DefinitionGraph("g"), scorer)

        assert model.best_matches("t", ["a", "b"]) == []


class TestHeadWords:
    """Test head word extraction."""

    def test_stop_words_removed_and_ranked(self):
        model = GraphNavigationModel(budapest_preprocessor(), TableLexicon(), budapest_graph(), budapest_scorer())
        phrases = [Phrase("that", "WDT"), Phrase("cause", "VB"), Phrase("damage", "NN")]

        assert model.head_words(phrases, "damage") == [Phrase("damage", "NN"), Phrase("cause", "VB")]
        assert model.head_words(phrases, "damage", ascending=True) == [Phrase("cause", "VB"), Phrase("damage", "NN")]

    def test_at_most_five(self):
        model = GraphNavigationModel(StubPreprocessor(), TableLexicon(), DefinitionGraph("g"), StubScorer())
        phrases = [Phrase(word, "NN") for word in ("w1", "w2", "w3", "w4", "w5", "w6", "w7")]

        assert len(model.head_words(phrases, "target")) == 5

    def test_common_words_removed_by_idf(self):
        glosses = ["act riot", "act cause"] + ["act go"] * 100 + ["act"] * 398
        preprocessor = StubPreprocessor(idf=IDFCalculator.from_documents(glosses))
        model = GraphNavigationModel(preprocessor, TableLexicon(), DefinitionGraph("g"), StubScorer())
        phrases = [Phrase("act", "NN"), Phrase("riot", "NN"), Phrase("go", "VB"), Phrase("cause", "VB")]

        assert model.head_words(phrases, "damage") == [Phrase("riot", "NN"), Phrase("cause", "VB")]

    def test_nothing_informative_left(self):
        preprocessor = StubPreprocessor(idf=IDFCalculator.from_documents(["act"] * 10))
        model = GraphNavigationModel(preprocessor, TableLexicon(), DefinitionGraph("g"), StubScorer())

        assert model.head_words([Phrase("act", "NN")], "damage") == []


class TestPathHelpers:
    """Test depth, cleaning and selection of paths."""

    def test_filter_supertypes(self):
        grouped = {
            "act": [("act", "has_supertype"), ("that causes damage", "has_diff_event")],
            "event": [("event", "has_supertype"), ("that causes damage", "has_diff_event")],
        }
        segments = [("that causes damage", "has_diff_event"), ("act", "has_supertype")]

        assert GraphNavigationModel.filter_supertypes(grouped, segments) == ["act", "event"]

    def test_depth_counts_roles_and_target(self):
        path = [
            step("violence", Role.SOURCE), step("act", Role.SUPERTYPE, detail="violence"),
            step("that causes damage", Role.ROLE, pos="", detail="has_diff_event"),
            step("damage", Role.HEAD), step("damage", Role.TARGET, pos=""),
        ]
        assert GraphNavigationModel.path_depth(path) == 2

    def test_depth_counts_supertype_chains(self):
        path = [
            step("poodle", Role.SOURCE), step("dog", Role.SUPERTYPE, detail="poodle"),
            step("animal", Role.SUPERTYPE, detail="dog"), step("animal", Role.TARGET, pos=""),
        ]
        assert GraphNavigationModel.path_depth(path) == 2

    def test_overlong_path_is_cut_off(self):
        path = [step("a", Role.SOURCE)] + [step("x", Role.ROLE, pos="")] * 51
        assert GraphNavigationModel.path_depth(path) == MAX_DEPTH + 1

    def test_clean_consecutive_duplicates(self):
        a, b = step("a", Role.SUPERTYPE), step("b", Role.SUPERTYPE)
        path = [step("s", Role.SOURCE), a, b, b, step("t", Role.TARGET)]

        assert GraphNavigationModel.clean_path(path) == [path[0], a, b, path[-1]]

    def test_clean_circular_reference(self):
        a, b, c = step("a", Role.SUPERTYPE), step("b", Role.SUPERTYPE), step("c", Role.HEAD)
        path = [step("s", Role.SOURCE), a, b, a, c, step("t", Role.TARGET)]

        assert GraphNavigationModel.clean_path(path) == [path[0], a, c, path[-1]]

    def test_clean_keeps_short_paths(self):
        path = [step("s", Role.SOURCE), step("t", Role.TARGET)]
        assert GraphNavigationModel.clean_path(path) == path

    def test_shortest_path_prefers_first_on_ties(self):
        model = GraphNavigationModel(StubPreprocessor(), TableLexicon(), DefinitionGraph("g"), StubScorer())
        first = [step("a", Role.SOURCE), step("b", Role.TARGET)]
        second = [step("c", Role.SOURCE), step("d", Role.TARGET)]
        longer = [step("e", Role.SOURCE), step("f", Role.ROLE), step("g", Role.TARGET)]

        assert model.shortest_path([longer, first, second]) == first


class TestJustification:
    """Test justification templates."""

    def setup_method(self):
        """Setup test fixtures."""
        self.model = GraphNavigationModel(StubPreprocessor(), TableLexicon(), DefinitionGraph("g"), StubScorer())

    def test_noun_kind_of(self):
        path = [step("dog", Role.SOURCE), step("an animal", Role.SUPERTYPE, detail="dog"),
                step("animal", Role.TARGET, pos="")]
        assert self.model.write_justification(path) == "A dog is a kind of animal"

    def test_vowel_article(self):
        path = [step("apple", Role.SOURCE), step("fruit", Role.SUPERTYPE, detail="apple"),
                step("fruit", Role.TARGET, pos="")]
        assert self.model.write_justification(path) == "An apple is a kind of fruit"

    def test_verb_way_of(self):
        path = [step("run", Role.SOURCE, pos="VB"), step("move", Role.SUPERTYPE, pos="VB", detail="run"),
                step("move", Role.TARGET, pos="")]
        assert self.model.write_justification(path) == "To run is a way of to move"

    def test_verb_way_of_gerund(self):
        path = [step("stroll", Role.SOURCE, pos="VB"), step("walking", Role.SUPERTYPE, pos="VB", detail="stroll"),
                step("walking", Role.TARGET, pos="")]
        assert self.model.write_justification(path) == "To stroll is a way of walking"

    def test_supertype_with_role(self):
        path = [
            step("violence", Role.SOURCE), step("act", Role.SUPERTYPE, detail="violence"),
            step("that causes damage", Role.ROLE, pos="", detail="has_diff_event"),
            step("damage", Role.HEAD), step("damage", Role.TARGET, pos=""),
        ]
        assert self.model.write_justification(path) == BUDAPEST_JUSTIFICATION

    def test_noun_synonym(self):
        path = [step("car", Role.SOURCE), step("car", Role.SYNONYM, detail="automobile"),
                step("automobile", Role.TARGET, pos="")]
        assert self.model.write_justification(path) == "Car is synonym of automobile"

    def test_verb_synonym(self):
        path = [step("buy", Role.SOURCE, pos="VB"), step("buy", Role.SYNONYM, pos="VB", detail="purchase"),
                step("purchase", Role.TARGET, pos="")]
        assert self.model.write_justification(path) == "To buy is synonym of to purchase"


class TestFindPaths:
    """Test the path search."""

    def setup_method(self):
        """Setup test fixtures."""
        self.model = GraphNavigationModel(budapest_preprocessor(), TableLexicon(), budapest_graph(), budapest_scorer())

    def test_budapest_path(self):
        paths = self.model.find_paths("violence", "NN", "damage", "NN")

        assert len(paths) == 1
        assert [s.role for s in paths[0]] == [Role.SOURCE, Role.SUPERTYPE, Role.ROLE, Role.HEAD, Role.TARGET]
        assert [s.concept for s in paths[0]] == ["violence", "act", "that causes damage", "damage", "damage"]

    def test_paths_are_valid(self):
        for path in self.model.find_paths("violence", "NN", "damage", "NN"):
            assert path[0].role == Role.SOURCE
            assert path[-1].role == Role.TARGET
            assert self.model.path_depth(path) <= MAX_DEPTH + 1

    def test_unknown_source_dead_ends(self):
        assert self.model.find_paths("council worker", "NN", "damage", "NN") == []

    def test_service_failure_dead_ends(self):
        model = GraphNavigationModel(budapest_preprocessor(), TableLexicon(), budapest_graph(),
                                     StubScorer(error=ErrorKind.SERVICE_UNAVAILABLE))
        assert model.find_paths("violence", "NN", "damage", "NN") == []

    def test_source_synonym_of_target(self):
        graph = DefinitionGraph("g")
        graph.add_synset("car.n.01", NOUN_NAMESPACE, ["car", "automobile"], supertypes=["vehicle"])
        lexicon = TableLexicon()
        lexicon.add_synset("NN", ["car", "automobile"])
        model = GraphNavigationModel(StubPreprocessor(), lexicon, graph, StubScorer())

        paths = model.find_paths("car", "NN", "automobile", "NN")

        assert paths
        assert model.write_justification(model.shortest_path(paths)) == "Car is synonym of automobile"

    def test_follows_best_supertype(self):
        graph = DefinitionGraph("g")
        graph.add_synset("storm.n.01", NOUN_NAMESPACE, ["storm"], supertypes=["weather", "disturbance"], roles=[
            RoleTriple("weather", "has_diff_qual", "bad"),
            RoleTriple("disturbance", "has_diff_event", "that causes damage"),
        ])
        scorer = StubScorer({
            ("damage", "bad"): 0.1, ("damage", "weather"): 0.3, ("damage", "disturbance"): 0.5,
            ("damage", "that causes damage"): 0.9, ("damage", "cause"): 0.4, ("damage", "damage"): 1.0,
        })
        model = GraphNavigationModel(budapest_preprocessor(), TableLexicon(), graph, scorer)

        decision = model.compute_entailment([(Phrase("storm", "NN"), Phrase("damage", "NN"))])

        assert decision.decision == Decision.YES
        assert decision.justification == "A storm is a disturbance that causes damage"


class TestComputeEntailment:
    """Test decisions over candidate pairs."""

    def setup_method(self):
        """Setup test fixtures."""
        self.model = GraphNavigationModel(budapest_preprocessor(), TableLexicon(), budapest_graph(), budapest_scorer())

    def test_candidate_selection(self):
        selector = CandidateSelector(budapest_preprocessor(), budapest_scorer())
        pairs = selector.select(BUDAPEST_TEXT, BUDAPEST_HYP)

        assert pairs[0] == (Phrase("violence", "NN"), Phrase("damage", "NN"))
        assert [source.text for source, _ in pairs] == ["violence", "clean up", "council worker", "tuesday"]

    def test_budapest_entailment(self):
        decision = self.model.decide(BUDAPEST_TEXT, BUDAPEST_HYP)

        assert decision.decision == Decision.YES
        assert decision.model == ModelName.GRAPH_NAVIGATION
        assert decision.justification == BUDAPEST_JUSTIFICATION

    def test_no_candidates_means_no(self):
        decision = self.model.compute_entailment([])

        assert decision.decision == Decision.NO
        assert decision.model == ModelName.GRAPH_NAVIGATION
        assert decision.justification is None

    def test_decision_is_idempotent(self):
        first = self.model.decide(BUDAPEST_TEXT, BUDAPEST_HYP)
        second = self.model.decide(BUDAPEST_TEXT, BUDAPEST_HYP)

        assert first == second
