"""
Unit tests for lexical resources and the definitions graph.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from xte.rules.knowledge import (
    HAS_SUPERTYPE, NOUN_NAMESPACE, VERB_NAMESPACE, DefinitionGraph, NestedRole, RoleTriple,
)
from xte.rules.lexicon import IDFCalculator, TableLexicon, coarse_pos


class TestDefinitionGraph:
    """Test definitions graph queries."""

    def setup_method(self):
        """Setup test fixtures."""
        self.graph = DefinitionGraph("test")
        self.graph.add_synset("violence.n.01", NOUN_NAMESPACE, ["violence", "force"], supertypes=["act"], roles=[
            RoleTriple("act", "has_diff_event", "that causes damage"),
        ])
        self.graph.add_synset("violence.n.02", NOUN_NAMESPACE, ["violence"], supertypes=["turbulent state"], roles=[
            RoleTriple("turbulent state", "has_diff_qual", NestedRole("public_order", "of", "a society")),
        ])
        self.graph.add_synset("run.v.01", VERB_NAMESPACE, ["run"], supertypes=["travel"])

    def test_synsets_by_label(self):
        assert len(self.graph.synsets_by_label("violence", NOUN_NAMESPACE)) == 2
        assert self.graph.synsets_by_label("violence", VERB_NAMESPACE) == []
        assert self.graph.synsets_by_label("Run", VERB_NAMESPACE)[0].id == "run.v.01"

    def test_supertypes(self):
        synsets = self.graph.synsets_by_label("violence", NOUN_NAMESPACE)

        assert self.graph.supertypes_of(synsets) == ["act", "turbulent_state"]
        assert [s.id for s in self.graph.synsets_by_supertype(synsets, "turbulent state")] == ["violence.n.02"]

    def test_synonyms(self):
        synset = self.graph.synsets_by_label("force", NOUN_NAMESPACE)[0]
        assert self.graph.synonyms_of(synset) == ["violence", "force"]

    def test_roles_by_supertype(self):
        synsets = self.graph.synsets_by_label("violence", NOUN_NAMESPACE)

        assert self.graph.roles_by_supertype(synsets, "act") == [
            ("act", HAS_SUPERTYPE), ("that causes damage", "has_diff_event"),
        ]
        assert self.graph.roles_by_supertype(synsets, "turbulent_state") == [
            ("turbulent state", HAS_SUPERTYPE), ("public order", "has_diff_qual"), ("a society", "of"),
        ]

    def test_roles_grouped_by_supertype(self):
        synsets = self.graph.synsets_by_label("violence", NOUN_NAMESPACE)
        grouped = self.graph.roles_grouped_by_supertype(synsets, self.graph.supertypes_of(synsets))

        assert list(grouped) == ["act", "turbulent_state"]
        assert ("that causes damage", "has_diff_event") in grouped["act"]

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "graph.json"
        self.graph.save(str(path))
        loaded = DefinitionGraph.load(str(path))

        synsets = loaded.synsets_by_label("violence", NOUN_NAMESPACE)
        assert loaded.name == "test"
        assert loaded.roles_by_supertype(synsets, "turbulent_state") == \
            self.graph.roles_by_supertype(self.graph.synsets_by_label("violence", NOUN_NAMESPACE), "turbulent_state")


class TestTableLexicon:
    """Test table lexicon lookups and file loading."""

    def test_from_files(self, tmp_path):
        synonyms = tmp_path / "synonyms.txt"
        synonyms.write_text("noun|car, automobile, motor car\nverb|buy, purchase\nbogus|x, y\n")
        antonyms = tmp_path / "antonyms.txt"
        antonyms.write_text("hot|cold\n")
        hypernyms = tmp_path / "hypernyms.txt"
        hypernyms.write_text("noun|dog, domestic dog|canine, animal\n")

        lexicon = TableLexicon.from_files(str(synonyms), str(antonyms), str(hypernyms))

        assert lexicon.are_synonyms("car", "motor car", "NN")
        assert lexicon.are_synonyms("purchase", "buy", "VBD")
        assert not lexicon.are_synonyms("car", "automobile", "VB")
        assert lexicon.antonyms("cold") == ["hot"]
        assert lexicon.hypernyms("domestic dog", "NNS") == ["canine", "animal"]

    def test_coarse_pos(self):
        assert coarse_pos("NNS") == "NN"
        assert coarse_pos("VBZ") == "VB"
        assert coarse_pos("IN") == "IN"


class TestIDFCalculator:
    """Test inverse document frequency."""

    def test_document_frequency(self):
        idf = IDFCalculator.from_documents([
            "the dog barks",
            "the cat, the mat",
            "a bird",
            "the end",
        ])

        assert idf.idf("the") < idf.idf("dog")
        assert idf.idf("dog") == idf.idf("bird")
        assert idf.idf("unicorn") == IDFCalculator.MAX_IDF

    def test_no_corpus(self):
        assert IDFCalculator.from_file(None).idf("anything") == IDFCalculator.MAX_IDF
