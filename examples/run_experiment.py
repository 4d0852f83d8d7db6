#!/usr/bin/env python3
"""
Example script demonstrating the explainable entailment pipeline on a
small hand-built definitions graph.
"""

import os
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from xte.pipeline import EntailmentPipeline
from xte.rules.knowledge import DefinitionGraph, NOUN_NAMESPACE, RoleTriple, VERB_NAMESPACE
from xte.utils.logger import setup_logging


PAIRS = [
    ("A council worker cleans up after Tuesday's violence in Budapest.",
     "There was damage in Budapest."),
    ("The cat sat on the mat.",
     "The cat did not sit on the mat."),
    ("John bought a new car.",
     "A new car was bought by John."),
]


def build_graph(output_dir: str) -> str:
    """Create a tiny definitions graph and save it."""
    graph = DefinitionGraph("demo")
    graph.add_synset("violence.n.01", NOUN_NAMESPACE, ["violence"],
                     supertypes=["act"],
                     roles=[RoleTriple("act", "has_diff_event", "that causes damage")])
    graph.add_synset("riot.n.01", NOUN_NAMESPACE, ["riot"],
                     supertypes=["violence"],
                     roles=[RoleTriple("violence", "has_diff_qual", "public")])
    graph.add_synset("purchase.v.01", VERB_NAMESPACE, ["buy", "purchase"],
                     supertypes=["get"],
                     roles=[RoleTriple("get", "has_diff_event", "by paying money")])

    path = os.path.join(output_dir, "demo_graph.json")
    graph.save(path)
    return path


def write_config(output_dir: str, graph_path: str) -> str:
    """Write a configuration that uses local sentence embeddings."""
    path = os.path.join(output_dir, "demo.cfg")
    with open(path, 'w') as f:
        f.write("# Demo configuration\n")
        f.write(f"wngraph = {graph_path}\n")
        f.write("similarity = sentence-transformers\n")
        f.write("tedthreshold = 150.0\n")
    return path


def run_experiment(output_dir: str = "reports"):
    """Decide a few pairs and print the justifications."""
    os.makedirs(output_dir, exist_ok=True)

    print("1. Building definitions graph...")
    graph_path = build_graph(output_dir)

    print("2. Writing configuration...")
    config_path = write_config(output_dir, graph_path)

    print("3. Setting up pipeline...")
    pipeline = EntailmentPipeline.from_config(config_path)

    print("4. Deciding pairs...")
    for text, hypothesis in PAIRS:
        print("-" * 50)
        print(f"T: {text}")
        print(f"H: {hypothesis}")
        print(pipeline.decide_one(text, hypothesis, "WN"))


def main():
    setup_logging()
    run_experiment()


if __name__ == "__main__":
    main()
