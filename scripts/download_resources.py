#!/usr/bin/env python3
"""
Script to download the linguistic resources and the RTE benchmark.
"""

import argparse
import os

import nltk
import spacy.cli
from datasets import load_dataset


def download_wordnet(download_dir: str = None):
    """Download the WordNet corpus used for normalization and the lexicon."""
    print("Downloading WordNet...")
    for package in ("wordnet", "omw-1.4"):
        nltk.download(package, download_dir=download_dir, quiet=True)
    print("Downloaded WordNet successfully!")


def download_spacy_model(model_name: str):
    """Download the spaCy pipeline used for tagging and parsing."""
    print(f"Downloading spaCy model {model_name}...")
    spacy.cli.download(model_name)


def download_rte(output_dir: str = "data/benchmarks"):
    """Download GLUE RTE and store it in the T/H/A text format."""
    os.makedirs(output_dir, exist_ok=True)

    print("Downloading GLUE RTE...")
    dataset = load_dataset("nyu-mll/glue", "rte")
    labels = {0: "yes", 1: "no"}

    for split_name, split_data in dataset.items():
        path = os.path.join(output_dir, f"rte_{split_name}.txt")
        with open(path, 'w', encoding="utf-8") as f:
            for item in split_data:
                pair_id = item["idx"]
                f.write(f"{pair_id} T: {item['sentence1']}\n")
                f.write(f"{pair_id} H: {item['sentence2']}\n")
                if item["label"] in labels:
                    f.write(f"{pair_id} A: {labels[item['label']]}\n")
                f.write("\n")
        print(f"  {split_name}: {len(split_data)} examples -> {path}")


def main():
    parser = argparse.ArgumentParser(description="Download resources")
    parser.add_argument("--wordnet_dir", type=str, default=None,
                       help="Directory for the NLTK data (defaults to the NLTK search path)")
    parser.add_argument("--spacy_model", type=str, default="en_core_web_sm",
                       help="spaCy model to download")
    parser.add_argument("--rte", action="store_true",
                       help="Also download the GLUE RTE benchmark")
    parser.add_argument("--output_dir", type=str, default="data/benchmarks",
                       help="Output directory for the benchmark")

    args = parser.parse_args()

    download_wordnet(args.wordnet_dir)
    download_spacy_model(args.spacy_model)

    if args.rte:
        download_rte(args.output_dir)


if __name__ == "__main__":
    main()
