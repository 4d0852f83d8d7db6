#!/usr/bin/env python3
"""
Learns the tree edit distance threshold and writes it to the configuration.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from xte.pipeline import EntailmentPipeline
from xte.utils.logger import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Learn the structural similarity threshold")
    parser.add_argument("--config", type=str, required=True,
                       help="Path to the configuration file (the threshold is written back to it)")
    parser.add_argument("--dataset", type=str, required=True,
                       help="Training dataset file, or the Hugging Face dataset name for --format rte")
    parser.add_argument("--format", type=str, choices=["text", "rte"], default="text",
                       help="Dataset format")
    parser.add_argument("--split", type=str, default="train",
                       help="Split to train on (rte format only)")
    parser.add_argument("--log_file", type=str, default=None,
                       help="Optional log file")

    args = parser.parse_args()
    setup_logging(log_path=args.log_file)

    print("Setting up pipeline...")
    pipeline = EntailmentPipeline.from_config(args.config)

    loader_kwargs = {"split": args.split} if args.format == "rte" else {}

    print(f"Training on {args.dataset}...")
    threshold, f1 = pipeline.train(args.dataset, args.format, **loader_kwargs)

    print(f"Best F1: {f1:.2f}, obtained with the threshold {threshold}")
    print(f"Threshold saved to {args.config}")


if __name__ == "__main__":
    main()
