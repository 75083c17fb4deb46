#!/usr/bin/env python3
"""
FTG Embed/Cluster CLI
Command-line tool for embedding feedback lines and grouping stored embeddings
"""

import argparse
import json
import os

import numpy as np
import structlog

from services.embed_cluster.clusterer import assign_clusters
from services.embed_cluster.embedder import LineEmbedder
from services.embed_cluster.grouper import group_lines_by_cluster
from services.embed_cluster.reducer import reduce_with_pca
from services.ingest.reader import extract_first_column
from shared import config
from shared.errors import ThemeGrouperError

logger = structlog.get_logger()


def embed_from_file(
    input_file: str,
    output_file: str,
    ollama_url: str,
    use_local: bool = True,
) -> int:
    """Embed first-column lines of a CSV file and save them as JSON"""
    print(f"Loading lines from {input_file}...")
    lines = extract_first_column(input_file)
    if not lines:
        print("No lines to process")
        return 0

    print(f"Loaded {len(lines)} lines")
    embedder = LineEmbedder(ollama_url=ollama_url, use_local=use_local)
    vectors = embedder.embed_batch(lines)
    print(f"   Embedding dimension: {embedder.dimension}")

    with open(output_file, "w", encoding="utf-8") as f:
        json.dump({"lines": lines, "embeddings": vectors.tolist()}, f)

    print(f"✅ Embedded {len(lines)} lines to {output_file}")
    return len(lines)


def group_from_file(
    input_file: str,
    output_file: str,
    n_components: int,
    min_cluster_size: int,
    min_samples: int,
) -> dict:
    """Reduce, cluster and group previously embedded lines"""
    with open(input_file, "r", encoding="utf-8") as f:
        data = json.load(f)

    lines = data.get("lines", [])
    embeddings = np.asarray(data.get("embeddings", []), dtype=np.float64)
    if len(lines) != len(embeddings):
        raise ValueError(f"{len(lines)} lines but {len(embeddings)} embeddings in {input_file}")

    reduced = reduce_with_pca(embeddings, n_components)
    labels = assign_clusters(reduced, min_cluster_size, min_samples)
    groups = group_lines_by_cluster(zip(lines, labels))

    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(groups, f, indent=2, ensure_ascii=False)

    print(f"✅ Wrote {len(groups)} groups to {output_file}")
    for key, members in groups.items():
        print(f"  [{key}] {len(members)} lines: {members[0][:60]}")
    return groups


def int_at_least(minimum: int):
    """argparse type accepting integers no smaller than minimum"""
    def parse(value: str) -> int:
        try:
            number = int(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
        if number < minimum:
            raise argparse.ArgumentTypeError(f"must be at least {minimum}, got {number}")
        return number
    return parse


def main(argv=None):
    parser = argparse.ArgumentParser(description="FTG Embed/Cluster CLI")
    parser.add_argument("--ollama-url", default=os.getenv("OLLAMA_URL", config.OLLAMA_URL))

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Embed command
    embed_parser = subparsers.add_parser("embed", help="Embed lines from a CSV file")
    embed_parser.add_argument("input", help="CSV file, first column is read")
    embed_parser.add_argument("-o", "--output", required=True, help="Embeddings JSON file")
    embed_parser.add_argument("--ollama", action="store_true", help="Use Ollama instead of the local model")

    # Group command
    group_parser = subparsers.add_parser("group", help="Group embedded lines")
    group_parser.add_argument("input", help="Embeddings JSON file from the embed command")
    group_parser.add_argument("-o", "--output", required=True, help="Groups JSON file")
    group_parser.add_argument("--n-components", type=int_at_least(1), default=config.N_COMPONENTS)
    group_parser.add_argument("--min-cluster-size", type=int_at_least(2), default=config.MIN_CLUSTER_SIZE)
    group_parser.add_argument("--min-samples", type=int_at_least(1), default=config.MIN_SAMPLES)

    args = parser.parse_args(argv)

    try:
        if args.command == "embed":
            embed_from_file(args.input, args.output, args.ollama_url, use_local=not args.ollama)
        elif args.command == "group":
            group_from_file(
                args.input,
                args.output,
                args.n_components,
                args.min_cluster_size,
                args.min_samples,
            )
    except ThemeGrouperError as e:
        logger.error("Command failed", command=args.command, error=str(e))
        parser.exit(1, f"❌ {e}\n")


if __name__ == "__main__":
    main()
