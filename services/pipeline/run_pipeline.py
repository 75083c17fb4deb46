#!/usr/bin/env python3
"""
FTG Pipeline Runner - Runs full pipeline: read → embed → reduce → cluster → group → export
"""

import json
import logging
from pathlib import Path
from typing import Optional

import click
import structlog

from services.embed_cluster.clusterer import ClusterOracle, assign_clusters
from services.embed_cluster.embedder import LineEmbedder
from services.embed_cluster.grouper import group_lines_by_cluster
from services.embed_cluster.reducer import reduce_with_pca
from services.export.destination import DestinationRequest
from services.export.exporter import ReportExporter, export_when_resolved
from services.ingest.reader import extract_first_column
from shared import config
from shared.errors import EmbeddingError, ThemeGrouperError
from shared.schemas import NOISE, ProcessResult

log = structlog.get_logger()


def process_lines(
    lines: list[str],
    embedder,
    n_components: int = config.N_COMPONENTS,
    min_cluster_size: int = config.MIN_CLUSTER_SIZE,
    min_samples: int = config.MIN_SAMPLES,
    oracle: Optional[ClusterOracle] = None,
) -> ProcessResult:
    """
    Group lines into themes.

    Args:
        lines: Feedback lines, in input order
        embedder: Object with embed_batch(lines) -> (n, d) vectors
        n_components: PCA output dimension
        min_cluster_size: HDBSCAN minimum cluster size
        min_samples: HDBSCAN min samples
        oracle: Cluster oracle override (default: HDBSCAN)

    Raises:
        EmbeddingError: embedding stage failed
        ReductionError: PCA rejected the vectors
    """
    log.info("Step 1: Embedding lines...", count=len(lines))
    embeddings = embedder.embed_batch(lines)
    if len(embeddings) != len(lines):
        raise EmbeddingError(f"expected {len(lines)} vectors, got {len(embeddings)}")

    log.info("Step 2: Reducing dimensions...", n_components=n_components)
    reduced = reduce_with_pca(embeddings, n_components)

    log.info("Step 3: Clustering...")
    labels = assign_clusters(reduced, min_cluster_size, min_samples, oracle=oracle)

    log.info("Step 4: Grouping lines...")
    groups = group_lines_by_cluster(zip(lines, labels))
    noise_count = labels.count(NOISE)
    if noise_count:
        log.warning("Lines left unclustered", count=noise_count, total=len(lines))

    return ProcessResult(
        groups=groups,
        n_lines=len(lines),
        noise_count=noise_count,
        n_components=reduced.shape[1],
    )


def _log_level(name: str) -> int:
    """Numeric level for a logging level name such as INFO"""
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise click.ClickException(f"Unknown log level {name!r} in FTG_LOG_LEVEL")
    return level


def _prompt_destination(request: DestinationRequest):
    """Ask for a folder on the terminal; an empty answer cancels"""
    answer = click.prompt("Export folder (leave empty to cancel)", default="", show_default=False)
    request.resolve(answer.strip() or None)


@click.command()
@click.option("--input", "-i", "input_file", required=True, type=click.Path(exists=True, dir_okay=False),
              help="CSV file; responses are read from the first column")
@click.option("--output-dir", "-o", default=None, help="Export folder (prompted for if omitted)")
@click.option("--n-components", type=click.IntRange(min=1), default=config.N_COMPONENTS, show_default=True, help="PCA components")
@click.option("--min-cluster-size", type=click.IntRange(min=2), default=config.MIN_CLUSTER_SIZE, show_default=True)
@click.option("--min-samples", type=click.IntRange(min=1), default=config.MIN_SAMPLES, show_default=True)
@click.option("--local/--ollama", "use_local", default=config.EMBED_BACKEND == "local",
              help="Embed with sentence-transformers locally or with Ollama")
@click.option("--ollama-url", default=config.OLLAMA_URL, show_default=True)
@click.option("--groups-json", default=None, help="Also write the groups as JSON to this file")
@click.option("--workers", type=click.IntRange(min=1), default=1, show_default=True, help="Parallel word cloud renderers")
def main(input_file: str, output_dir: Optional[str], n_components: int, min_cluster_size: int,
         min_samples: int, use_local: bool, ollama_url: str, groups_json: Optional[str], workers: int):
    """Group feedback lines into themes and export a CSV plus word clouds."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(_log_level(config.LOG_LEVEL))
    )

    try:
        lines = extract_first_column(input_file)
        if not lines:
            raise click.ClickException(f"No responses found in {input_file}")

        embedder = LineEmbedder(ollama_url=ollama_url, use_local=use_local)
        result = process_lines(
            lines,
            embedder,
            n_components=n_components,
            min_cluster_size=min_cluster_size,
            min_samples=min_samples,
        )
    except ThemeGrouperError as e:
        log.error("Pipeline failed", error=str(e))
        raise click.ClickException(str(e))

    log.info("Grouping complete", groups=len(result.groups), noise=result.noise_count)

    if groups_json:
        try:
            with open(groups_json, "w", encoding="utf-8") as f:
                json.dump(result.model_dump(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            log.error("Failed to write groups", output=groups_json, error=str(e))
            raise click.ClickException(f"cannot write {groups_json}: {e}")
        log.info("Wrote groups", output=groups_json)

    request = DestinationRequest()
    if output_dir:
        request.resolve(output_dir)
    else:
        _prompt_destination(request)

    try:
        report = export_when_resolved(request, result.groups, ReportExporter(max_workers=workers))
    except ThemeGrouperError as e:
        log.error("Export failed", error=str(e))
        raise click.ClickException(str(e))

    if report is None:
        click.echo("No folder was selected. Export canceled.")
        return

    for failure in report.failures:
        click.echo(f"  failed: {failure.artifact} ({failure.reason})", err=True)
    click.echo(f"\n✅ Exported {len(report.written)} artifact(s) to {Path(report.destination)}")


if __name__ == "__main__":
    main()
