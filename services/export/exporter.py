"""
Report Exporter
Writes the cluster CSV and one word cloud per group into a folder
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

import structlog

from shared import config
from shared.errors import ExportWriteError
from shared.schemas import ArtifactFailure, ExportBundle, ExportReport, GroupMap

from .destination import DestinationRequest
from .tabular import write_group_csv
from .wordcloud_export import WordCloudRenderer, unique_slugs

logger = structlog.get_logger()


class ReportExporter:
    """
    Exports grouped lines as a CSV table plus word cloud images.

    A failure on one artifact is recorded and the remaining artifacts are
    still written. Pass strict=True to raise once everything has been tried.
    """

    def __init__(
        self,
        renderer: Optional[WordCloudRenderer] = None,
        csv_filename: str = config.CSV_FILENAME,
        image_ext: str = "png",
        max_workers: int = 1,
    ):
        self.renderer = renderer or WordCloudRenderer()
        self.csv_filename = csv_filename
        self.image_ext = image_ext
        self.max_workers = max_workers

    def export(self, groups: GroupMap, destination: Path, strict: bool = False) -> ExportReport:
        """
        Export all artifacts into destination.

        Args:
            groups: Cluster key -> lines
            destination: Existing or creatable folder
            strict: Raise ExportWriteError if any artifact failed

        Returns:
            ExportReport listing written files and failures
        """
        destination = Path(destination)
        report = ExportReport(destination=destination)
        bundle = ExportBundle(groups=groups)

        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportWriteError("destination", destination, str(e)) from e

        logger.info("Exporting groups", destination=str(destination), groups=len(groups))

        csv_path = destination / self.csv_filename
        self._attempt(report, "csv", csv_path, lambda: write_group_csv(groups, csv_path))

        slugs = unique_slugs(bundle.headers())
        jobs = [
            (key, corpus, destination / f"{slugs[key]}.{self.image_ext}")
            for key, corpus in bundle.corpora()
        ]

        if self.max_workers > 1:
            # Images are independent; collect results in key order
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                outcomes = list(pool.map(lambda job: self._try_image(*job), jobs))
        else:
            outcomes = [self._try_image(*job) for job in jobs]

        for key, path, error in outcomes:
            self._record(report, f"wordcloud:{key}", path, error)

        logger.info(
            "Export complete",
            destination=str(destination),
            written=len(report.written),
            failed=len(report.failures),
        )

        if strict and report.failures:
            first = report.failures[0]
            raise ExportWriteError(
                first.artifact,
                first.path,
                f"{len(report.failures)} artifact(s) failed, first: {first.reason}",
            )
        return report

    def _try_image(self, key: str, corpus: str, path: Path):
        try:
            self.renderer.write(corpus, path)
        except (OSError, ValueError) as e:
            return key, path, e
        return key, path, None

    def _attempt(self, report: ExportReport, artifact: str, path: Path, write):
        error = None
        try:
            write()
        except (OSError, ValueError) as e:
            error = e
        self._record(report, artifact, path, error)

    def _record(self, report: ExportReport, artifact: str, path: Path, error):
        if error is None:
            report.written.append(path)
            return
        logger.error("Failed to write artifact", artifact=artifact, path=str(path), error=str(error))
        report.failures.append(ArtifactFailure(artifact=artifact, path=path, reason=str(error)))


def export_when_resolved(
    request: DestinationRequest,
    groups: GroupMap,
    exporter: Optional[ReportExporter] = None,
    timeout: Optional[float] = None,
) -> Optional[ExportReport]:
    """
    Wait for a destination, then export. Nothing is written on cancellation.
    """
    destination = request.wait(timeout=timeout)
    if destination is None:
        logger.info("No folder was selected, export cancelled")
        return None
    return (exporter or ReportExporter()).export(groups, destination)
