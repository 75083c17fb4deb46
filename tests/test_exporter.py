import csv
import threading

import pytest

from services.export.destination import DestinationRequest
from services.export.exporter import ReportExporter, export_when_resolved
from services.export.wordcloud_export import WordCloudRenderer
from shared.errors import ExportWriteError

BATTERY_GROUPS = {"0": ["good battery life", "battery issues", "battery drains fast"]}


class RecordingRenderer:
    """Writes placeholder bytes and fails for corpora containing 'boom'"""

    def __init__(self):
        self.corpora = []

    def write(self, corpus, path):
        self.corpora.append(corpus)
        if "boom" in corpus:
            raise ValueError("cannot render")
        path.write_bytes(b"png")
        return path


def test_exports_csv_and_one_image_per_group(tmp_path):
    renderer = RecordingRenderer()
    groups = {"1": ["screen great"], "0": ["battery bad", "battery ok"]}

    report = ReportExporter(renderer=renderer).export(groups, tmp_path)

    assert report.ok
    assert sorted(p.name for p in report.written) == ["0.png", "1.png", "cluster.csv"]
    assert renderer.corpora == ["battery bad battery ok", "screen great"]


def test_failed_artifact_does_not_stop_others(tmp_path):
    groups = {"0": ["boom goes"], "1": ["fine line"], "2": ["also fine"]}

    report = ReportExporter(renderer=RecordingRenderer()).export(groups, tmp_path)

    assert [f.artifact for f in report.failures] == ["wordcloud:0"]
    assert (tmp_path / "1.png").exists()
    assert (tmp_path / "2.png").exists()
    assert (tmp_path / "cluster.csv").exists()
    assert not (tmp_path / "0.png").exists()


def test_strict_raises_after_trying_everything(tmp_path):
    groups = {"0": ["boom"], "1": ["fine"]}

    with pytest.raises(ExportWriteError):
        ReportExporter(renderer=RecordingRenderer()).export(groups, tmp_path, strict=True)

    assert (tmp_path / "1.png").exists()


def test_colliding_keys_do_not_overwrite(tmp_path):
    groups = {"Battery Life": ["a"], "battery life": ["b"]}

    report = ReportExporter(renderer=RecordingRenderer()).export(groups, tmp_path)

    names = sorted(p.name for p in report.written)
    assert names == ["battery_life.png", "battery_life_2.png", "cluster.csv"]


def test_parallel_export_matches_sequential(tmp_path):
    groups = {str(i): [f"word{i} other{i}"] for i in range(6)}

    report = ReportExporter(renderer=RecordingRenderer(), max_workers=3).export(groups, tmp_path)

    assert report.ok
    assert len(report.written) == 7


def test_creates_missing_destination(tmp_path):
    destination = tmp_path / "nested" / "out"

    report = ReportExporter(renderer=RecordingRenderer()).export({"0": ["x"]}, destination)

    assert report.ok
    assert (destination / "cluster.csv").exists()


def test_real_render_of_battery_scenario(tmp_path):
    report = ReportExporter(renderer=WordCloudRenderer(width=400, height=200)).export(BATTERY_GROUPS, tmp_path)

    assert report.ok
    with open(tmp_path / "cluster.csv", encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows == [["0"], ["good battery life"], ["battery issues"], ["battery drains fast"]]
    assert (tmp_path / "0.png").stat().st_size > 0


def test_cancelled_destination_writes_nothing(tmp_path):
    request = DestinationRequest()
    request.cancel()

    report = export_when_resolved(request, BATTERY_GROUPS, ReportExporter(renderer=RecordingRenderer()))

    assert report is None
    assert list(tmp_path.iterdir()) == []


def test_export_waits_for_destination(tmp_path):
    request = DestinationRequest()
    timer = threading.Timer(0.05, request.resolve, args=(tmp_path,))
    timer.start()

    report = export_when_resolved(request, BATTERY_GROUPS, ReportExporter(renderer=RecordingRenderer()), timeout=5)

    timer.join()
    assert report is not None
    assert report.destination == tmp_path
