import csv

from services.export.tabular import group_rows, write_group_csv


def test_headers_sorted_and_rows_padded():
    groups = {"1": ["b1"], "0": ["a1", "a2", "a3"], "10": ["c1", "c2"]}

    headers, rows = group_rows(groups)

    assert headers == ["0", "1", "10"]
    assert rows == [
        ["a1", "b1", "c1"],
        ["a2", "", "c2"],
        ["a3", "", ""],
    ]


def test_every_row_has_header_width():
    groups = {str(i): ["x"] * (i + 1) for i in range(5)}

    headers, rows = group_rows(groups)

    assert len(rows) == 5
    assert all(len(row) == len(headers) for row in rows)
    for i, row in enumerate(rows):
        for h, cell in zip(headers, row):
            assert (cell == "") == (i >= len(groups[h]))


def test_empty_groups():
    assert group_rows({}) == ([], [])


def test_written_file_round_trips_special_characters(tmp_path):
    groups = {"0": ['says "hi", twice', "multi\nline"], "1": ["ünïcode"]}
    path = tmp_path / "cluster.csv"

    write_group_csv(groups, path)

    with open(path, encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows == [
        ["0", "1"],
        ['says "hi", twice', "ünïcode"],
        ["multi\nline", ""],
    ]


def test_battery_scenario_table(tmp_path):
    groups = {"0": ["good battery life", "battery issues", "battery drains fast"]}
    path = write_group_csv(groups, tmp_path / "cluster.csv")

    with open(path, encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["0"]
    assert len(rows) == 4
