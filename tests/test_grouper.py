from services.embed_cluster.grouper import group_lines_by_cluster
from shared.schemas import NOISE


def test_groups_by_label_in_input_order(battery_lines):
    groups = group_lines_by_cluster(zip(battery_lines, [0, 0, NOISE, 0]))

    assert groups == {"0": ["good battery life", "battery issues", "battery drains fast"]}


def test_noise_lines_appear_nowhere():
    lines = ["a", "b", "c", "d"]
    groups = group_lines_by_cluster(zip(lines, [NOISE, 1, NOISE, 0]))

    grouped = [line for members in groups.values() for line in members]
    assert "a" not in grouped
    assert "c" not in grouped
    assert sorted(grouped) == ["b", "d"]


def test_no_line_in_two_groups():
    lines = [f"line {i}" for i in range(10)]
    labels = [i % 3 for i in range(10)]

    groups = group_lines_by_cluster(zip(lines, labels))

    grouped = [line for members in groups.values() for line in members]
    assert len(grouped) == len(set(grouped)) == 10


def test_duplicates_are_kept():
    groups = group_lines_by_cluster([("same", 2), ("same", 2)])

    assert groups == {"2": ["same", "same"]}


def test_keys_are_strings_in_cluster_order():
    groups = group_lines_by_cluster([("x", 10), ("y", 2), ("z", 1)])

    assert list(groups) == ["1", "2", "10"]


def test_all_noise_gives_empty_map():
    assert group_lines_by_cluster([("x", NOISE), ("y", NOISE)]) == {}
