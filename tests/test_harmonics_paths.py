"""
Tests for core/harmonics/paths.py — flattening into path-addressed records.

Validates:
    - base record first (depth -1, empty path, label "Base")
    - record count 1 + b + b^2 + ... + b^(D+1)
    - len(path) == depth + 1 and every prefix names an ancestor
    - depth-first, left-to-right order within a depth
    - labels "H^d[i,j,...]"
    - deterministic; degenerate values skipped
    - FrequencyRecord validation
"""

import pytest

from core.harmonics.paths import (
    BASE_LABEL,
    flatten_structure,
    format_label,
    records_at_depth,
)
from core.harmonics.structure import build_structure, expected_record_count
from core.harmonics.types import FrequencyRecord


class TestFormatLabel:
    def test_base(self):
        assert format_label(-1, ()) == "Base"

    def test_depth_zero(self):
        assert format_label(0, (4,)) == "H^0[4]"

    def test_deep_path(self):
        assert format_label(2, (0, 3, 1)) == "H^2[0,3,1]"


class TestFlattenStructure:
    def test_base_record_first(self, harmonic_records):
        base = harmonic_records[0]
        assert base.is_base
        assert base.frequency == 440.0
        assert base.path == ()
        assert base.label == BASE_LABEL

    @pytest.mark.parametrize(
        "mode,breadth,depth",
        [("harmonic", 3, 2), ("harmonic", 12, 0), ("just", 5, 1), ("equal", 4, 3)],
    )
    def test_record_count(self, mode, breadth, depth):
        records = flatten_structure(build_structure(440.0, depth, breadth, mode))
        assert len(records) == expected_record_count(breadth, depth)

    def test_path_length_matches_depth(self, harmonic_records):
        for r in harmonic_records:
            assert len(r.path) == r.depth + 1

    def test_depths_are_grouped_in_order(self, harmonic_records):
        depths = [r.depth for r in harmonic_records]
        assert depths == sorted(depths)

    def test_depth_first_left_to_right(self, harmonic_records):
        depth_one = records_at_depth(harmonic_records, 1)
        assert [r.path for r in depth_one] == [(i, j) for i in range(3) for j in range(3)]

    def test_path_prefix_addresses_parent(self, harmonic_records):
        by_path = {r.path: r for r in harmonic_records if not r.is_base}
        for r in harmonic_records:
            if r.depth >= 1:
                parent = by_path[r.path[:-1]]
                # harmonic mode: child = parent * (index + 1)
                assert r.frequency == pytest.approx(parent.frequency * (r.path[-1] + 1))

    def test_labels(self, harmonic_records):
        labels = [r.label for r in harmonic_records]
        assert labels[:5] == ["Base", "H^0[0]", "H^0[1]", "H^0[2]", "H^1[0,0]"]
        assert labels[-1] == "H^2[2,2,2]"

    def test_second_group_values(self, harmonic_records):
        h1 = records_at_depth(harmonic_records, 1)
        assert [r.frequency for r in h1[3:6]] == [880.0, 1760.0, 2640.0]

    def test_deterministic(self):
        s = build_structure(261.63, 2, 7, "just")
        assert flatten_structure(s) == flatten_structure(s)

    def test_degenerate_base_yields_no_records(self):
        assert flatten_structure(build_structure(float("nan"), 2, 3, "harmonic")) == ()

    def test_degenerate_sibling_skipped_without_renumbering(self):
        s = build_structure(440.0, 1, 3, "custom", [1.0, -1.0, 2.0])
        assert [r.label for r in flatten_structure(s)] == [
            "Base",
            "H^0[0]",
            "H^0[2]",
            "H^1[0,0]",
            "H^1[0,2]",
            "H^1[2,0]",
            "H^1[2,2]",
        ]


class TestFrequencyRecordValidation:
    def test_base_with_path_rejected(self):
        with pytest.raises(ValueError, match="empty path"):
            FrequencyRecord(frequency=440.0, depth=-1, path=(0,), label="Base")

    def test_path_length_mismatch_rejected(self):
        with pytest.raises(ValueError, match="depth \\+ 1"):
            FrequencyRecord(frequency=440.0, depth=1, path=(0,), label="H^1[0]")

    def test_depth_below_minus_one_rejected(self):
        with pytest.raises(ValueError, match=">= -1"):
            FrequencyRecord(frequency=440.0, depth=-2, path=(), label="?")
