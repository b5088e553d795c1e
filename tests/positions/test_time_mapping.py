"""Tests for mapping trading periods onto local time labels."""

import pytest

from power_position.positions.time_mapping import map_to_local_time

EXPECTED_LABELS = ["23:00"] + [f"{h:02d}:00" for h in range(0, 23)]


class TestMapToLocalTime:
    """Test suite for map_to_local_time."""

    def test_empty_positions_give_24_zero_entries(self):
        """Empty input still yields the full trading day at zero volume."""
        result = map_to_local_time({})

        assert len(result) == 24
        assert all(volume == 0.0 for volume in result.values())

    def test_generation_order_starts_at_2300(self):
        """Entries are generated from 23:00 and wrap to 22:00."""
        result = map_to_local_time({})

        assert list(result) == EXPECTED_LABELS
        assert list(result)[0] == "23:00"
        assert list(result)[1] == "00:00"
        assert list(result)[-1] == "22:00"

    def test_period_to_label_pairing(self):
        """Period 1 maps to 23:00, period 2 to 00:00, period 24 to 22:00."""
        positions = {i: float(i) for i in range(1, 25)}

        result = map_to_local_time(positions)

        assert result["23:00"] == 1.0
        assert result["00:00"] == 2.0
        assert result["11:00"] == 13.0
        assert result["22:00"] == 24.0

    def test_missing_periods_default_to_zero(self):
        """Only the provided periods carry volume."""
        result = map_to_local_time({1: 12.5, 2: 5.0})

        assert result["23:00"] == 12.5
        assert result["00:00"] == 5.0
        assert sum(result.values()) == 17.5

    def test_out_of_range_indices_are_ignored(self):
        """Indices outside 1..24 do not appear in the series."""
        result = map_to_local_time({0: 99.0, 25: 99.0, 3: 1.0})

        assert len(result) == 24
        assert result["01:00"] == 1.0
        assert 99.0 not in result.values()

    def test_labels_are_zero_padded(self):
        """Every label has the HH:MM form."""
        for label in map_to_local_time({}):
            assert len(label) == 5
            assert label[2] == ":"
            assert label.endswith(":00")

    def test_none_positions_rejected(self):
        """None is an invalid argument."""
        with pytest.raises(ValueError):
            map_to_local_time(None)
