"""
Tests for the built-in reference chart and chart loading.
"""

import json

import pytest

from petcheck.dipstick.chart import (
    REFERENCE_CHART,
    chart_from_dict,
    chart_to_dict,
    load_reference_chart,
)


class TestReferenceChart:
    """Tests for the built-in chart."""

    def test_parameters_in_display_order(self):
        assert list(REFERENCE_CHART) == ["glucose", "protein", "ph", "blood"]

    @pytest.mark.parametrize("key", ["glucose", "protein", "ph", "blood"])
    def test_five_pads_each(self, key):
        assert len(REFERENCE_CHART[key].pads) == 5

    def test_first_pad_is_normal(self):
        assert REFERENCE_CHART["glucose"].pads[0].label == "Neg"
        assert REFERENCE_CHART["glucose"].pads[0].color == (100, 200, 220)
        assert REFERENCE_CHART["blood"].pads[0].color == (255, 255, 150)

    def test_units(self):
        assert REFERENCE_CHART["glucose"].unit == "mg/dL"
        assert REFERENCE_CHART["ph"].unit == ""
        assert REFERENCE_CHART["blood"].unit == "Ery/uL"

    def test_chart_is_read_only(self):
        with pytest.raises(TypeError):
            REFERENCE_CHART["ketones"] = REFERENCE_CHART["glucose"]


class TestChartSerialization:
    """Tests for loading charts from plain data."""

    def test_round_trip_preserves_order(self):
        chart = chart_from_dict(chart_to_dict(REFERENCE_CHART))
        assert list(chart) == list(REFERENCE_CHART)
        assert chart["protein"] == REFERENCE_CHART["protein"]

    def test_colors_serialize_as_lists(self):
        data = chart_to_dict(REFERENCE_CHART)
        assert data["ph"]["pads"][0]["color"] == [255, 150, 100]

    def test_minimal_definition(self):
        chart = chart_from_dict(
            {"ketones": {"name": "Ketones", "pads": [{"label": "Neg", "value": 0, "color": [250, 200, 180]}]}}
        )
        assert chart["ketones"].unit == ""
        assert chart["ketones"].pads[0].color == (250, 200, 180)

    def test_rejects_non_object(self):
        with pytest.raises(ValueError, match="JSON object"):
            chart_from_dict([1, 2, 3])

    def test_rejects_bad_color(self):
        with pytest.raises(ValueError, match="Invalid reference chart"):
            chart_from_dict(
                {"ph": {"name": "pH", "pads": [{"label": "5.0", "value": 5, "color": [300, 0, 0]}]}}
            )

    def test_load_from_file(self, tmp_path, two_pad_chart):
        path = tmp_path / "chart.json"
        path.write_text(json.dumps(chart_to_dict(two_pad_chart)), encoding="utf-8")

        chart = load_reference_chart(path)
        assert list(chart) == ["dark", "light"]
        assert chart["light"].unit == "u"

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_reference_chart(tmp_path / "missing.json")
