"""
Tests for result generators and health scoring.
"""

from collections import Counter

import pytest

from petcheck.core.exceptions import EmptyPaletteError, UnknownParameterError
from petcheck.core.models import ParameterDefinition, Reading, ReferencePad
from petcheck.dipstick.chart import REFERENCE_CHART
from petcheck.dipstick.generator import (
    RandomResultGenerator,
    ResultGenerator,
    ScanResultGenerator,
    describe,
    generate_readings,
)
from petcheck.dipstick.reader import DipstickReader
from petcheck.dipstick.scoring import health_score


class TestDescribe:
    def test_normal(self):
        assert describe(REFERENCE_CHART["glucose"], 0) == "Glucose (Glu): Neg mg/dL (normal)"

    def test_abnormal_without_unit(self):
        assert describe(REFERENCE_CHART["ph"], 3) == "pH: 7.0 (abnormal)"


class TestRandomResultGenerator:
    """Tests for simulated analysis."""

    def test_zero_probability_always_normal(self):
        generator = RandomResultGenerator(abnormal_probability=0.0, seed=1)
        for _ in range(50):
            assert generator.generate("protein", REFERENCE_CHART["protein"]).level == 0

    def test_full_probability_always_abnormal(self):
        generator = RandomResultGenerator(abnormal_probability=1.0, seed=1)
        levels = [generator.generate("blood", REFERENCE_CHART["blood"]).level for _ in range(50)]
        assert all(1 <= level <= 4 for level in levels)

    def test_mild_levels_more_common(self):
        generator = RandomResultGenerator(abnormal_probability=1.0, seed=7)
        counts = Counter(generator.generate("glucose", REFERENCE_CHART["glucose"]).level for _ in range(2000))
        assert counts[1] > counts[2] > counts[4]

    def test_seed_is_reproducible(self):
        first = RandomResultGenerator(abnormal_probability=0.5, seed=42)
        second = RandomResultGenerator(abnormal_probability=0.5, seed=42)
        parameter = REFERENCE_CHART["ph"]
        assert [first.generate("ph", parameter) for _ in range(20)] == [
            second.generate("ph", parameter) for _ in range(20)
        ]

    def test_single_pad_is_always_normal(self):
        parameter = ParameterDefinition(
            name="Only", pads=(ReferencePad(label="Neg", value=0, color=(0, 0, 0)),)
        )
        generator = RandomResultGenerator(abnormal_probability=1.0, seed=0)
        assert generator.generate("only", parameter).level == 0

    def test_empty_palette_raises(self):
        generator = RandomResultGenerator(seed=0)
        with pytest.raises(EmptyPaletteError) as exc_info:
            generator.generate("empty", ParameterDefinition(name="Empty"))
        assert exc_info.value.details == {"parameter_key": "empty"}

    @pytest.mark.parametrize("probability", [-0.1, 1.5])
    def test_invalid_probability(self, probability):
        with pytest.raises(ValueError):
            RandomResultGenerator(abnormal_probability=probability)

    def test_is_result_generator(self):
        assert isinstance(RandomResultGenerator(), ResultGenerator)


class TestScanResultGenerator:
    """Tests for replaying scan matches."""

    def test_replays_scan_levels(self, strip_frame):
        report = DipstickReader(chart=REFERENCE_CHART).read(strip_frame)
        generator = ScanResultGenerator(report.results)

        readings = generate_readings(REFERENCE_CHART, generator)

        assert [r.level for r in readings] == [2, 4, 3, 0]
        assert [r.label for r in readings] == ["250", "300+", "7.0", "Neg"]
        assert readings[3].description == "Blood (Bld): Neg Ery/uL (normal)"

    def test_unscanned_parameter_raises(self, strip_frame):
        report = DipstickReader(chart=REFERENCE_CHART).read(strip_frame)
        generator = ScanResultGenerator(report.results[:1])
        with pytest.raises(UnknownParameterError) as exc_info:
            generator.generate("protein", REFERENCE_CHART["protein"])
        assert exc_info.value.parameter_key == "protein"


class TestGenerateReadings:
    def test_one_reading_per_parameter_in_chart_order(self):
        readings = generate_readings(REFERENCE_CHART, RandomResultGenerator(abnormal_probability=0.0))

        assert [r.parameter_key for r in readings] == ["glucose", "protein", "ph", "blood"]
        assert [r.label for r in readings] == ["Neg", "Neg", "5.0", "Neg"]
        assert all(r.detected_color is None for r in readings)

    def test_values_taken_from_pads(self):
        readings = generate_readings(REFERENCE_CHART, RandomResultGenerator(abnormal_probability=0.0))
        assert readings[2].value == 5.0

    def test_generator_errors_name_the_chart_key(self):
        chart = {"glucose": REFERENCE_CHART["glucose"], "ketones": ParameterDefinition(name="Ketones (Ket)")}
        with pytest.raises(EmptyPaletteError) as exc_info:
            generate_readings(chart, RandomResultGenerator(seed=0))
        assert exc_info.value.parameter_key == "ketones"


def reading(key: str, level: int) -> Reading:
    return Reading(parameter_key=key, label="x", value=0, level=level)


class TestHealthScore:
    """Tests for weighted penalty scoring."""

    def test_all_normal(self):
        readings = [reading(key, 0) for key in REFERENCE_CHART]
        assert health_score(readings) == 100

    def test_empty(self):
        assert health_score([]) == 100

    def test_weighted_penalty(self):
        assert health_score([reading("glucose", 2)]) == 80
        assert health_score([reading("protein", 2)]) == 85
        assert health_score([reading("ph", 2)]) == 90

    def test_unknown_parameter_uses_default_weight(self):
        assert health_score([reading("ketones", 3)]) == 85

    def test_penalties_add_up(self):
        assert health_score([reading("glucose", 1), reading("blood", 1)]) == 80

    def test_clamped_at_zero(self):
        readings = [reading(key, 4) for key in REFERENCE_CHART]
        assert health_score(readings) == 0

    def test_custom_penalty_and_weights(self):
        assert health_score([reading("ph", 1)], penalty_per_level=10, weights={"ph": 3}) == 70
        assert health_score([reading("glucose", 4)], penalty_per_level=0) == 100
