"""
Dipstick color sampling and reference chart matching.
"""

from petcheck.dipstick.chart import (
    REFERENCE_CHART,
    chart_from_dict,
    chart_to_dict,
    load_reference_chart,
)
from petcheck.dipstick.generator import (
    GeneratedReading,
    RandomResultGenerator,
    ResultGenerator,
    ScanResultGenerator,
    generate_readings,
)
from petcheck.dipstick.matcher import PadMatch, color_distance, find_closest_pad, match_color
from petcheck.dipstick.reader import DipstickReader, default_sample_config, run_scan
from petcheck.dipstick.sampler import Frame, map_display_point, sample_color
from petcheck.dipstick.scoring import health_score

__all__ = [
    "REFERENCE_CHART",
    "chart_from_dict",
    "chart_to_dict",
    "load_reference_chart",
    "GeneratedReading",
    "RandomResultGenerator",
    "ResultGenerator",
    "ScanResultGenerator",
    "generate_readings",
    "PadMatch",
    "color_distance",
    "find_closest_pad",
    "match_color",
    "DipstickReader",
    "default_sample_config",
    "run_scan",
    "Frame",
    "map_display_point",
    "sample_color",
    "health_score",
]
