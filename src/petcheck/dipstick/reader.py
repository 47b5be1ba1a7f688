"""
Dipstick reader combining frame sampling and reference matching.
"""

from typing import Optional

from petcheck.config import ScanSettings, get_settings
from petcheck.core.exceptions import UnknownParameterError
from petcheck.core.logging import get_logger, log_operation
from petcheck.core.models import (
    ReferenceChart,
    SampleConfig,
    SamplePoint,
    ScanReport,
    ScanResult,
)
from petcheck.dipstick.chart import REFERENCE_CHART, load_reference_chart
from petcheck.dipstick.matcher import match_color
from petcheck.dipstick.sampler import Frame, ImageSource, map_display_point, sample_color

logger = get_logger(__name__)

# Pad anchors of the camera guide, top of the strip first
DEFAULT_LAYOUT: tuple[tuple[str, str], ...] = (
    ("glu", "glucose"),
    ("pro", "protein"),
    ("ph", "ph"),
    ("bld", "blood"),
)


def default_sample_config(
    frame_width: int,
    frame_height: int,
    window_size: int = 20,
) -> SampleConfig:
    """
    Sampling layout for the four-pad guide overlay.

    Points are spread evenly along the horizontal centre line of the frame,
    in frame pixel coordinates.
    """
    count = len(DEFAULT_LAYOUT)
    points = [
        SamplePoint(name=name, x=frame_width * (i + 0.5) / count, y=frame_height / 2)
        for i, (name, _) in enumerate(DEFAULT_LAYOUT)
    ]
    keys = [key for _, key in DEFAULT_LAYOUT]
    return SampleConfig.from_lists(points, keys, window_size=window_size)


def run_scan(
    frame: Frame,
    sample_config: SampleConfig,
    reference_chart: ReferenceChart,
) -> list[ScanResult]:
    """
    Sample and classify every configured pad of a frame.

    Results follow sample_config order. The scan is atomic: any failing
    entry raises and no partial results are returned.

    Raises:
        UnknownParameterError: If an entry's key is not in the chart.
        OutOfBoundsError: If a sampling window misses the frame.
        EmptyPaletteError: If a parameter has no reference pads.
    """
    for entry in sample_config.entries:
        if entry.parameter_key not in reference_chart:
            raise UnknownParameterError(entry.parameter_key, entry.point.name)

    results = []
    for entry in sample_config.entries:
        point = entry.point
        if sample_config.display is not None:
            x, y = map_display_point(
                point.x, point.y, sample_config.display, frame.width, frame.height
            )
        else:
            x, y = point.x, point.y

        color = sample_color(frame, x, y, sample_config.window_size)
        palette = reference_chart[entry.parameter_key].pads
        match = match_color(color, palette, parameter_key=entry.parameter_key)

        logger.debug(
            f"{point.name} -> {entry.parameter_key}: rgb={tuple(color)} "
            f"matched {match.pad.label} (d={match.distance:.1f})"
        )
        results.append(
            ScanResult(
                parameter_key=entry.parameter_key,
                detected_color=tuple(color),
                matched_pad=match.pad,
                pad_index=match.index,
                distance=match.distance,
                frame_point=(x, y),
            )
        )

    return results


class DipstickReader:
    """
    Reads urinalysis dipstick pads from a captured camera frame.

    Uses the built-in reference chart unless one is supplied or configured
    via PETCHECK_SCAN_REFERENCE_CHART_PATH.
    """

    def __init__(
        self,
        chart: Optional[ReferenceChart] = None,
        settings: Optional[ScanSettings] = None,
    ):
        """
        Initialize the reader.

        Args:
            chart: Reference chart to match against.
            settings: Scan settings. Uses global settings if not provided.
        """
        self.settings = settings or get_settings().scan
        if chart is not None:
            self.chart = chart
        elif self.settings.reference_chart_path is not None:
            self.chart = load_reference_chart(self.settings.reference_chart_path)
        else:
            self.chart = REFERENCE_CHART

    def read(
        self,
        image: ImageSource,
        sample_config: Optional[SampleConfig] = None,
    ) -> ScanReport:
        """
        Read a dipstick frame.

        Args:
            image: Captured frame as array, PIL Image, path or encoded bytes.
            sample_config: Sampling layout. Defaults to the four-pad guide.

        Returns:
            ScanReport with one result per configured pad.
        """
        frame = Frame.from_image(image)
        if sample_config is None:
            sample_config = default_sample_config(
                frame.width, frame.height, window_size=self.settings.window_size
            )

        with log_operation(logger, "dipstick_scan"):
            results = run_scan(frame, sample_config, self.chart)

        report = ScanReport(image_size=frame.size, results=results)
        logger.info(f"Scan {report.id}: {report.summary()}")
        return report
