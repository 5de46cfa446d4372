"""Aggregation of field reports into daily statistics and text collections."""

from collections.abc import Iterable

from models.aggregation import (
    AggregatedData,
    Aspect,
    ElevationBand,
    InstabilityLevel,
    TextCollections,
)
from models.field_report import FieldReport
from services.classification_service import (
    classify_aspect,
    classify_elevation,
    classify_instability,
)


def avalanche_count(report: FieldReport) -> int:
    """Number of avalanches a report describes.

    Itemized observations take precedence; older API variants only carry
    ``avalanche_observations_count``.
    """
    return len(report.avalanche_observations) or report.avalanche_observations_count or 0


def aggregate_reports(reports: list[FieldReport]) -> AggregatedData:
    """Fold a day's reports into a single AggregatedData snapshot.

    Avalanches with an unclassifiable elevation or aspect count toward
    ``total_avalanches`` but land in no bucket. Every snowpack observation
    adds exactly one cracking and one collapsing classification; a report
    without snowpack observations adds a single NONE to each instead.
    """
    aggregated = AggregatedData(total_reports=len(reports))

    for report in reports:
        count = avalanche_count(report)
        if count > 0:
            aggregated.reports_with_avalanches += 1
        aggregated.total_avalanches += count

        for avy in report.avalanche_observations:
            elevation = classify_elevation(avy.elevation)
            if elevation is not ElevationBand.UNCLASSIFIED:
                aggregated.avalanches_by_elevation[elevation.value] += 1

            aspect = classify_aspect(avy.aspect)
            if aspect is not Aspect.UNCLASSIFIED:
                aggregated.avalanches_by_aspect[aspect.value] += 1

        for obs in report.snowpack_observations:
            aggregated.cracking_counts[classify_instability(obs.cracking).value] += 1
            aggregated.collapsing_counts[
                classify_instability(obs.collapsing).value
            ] += 1

        if not report.snowpack_observations:
            aggregated.cracking_counts[InstabilityLevel.NONE.value] += 1
            aggregated.collapsing_counts[InstabilityLevel.NONE.value] += 1

    return aggregated


def _append_if_present(texts: list[str], text: str | None) -> None:
    trimmed = text.strip() if text else ""
    if trimmed:
        texts.append(trimmed)


def _append_comments(texts: list[str], observations: Iterable) -> None:
    for obs in observations:
        _append_if_present(texts, obs.comments)


def collect_texts(reports: list[FieldReport]) -> TextCollections:
    """Gather trimmed, non-blank free text from reports for summarization.

    Ordering follows report order, then observation order within a report.
    """
    texts = TextCollections()

    for report in reports:
        # Description is only a fallback for a missing or empty summary
        _append_if_present(
            texts.observations, report.observation_summary or report.description
        )

        if report.snowpack_detail:
            _append_if_present(texts.snowpack, report.snowpack_detail.description)
        _append_comments(texts.snowpack, report.snowpack_observations)

        if report.weather_detail:
            _append_if_present(texts.weather, report.weather_detail.description)
        _append_comments(texts.weather, report.weather_observations)

    return texts
