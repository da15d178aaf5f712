"""Narrative "key insights" assembled from the statistics engine."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from analytics_tlbx.data.dashboard_columns import DashboardColumn as Col
from analytics_tlbx.data.dashboard_columns import get_pretty_name
from analytics_tlbx.data.records import Record, materialize

from .data_quality import data_quality
from .outlier_detector import detect_outliers
from .statistics import group_by, summarize


@dataclass(frozen=True)
class Insight:
    title: str
    message: str


def _fmt(value: float) -> str:
    return f"{value:,.0f}" if float(value).is_integer() else f"{value:,.2f}"


def generate_insights(
    records: Iterable[Record],
    *,
    value_field: str = Col.REVENUE,
    count_field: str = Col.CUSTOMERS,
    category_field: str = Col.CATEGORY,
    region_field: str = Col.REGION,
    model_label: str | None = None,
    model_r2: float | None = None,
    top_feature: str | None = None,
) -> list[Insight]:
    """Build the dashboard's narrative insights.

    Sections whose inputs are undefined (e.g. no numeric ``value_field``) are
    left out. The model section is added when ``model_label`` and ``model_r2``
    are given.

    Returns:
        Insights in display order: value performance, customer concentration,
        quality alerts, model.
    """
    records = materialize(records)
    insights: list[Insight] = []
    value_name = get_pretty_name(value_field)

    value_stats = summarize(records, value_field)
    top_category = next(iter(group_by(records, category_field, value_field, "sum")), None)
    if not value_stats.is_empty:
        message = f"Average {value_name.lower()} per record is {_fmt(value_stats.mean)}."
        if top_category is not None and top_category.value is not None:
            message += (
                f" The highest performing {get_pretty_name(category_field).lower()} is {top_category.name}"
                f" with {_fmt(top_category.value)} total {value_name.lower()}."
            )
        insights.append(Insight(title=f"{value_name} Performance", message=message))

    count_stats = summarize(records, count_field)
    top_region = next(iter(group_by(records, region_field, count_field, "sum")), None)
    if not count_stats.is_empty:
        count_name = get_pretty_name(count_field).lower()
        message = f"Total {count_name}: {_fmt(count_stats.sum)}."
        if top_region is not None and top_region.value is not None:
            message += (
                f" {top_region.name} {get_pretty_name(region_field).lower()} has the highest {count_name}"
                f" concentration with {_fmt(top_region.value)} {count_name}."
            )
        insights.append(Insight(title=f"{get_pretty_name(count_field)} Insights", message=message))

    quality = data_quality(records)
    n_outliers = len(detect_outliers(records, value_field))
    insights.append(
        Insight(
            title="Quality Alerts",
            message=(
                f"Data quality score: {quality.quality_score:.1f}%. "
                f"{n_outliers} outliers detected in {value_name.lower()} data. "
                f"Missing data: {quality.missing_percentage:.1f}%."
            ),
        ),
    )

    if model_label is not None and model_r2 is not None:
        message = f"{model_label} model achieved R² score of {model_r2:.3f}."
        if top_feature:
            message += f" Most important feature: {top_feature}."
        insights.append(Insight(title="Model Insights", message=message))

    return insights


__all__ = ["Insight", "generate_insights"]
