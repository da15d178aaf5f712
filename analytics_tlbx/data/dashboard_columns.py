"""Column definitions for the dashboard sales records."""

import re

from .base_columns import BaseColumn, ColumnMetadata, FieldKind


class DashboardColumn(BaseColumn):
    """Fields of one dashboard observation (one sale/day per category and region).

    Columns:
    - ``revenue``: float - Revenue of the observation in USD (target variable)
    - ``customers``: int - Number of customers served
    - ``satisfaction``: float - Average customer satisfaction score
    - ``marketShare``: float - Market share in percent
    - ``category``: str - Product category
    - ``region``: str - Sales region
    - ``date``: datetime - Observation date
    """

    # Target variable
    TARGET = "revenue"
    """Revenue in USD (target variable)."""
    REVENUE = TARGET

    # Numeric predictors
    CUSTOMERS = "customers"
    """Number of customers served."""
    SATISFACTION = "satisfaction"
    """Average customer satisfaction score."""
    MARKET_SHARE = "marketShare"
    """Market share in percent."""

    # Partition keys
    CATEGORY = "category"
    """Product category."""
    REGION = "region"
    """Sales region."""

    DATE = "date"
    """Observation date."""

    def metadata(self) -> ColumnMetadata:
        return _COLUMN_METADATA_DASHBOARD[self]


_COLUMN_METADATA_DASHBOARD: dict[DashboardColumn, ColumnMetadata] = {
    DashboardColumn.REVENUE: ColumnMetadata(
        name="revenue",
        kind=FieldKind.NUMERIC,
        pretty_name="Revenue",
        unit="USD",
    ),
    DashboardColumn.CUSTOMERS: ColumnMetadata(
        name="customers",
        kind=FieldKind.NUMERIC,
        pretty_name="Customers",
    ),
    DashboardColumn.SATISFACTION: ColumnMetadata(
        name="satisfaction",
        kind=FieldKind.NUMERIC,
        pretty_name="Satisfaction",
    ),
    DashboardColumn.MARKET_SHARE: ColumnMetadata(
        name="marketShare",
        kind=FieldKind.NUMERIC,
        pretty_name="Market Share",
        unit="%",
    ),
    DashboardColumn.CATEGORY: ColumnMetadata(
        name="category",
        kind=FieldKind.CATEGORICAL,
        pretty_name="Category",
    ),
    DashboardColumn.REGION: ColumnMetadata(
        name="region",
        kind=FieldKind.CATEGORICAL,
        pretty_name="Region",
    ),
    DashboardColumn.DATE: ColumnMetadata(
        name="date",
        kind=FieldKind.TEMPORAL,
        pretty_name="Date",
    ),
}


def get_pretty_name(column_name: str, columns: type[BaseColumn] = DashboardColumn) -> str:
    """Convert a field name to a display name.

    Known fields use their metadata; others fall back to splitting camelCase and
    snake_case and title-casing the words.
    """
    try:
        col_enum = columns(column_name)
    except ValueError:
        words = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", column_name).replace("_", " ")
        return words.title()
    else:
        return str(col_enum.pretty_name)
