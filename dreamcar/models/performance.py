from pydantic import BaseModel, computed_field


class PerformanceCounters(BaseModel):
    """Affiliate click/impression/conversion tallies.

    Ratios divide by 1 when the denominator is still zero.
    """

    clicks: int = 0
    impressions: int = 0
    conversions: int = 0
    revenue: float = 0.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ctr(self) -> float:
        return self.clicks / (self.impressions or 1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def conversion_rate(self) -> float:
        return self.conversions / (self.clicks or 1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def revenue_per_click(self) -> float:
        return self.revenue / (self.clicks or 1)
