from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SummaryStats(CamelModel):
    total_transfers: int
    total_size: int
    success_rate: float
    most_active_device: str
    most_active_count: int


class DailyOutcome(CamelModel):
    date: str
    successful: int
    failed: int


class PerformanceStats(CamelModel):
    average_size: float
    largest_transfer: int
    today_count: int


class DashboardOverview(CamelModel):
    summary: SummaryStats
    file_types: dict[str, int]
    transfers_per_day: dict[str, int]
    outcomes_per_day: list[DailyOutcome]
    performance: PerformanceStats
