from datetime import date

from pydantic import BaseModel


class ReportRow(BaseModel):
    label: str  # Self, Manager, Peer, Direct Report, OVERALL
    count: int
    average: float | None
    min_score: float | None
    max_score: float | None
    # two decimals, or "N/A" when there is no data
    average_display: str
    min_display: str
    max_display: str
    band: str


class CycleReport(BaseModel):
    cycle_id: str
    cycle_title: str
    start_date: date | None
    end_date: date | None
    rows: list[ReportRow]


class ReportSummary(BaseModel):
    overall_average: float | None
    overall_display: str
    band: str
    rating_scale: list[str]


class ReportProjection(BaseModel):
    subject_user_id: str
    summary: ReportSummary
    cycles: list[CycleReport]
