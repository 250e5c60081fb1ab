"""Pydantic schemas for the JSON report."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from vosescout.tasks.scrape_job import ScrapeResult


class ShowingResponse(BaseModel):
    """One VOSE showing in the report."""

    model_config = ConfigDict(from_attributes=True)

    cinema: str
    title: str
    language: str | None = None
    format: str | None = None
    rating: str | None = None
    runtime: str | None = None
    date: str | None = None
    times: list[str]
    poster: str | None = None
    url: str | None = None
    source: str


class ScrapeReport(BaseModel):
    """Top-level report: ``{date, generatedAt, totalFilms, films, errors}``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: str
    generated_at: datetime
    total_films: int
    films: list[ShowingResponse]
    errors: list[str]

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


def build_report(result: ScrapeResult) -> ScrapeReport:
    """Build the report model from a scrape result."""
    return ScrapeReport(
        date=result.date,
        generated_at=result.generated_at,
        total_films=result.total,
        films=[ShowingResponse.model_validate(s) for s in result.showings],
        errors=[str(e) for e in result.errors],
    )
