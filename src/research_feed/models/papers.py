"""Paper models returned by the feed and favorites endpoints."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PaperSummary(BaseModel):
    """Structured summary attached to a paper; every section is optional."""

    model_config = ConfigDict(extra="ignore")

    objective: str | None = None
    methods: str | None = None
    results: str | None = None
    conclusion: str | None = None
    key_points: list[str] | None = None


class Paper(BaseModel):
    """A paper as the backend sends it."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str = "Untitled"
    authors: list[str] = Field(default_factory=list)
    journal: str | None = None
    publication_date: date | None = None
    abstract: str | None = None
    full_text_link: str | None = None
    subspecialties: list[str] = Field(default_factory=list)
    research_type: str | None = None
    summary: PaperSummary | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        # Some endpoints send numeric ids; favorites are keyed by string.
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("authors", "subspecialties", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("publication_date", mode="before")
    @classmethod
    def strip_time(cls, v: Any) -> Any:
        if isinstance(v, str) and len(v) > 10:
            return v[:10]
        return v


class FeedPage(BaseModel):
    """One page of the feed or favorites listing."""

    model_config = ConfigDict(extra="ignore")

    papers: list[Paper] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)


class FeedRow(BaseModel):
    """A paper ready for display, with favorite membership resolved."""

    id: str
    title: str
    authors: list[str] = Field(default_factory=list)
    journal: str | None = None
    publication_date: date | None = None
    abstract: str | None = None
    link: str | None = None
    tags: list[str] = Field(default_factory=list)
    summary: PaperSummary | None = None
    is_favorite: bool = False

    @classmethod
    def from_paper(cls, paper: Paper, is_favorite: bool) -> "FeedRow":
        """Build a display row from a backend paper."""
        tags = [tag for tag in [*paper.subspecialties, paper.research_type] if tag]
        objective = paper.summary.objective if paper.summary else None

        return cls(
            id=paper.id,
            title=paper.title,
            authors=list(paper.authors),
            journal=paper.journal,
            publication_date=paper.publication_date,
            abstract=objective or paper.abstract,
            link=paper.full_text_link,
            tags=tags,
            summary=paper.summary,
            is_favorite=is_favorite,
        )
