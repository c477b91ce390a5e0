"""Data models shared by the proxy and the feed client."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Follow-up questions only send this much of the generated article as context.
CONTEXT_PREFIX_CHARS = 500


def context_prefix(text: Optional[str]) -> str:
    return (text or "")[:CONTEXT_PREFIX_CHARS]


class HeadlineSource(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: Optional[str] = None
    url: Optional[str] = None


class Headline(BaseModel):
    """A single news item as returned by the headlines provider."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = Field(
        None, description="Raw body snippet; usually truncated by the provider."
    )
    url: Optional[str] = None
    image: Optional[str] = None
    published_at: Optional[str] = Field(None, alias="publishedAt")
    source: HeadlineSource = Field(default_factory=HeadlineSource)

    @field_validator("source", mode="before")
    @classmethod
    def _default_source(cls, value):
        return value if value is not None else {}

    @property
    def source_name(self) -> Optional[str]:
        return self.source.name

    @property
    def fallback_text(self) -> Optional[str]:
        """Body text to show when article generation is unavailable."""
        return self.content or self.description or None


class HeadlinesPage(BaseModel):
    """One page of headlines plus the provider's total result count."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    articles: List[Headline] = Field(default_factory=list)
    total_articles: int = Field(0, alias="totalArticles", ge=0)

    @field_validator("articles", mode="before")
    @classmethod
    def _default_articles(cls, value):
        return value if value is not None else []

    @field_validator("total_articles", mode="before")
    @classmethod
    def _default_total(cls, value):
        return value if value is not None else 0


class ScrapeResult(BaseModel):
    """Best-effort extraction from an article page."""

    model_config = ConfigDict(populate_by_name=True)

    full_content: str = Field("", alias="fullContent")
    full_title: Optional[str] = Field(None, alias="fullTitle")
    full_image_url: Optional[str] = Field(None, alias="fullImageUrl")
