"""
Domain models for the AI News backend.
These are the core business entities, independent of database/API representation.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# =============================================================================
# Enums
# =============================================================================

class Category(str, Enum):
    """News categories shared by all feed sources and user preferences."""
    BUSINESS = "business"
    ENTERTAINMENT = "entertainment"
    GENERAL = "general"
    HEALTH = "health"
    SCIENCE = "science"
    SPORTS = "sports"
    TECHNOLOGY = "technology"


ALL_CATEGORIES: list[Category] = list(Category)

# Summary strings with a fixed meaning
SUMMARY_PENDING = "AI summary will be available after processing."
SUMMARY_UNAVAILABLE = "AI summary not available for this article."


# =============================================================================
# Articles
# =============================================================================

class Article(BaseModel):
    """Canonical news article, the unit every feed source is mapped into."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    url: str = ""  # Identity key; empty means the provider gave none
    image_url: Optional[str] = Field(default=None, alias="urlToImage")
    source: str = "Unknown"
    category: Category
    published_at: datetime = Field(default_factory=utcnow, alias="publishedAt")
    ai_summary: Optional[str] = Field(default=None, alias="aiSummary")
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")

    def summarizable_text(self) -> str:
        """First non-empty of content, description, title."""
        for text in (self.content, self.description, self.title):
            if text and text.strip():
                return text
        return ""


def placeholder_article() -> Article:
    """Synthetic article returned when no real news is available."""
    return Article(
        title="Welcome to AI News Reader!",
        description=(
            "This is a sample news article. "
            "The system is fetching real news articles for you."
        ),
        url="https://example.com",
        source="AI News System",
        category=Category.GENERAL,
        ai_summary="This is a placeholder article while the system loads real news content.",
    )


class RefreshResponse(BaseModel):
    """Result of a manual pipeline run."""
    message: str
    count: int
    articles: list[Article]


# =============================================================================
# Users
# =============================================================================

class UserProfile(BaseModel):
    """Public view of a user account."""
    id: int
    email: str
    categories: list[Category] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1)
    categories: Optional[list[Category]] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserProfile


class CategoriesUpdate(BaseModel):
    categories: list[Category]


class CategoriesResponse(BaseModel):
    message: str
    categories: list[Category]
