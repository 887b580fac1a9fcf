"""Public profile summaries, the read-side enrichment for relationship listings"""

import datetime

from sqlmodel import SQLModel, Field, Column

from .common import CamelModel, utcnow
from .types import UtcAwareDateTime


class Profile(SQLModel, CamelModel, table=True):
    __tablename__ = "profiles"

    id: str = Field(primary_key=True)
    full_name: str | None = Field(default=None, index=True)
    avatar_url: str | None = None
    bio: str | None = None
    institution: str | None = Field(default=None, index=True)
    course: str | None = None

    created_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UtcAwareDateTime(), nullable=False),
    )

    def summary(self) -> "ProfileSummary":
        return ProfileSummary(
            id=self.id, full_name=self.full_name, avatar_url=self.avatar_url
        )

    def __str__(self):
        return self.full_name or self.id


class ProfileSummary(CamelModel):
    id: str
    full_name: str | None = None
    avatar_url: str | None = None
