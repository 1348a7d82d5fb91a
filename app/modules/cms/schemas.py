from typing import Optional
from pydantic import BaseModel, AnyHttpUrl, Field
from datetime import datetime
from uuid import UUID

class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str
    excerpt: Optional[str] = None
    cover_image: Optional[AnyHttpUrl] = None
    is_published: bool = False

class PostUpdate(PostCreate):
    pass

class PostStatusUpdate(BaseModel):
    is_published: bool

class PostSummary(BaseModel):
    id: UUID
    title: str
    slug: str
    excerpt: Optional[str]
    cover_image: Optional[str]
    is_published: bool
    published_at: Optional[datetime]

    class Config:
        from_attributes = True

class PostRead(PostSummary):
    author_id: UUID
    content: str
    is_featured: bool
    view_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class HomepageSettingsBase(BaseModel):
    hero_title_line1: str
    hero_title_line2: str
    hero_subtitle: str
    hero_button_primary_text: str
    hero_button_primary_link: str
    hero_button_secondary_text: str
    hero_button_secondary_link: str
    cta_title: str
    cta_subtitle: str
    cta_button_text: str
    cta_button_link: str
    section_top_rated_title: str
    section_latest_title: str
    section_blog_title: str

class HomepageSettingsUpdate(HomepageSettingsBase):
    pass

class HomepageSettingsRead(HomepageSettingsBase):
    id: UUID
    updated_by: Optional[UUID] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
