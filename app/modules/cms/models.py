import uuid
from sqlalchemy import Column, String, Boolean, Integer, DateTime, func, ForeignKey, Text, Uuid
from app.core.db import Base

# Single-row table
HOMEPAGE_SETTINGS_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")

class Post(Base):
    __tablename__ = "posts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    author_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False)

    title = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)
    excerpt = Column(Text, nullable=True)
    content = Column(Text, nullable=False) # Markdown, rendered by the frontend
    cover_image = Column(String, nullable=True)

    is_published = Column(Boolean, default=False, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)
    view_count = Column(Integer, default=0, nullable=False)

    published_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

class HomepageSettings(Base):
    __tablename__ = "homepage_settings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=lambda: HOMEPAGE_SETTINGS_ID)

    hero_title_line1 = Column(String, nullable=False)
    hero_title_line2 = Column(String, nullable=False)
    hero_subtitle = Column(Text, nullable=False)
    hero_button_primary_text = Column(String, nullable=False)
    hero_button_primary_link = Column(String, nullable=False)
    hero_button_secondary_text = Column(String, nullable=False)
    hero_button_secondary_link = Column(String, nullable=False)
    cta_title = Column(String, nullable=False)
    cta_subtitle = Column(Text, nullable=False)
    cta_button_text = Column(String, nullable=False)
    cta_button_link = Column(String, nullable=False)
    section_top_rated_title = Column(String, nullable=False)
    section_latest_title = Column(String, nullable=False)
    section_blog_title = Column(String, nullable=False)

    updated_by = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
