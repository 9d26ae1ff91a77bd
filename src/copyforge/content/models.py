"""Content domain models: pure Pydantic v2 value types.

A generation request is described by ``GenerationParameters``.  The raw
markdown the model returns is split into ``ContentChunk`` values for
editing, and each finished generation is kept as a ``HistoryRecord``.
"""

from __future__ import annotations

import base64
import mimetypes
from datetime import UTC, datetime
from pathlib import Path
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

CONTENT_TYPES: list[str] = [
    "Product Description",
    "Product Reviews (3)",
    "Social Media Post",
    "Email Campaign",
    "Blog Post Intro",
    "Ad Copy",
]

CONTENT_LENGTHS: list[str] = ["Default", "Short", "Medium", "Long"]

TONES: list[str] = [
    "Professional",
    "Casual",
    "Enthusiastic",
    "Humorous",
    "Luxurious",
    "Minimalist",
    "Adventurous",
]

COUNTRIES: list[str] = [
    "USA",
    "UK",
    "Canada",
    "Australia",
    "Germany",
    "France",
    "Japan",
    "Brazil",
    "India",
    "Global",
]

STAR_RATINGS: list[str] = ["5 Stars", "4 Stars", "3 Stars"]

OCCASIONS: list[str] = [
    "Holiday Season",
    "Anniversary",
    "Birthday",
    "Wedding",
    "Summer Vacation",
    "Back to School",
]

IMPROVEMENT_ACTIONS: list[str] = [
    "Improve SEO",
    "Change Tone",
    "Shorten",
    "Lengthen",
    "Fix Grammar & Spelling",
    "Make more professional",
    "Make more casual",
]


class ProductImage(BaseModel):
    """An image sent alongside the prompt, stored base64-encoded."""

    model_config = ConfigDict(frozen=True)

    data: str
    mime_type: str

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str) -> ProductImage:
        return cls(data=base64.b64encode(raw).decode("ascii"), mime_type=mime_type)

    @classmethod
    def from_path(cls, path: Path) -> ProductImage:
        """Load an image file, guessing the media type from its suffix.

        Raises:
            ValueError: If the file does not look like an image.
        """
        mime_type, _ = mimetypes.guess_type(path.name)
        if not mime_type or not mime_type.startswith("image/"):
            raise ValueError(f"Not an image file: {path}")
        return cls.from_bytes(path.read_bytes(), mime_type)

    @property
    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.data)


class GenerationParameters(BaseModel):
    """Complete, immutable description of one generation request.

    Only ``product_name`` and ``content_type`` are required.  Every other
    field is optional and only shows up in the prompt when it is set.
    """

    model_config = ConfigDict(frozen=True)

    product_name: str = Field(min_length=1)
    content_type: str = Field(min_length=1)
    country: str = COUNTRIES[0]
    tone: str = TONES[0]
    content_length: str | None = None
    star_rating: str | None = None
    seo_keywords: str | None = None
    company_name: str | None = None
    occasion: str | None = None
    brand_voice: str | None = None
    generate_ab_test: bool = False
    generate_social_post: bool = False
    product_image: ProductImage | None = None


class ContentChunk(BaseModel):
    """One titled, independently editable section of generated content."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    body: str


class HistoryRecord(BaseModel):
    """A saved generation outcome."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    params: GenerationParameters
    generated_content: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))
