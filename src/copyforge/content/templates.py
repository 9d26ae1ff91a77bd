"""Named parameter presets for common copy jobs."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from copyforge.content.models import GenerationParameters


class Template(BaseModel):
    """A named partial set of generation parameters."""

    name: str
    params: dict[str, Any] = Field(default_factory=dict)


TEMPLATES: list[Template] = [
    Template(
        name="Luxury Product Launch",
        params={
            "content_type": "Product Description",
            "tone": "Luxurious",
            "seo_keywords": "designer, exclusive, premium quality",
            "generate_social_post": True,
        },
    ),
    Template(
        name="Holiday Sale Review",
        params={
            "content_type": "Product Reviews (3)",
            "tone": "Enthusiastic",
            "occasion": "Holiday Season",
            "star_rating": "5 Stars",
            "generate_ab_test": True,
        },
    ),
    Template(
        name="Casual Social Post",
        params={
            "content_type": "Social Media Post",
            "tone": "Casual",
            "generate_ab_test": True,
        },
    ),
    Template(
        name="Professional Ad Copy",
        params={
            "content_type": "Ad Copy",
            "tone": "Professional",
            "seo_keywords": "limited time offer, official store, free shipping",
        },
    ),
]


def get_template(name: str) -> Template:
    """Look up a template by name (case-insensitive).

    Raises:
        KeyError: If no template has that name.
    """
    for template in TEMPLATES:
        if template.name.lower() == name.lower():
            return template
    raise KeyError(name)


def apply_template(template: Template | None, **overrides: Any) -> GenerationParameters:
    """Build parameters from a template plus explicit values.

    Overrides set to ``None`` are ignored so that unset CLI flags do not
    clobber template values.

    Raises:
        pydantic.ValidationError: If required fields are still missing.
    """
    data: dict[str, Any] = dict(template.params) if template else {}
    data.update({key: value for key, value in overrides.items() if value is not None})
    return GenerationParameters.model_validate(data)
