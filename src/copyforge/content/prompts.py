"""Prompt construction for copy generation, regeneration and improvement."""

from __future__ import annotations

from copyforge.content.models import ContentChunk, GenerationParameters

_BASE_INSTRUCTIONS = (
    "\n"
    "You are an expert, world-class e-commerce copywriter for fashion and jewelry"
    " brands. Your writing is sophisticated, engaging, and SEO-optimized.\n"
    "\n"
    "**CRITICAL INSTRUCTION:** Your final output should ONLY be the generated"
    ' content itself, formatted in markdown with "###" for each distinct'
    ' section/title. DO NOT repeat the input parameters like "Product Name:",'
    ' "Tone:", etc., in your response. The product name and keywords should be'
    " woven naturally into the text.\n"
    "\n"
    "---\n"
    "**CONTENT DETAILS**\n"
    "---\n"
)

_TASK_HEADER = "\n---\n**GENERATION TASK**\n---\n"

SEO_DIRECTIVE = (
    "\n**SEO Focus:** Start with a compelling, SEO-optimized introductory sentence"
    " or meta description (under 160 characters) that naturally incorporates the"
    " primary keywords. This sentence should serve as a powerful hook."
)

DEFAULT_TASK = "**Task:** Generate the content as requested."

AD_COPY_TEMPLATE = "### Ad 1: [Headline]\n\n[Body]\n\n### Ad 2: [Headline]\n\n[Body]"

EMAIL_TEMPLATE = (
    "### Subject: [Your Subject Here]\n\n[Email body here]\n\n"
    "### CTA Button: [Your CTA Text Here]"
)

AB_TEST_DIRECTIVE = (
    "\n**Also generate one A/B test variant** for the primary content."
    ' Title it "### A/B Test Variant: [Original Title]".'
)

SOCIAL_POST_DIRECTIVE = (
    '\n**Also generate a related social media post**. Title it "### Social Media Post".'
)

_CLOSING_LINE = "\nNow, generate the content based on these instructions."


def _product_description_task(params: GenerationParameters, seo: str) -> str:
    task = (
        f"**Task:** Write a compelling product description.{seo} Then, detail the"
        " key features and benefits, and end with a call to action. Weave the SEO"
        " keywords throughout the description."
    )
    if params.content_length and params.content_length != "Default":
        task += f" Keep the length {params.content_length}."
    return task


def _reviews_task(params: GenerationParameters, seo: str) -> str:
    task = (
        "**Task:** Generate three distinct and realistic product reviews from"
        " different customer personas (e.g., a gift buyer, a long-time fan, a"
        " first-time customer)."
    )
    if params.star_rating:
        task += (
            f" The reviews should reflect a {params.star_rating} rating. You can"
            " represent the stars visually (e.g., ⭐⭐⭐⭐⭐). Do not add any other"
            " metadata like 'Product Name' to the review body."
        )
    return task


def _social_post_task(params: GenerationParameters, seo: str) -> str:
    return (
        "**Task:** Create an engaging social media post suitable for platforms like"
        f" Instagram or Facebook.{seo} Include relevant, popular hashtags at the end."
    )


def _email_task(params: GenerationParameters, seo: str) -> str:
    return (
        "**Task:** Write copy for an email campaign. It MUST include an"
        " attention-grabbing subject line and a clear call-to-action (CTA) button"
        f" text.{seo} The email body should expand on this hook. Format it like:\n"
        + EMAIL_TEMPLATE
    )


def _blog_intro_task(params: GenerationParameters, seo: str) -> str:
    return (
        "**Task:** Write an introductory paragraph for a blog post about this"
        f" product.{seo} It should hook the reader and briefly state what the post"
        " will cover."
    )


def _ad_copy_task(params: GenerationParameters, seo: str) -> str:
    return (
        "**Task:** Write two short, punchy ad copy variations. Each should have a"
        " clear headline and a concise body text. Format it like:\n" + AD_COPY_TEMPLATE
    )


TASK_BUILDERS = {
    "Product Description": _product_description_task,
    "Product Reviews (3)": _reviews_task,
    "Social Media Post": _social_post_task,
    "Email Campaign": _email_task,
    "Blog Post Intro": _blog_intro_task,
    "Ad Copy": _ad_copy_task,
}


def get_task_directive(params: GenerationParameters) -> str:
    """Return the content-type-specific task line, or the generic fallback."""
    seo = SEO_DIRECTIVE if params.seo_keywords and params.product_name else ""
    builder = TASK_BUILDERS.get(params.content_type)
    if builder is None:
        return DEFAULT_TASK
    return builder(params, seo)


def _render_details(params: GenerationParameters) -> str:
    lines = [
        f"**Product Name/Link:** {params.product_name}",
        f"**Tone of Voice:** {params.tone}",
        f"**Target Audience/Country:** {params.country}",
    ]
    if params.company_name:
        lines.append(f"**Company Name:** {params.company_name}")
    if params.occasion:
        lines.append(f"**Occasion:** {params.occasion}")
    if params.brand_voice:
        lines.append(f"**Brand Voice Guidelines:** {params.brand_voice}")
    if params.seo_keywords:
        lines.append(f"**SEO Keywords to include naturally:** {params.seo_keywords}")
    return "".join(f"{line}\n" for line in lines)


def build_base_prompt(params: GenerationParameters) -> str:
    """Build the instruction body shared by generation and regeneration."""
    prompt = _BASE_INSTRUCTIONS + _render_details(params)
    prompt += _TASK_HEADER
    prompt += f"**Content Type to Generate:** {params.content_type}\n"
    prompt += get_task_directive(params)
    prompt += "\n"

    if params.generate_ab_test:
        prompt += AB_TEST_DIRECTIVE
    if params.generate_social_post and params.content_type != "Social Media Post":
        prompt += SOCIAL_POST_DIRECTIVE
    return prompt


def build_prompt(
    params: GenerationParameters,
    chunk_to_regen: ContentChunk | None = None,
) -> str:
    """Build the full prompt for a generation request.

    Args:
        params: The generation parameters. Required fields are assumed
            to have been validated by the caller.
        chunk_to_regen: If given, build a prompt that asks for replacement
            text for this one section only.

    Returns:
        The prompt text.
    """
    base_prompt = build_base_prompt(params)

    if chunk_to_regen is not None:
        return (
            "\n"
            "You are an expert e-commerce copywriter. Based on the original parameters"
            " provided below, your task is to regenerate ONLY the content for the"
            f' section titled "{chunk_to_regen.title}". \n'
            "\n"
            "**CRITICAL INSTRUCTION:** Provide ONLY the new text for this section. Do"
            ' not include the title or any markdown like "###". Just the raw,'
            " regenerated content.\n"
            "\n"
            "---\n"
            "**ORIGINAL PARAMETERS**\n"
            "---\n"
            f"{base_prompt}\n"
        )

    return base_prompt + _CLOSING_LINE


def build_improvement_prompt(
    original_text: str,
    improvement_action: str,
    tone: str | None = None,
) -> str:
    """Build the copy-editing prompt used to improve existing text."""
    prompt = (
        "\n"
        "You are an expert, world-class copy editor. Your task is to improve the"
        " provided text based on the user's request.\n"
        "\n"
        "**CRITICAL INSTRUCTION:** Your final output should ONLY be the improved"
        " text itself. Do not add any conversational filler, preambles, or"
        ' explanations like "Here is the improved version:".\n'
        "\n"
        "---\n"
        "**IMPROVEMENT TASK**\n"
        "---\n"
        f"**Action:** {improvement_action}\n"
    )
    if improvement_action == "Change Tone" and tone:
        prompt += f"**New Tone:** {tone}\n"

    prompt += (
        "\n"
        "---\n"
        "**ORIGINAL TEXT**\n"
        "---\n"
        f"{original_text}\n"
        "\n"
        "---\n"
        "**IMPROVED TEXT (Your Output):**\n"
        "---\n"
    )
    return prompt
