"""Prompt templates for takeaways and analyst briefs."""

from __future__ import annotations

from ..core.types import Article


NO_DESCRIPTION = "No description available"


def takeaway_prompt(article: Article) -> str:
    return (
        "You are an aviation industry analyst. Given this news headline and description, "
        "write ONE sentence (max 20 words) summarizing the key takeaway for aviation professionals.\n"
        "\n"
        "Focus on: safety implications, operational impacts, business trends, or regulatory significance.\n"
        'Be concise, professional, and insightful. Do not start with "This" or "The".\n'
        "\n"
        f"Headline: {article.headline}\n"
        f"Description: {article.blurb or NO_DESCRIPTION}\n"
        "\n"
        "Takeaway:"
    )


def analyst_brief_prompt(article: Article) -> str:
    return (
        "You are an aviation safety management system (SMS) analyst.\n"
        "Given this article, provide a brief in this exact format:\n"
        "\n"
        "SUMMARY: [2 concise sentences summarizing the article]\n"
        "\n"
        "WHY THIS MATTERS TO SMS: [1 short paragraph on relevance to safety management systems]\n"
        "\n"
        "BLOG ANGLES: [1-2 potential blog post topics for an aviation safety consulting firm]\n"
        "\n"
        "Keep total output under 150 words.\n"
        "\n"
        f"Headline: {article.headline}\n"
        f"Description: {article.blurb or NO_DESCRIPTION}"
    )
