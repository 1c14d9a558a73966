"""Prompt builder for plain-language notice summaries."""

from __future__ import annotations

from typing import List

SYSTEM_PROMPT = (
    "You summarize government notifications for members of the public. "
    "Write plainly and avoid jargon."
)

SUMMARY_INSTRUCTIONS = (
    "Summary should be:\n"
    "- Easy to understand for general public\n"
    "- Highlight key actions or deadlines\n"
    "- Mention who is affected\n"
    "- Keep it concise and actionable"
)


def build_summary_prompt(title: str, content: str) -> str:
    return (
        "Please provide a 2-3 sentence plain-language summary of this government notification:\n\n"
        f"Title: {title.strip()}\n"
        f"Content: {content.strip()}\n\n"
        f"{SUMMARY_INSTRUCTIONS}"
    )


def build_summary_messages(title: str, content: str) -> List[dict]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_summary_prompt(title, content)},
    ]
