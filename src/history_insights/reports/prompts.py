"""Prompt text for chunk classification."""

from __future__ import annotations

CATEGORIES = [
    "News",
    "Social Media",
    "Shopping",
    "Entertainment",
    "Education",
    "Technology",
    "Health",
    "Finance",
    "Travel",
    "Sports",
    "General",
]

SYSTEM_PROMPT = (
    "You categorize browser history. Reply with a single JSON object and "
    "nothing else: no preface, no explanation, no code fences."
)

_USER_TEMPLATE = """Analyze this browser history chunk by categorizing each site based on its content into one of the following categories:
{categories}

Use "General" for any site that fits none of them. Provide the total number of visits, a breakdown of visits by category, and the most visited sites.

Return only a JSON object in the following format:
{{
  "totalVisits": number,
  "categories": {{"category1": number, "category2": number, ...}},
  "mostVisitedSites": [{{"url": "string", "category": "string", "visits": number}}, ...],
  "mostFrequentCategory": {{"category": "string", "frequency": number}},
  "mostFrequentSite": {{"url": "string", "category": "string", "visits": number}}
}}

Analyze the following URLs and their titles:
{history}
"""


def build_user_prompt(lines: list[str]) -> str:
    categories = ", ".join(f'"{c}"' for c in CATEGORIES)
    return _USER_TEMPLATE.format(categories=f"[{categories}]", history="\n".join(lines))
