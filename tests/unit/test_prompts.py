"""Unit tests for insight prompt rendering"""

from __future__ import annotations

from acclog.insights.prompts import build_compliment_prompt, build_insight_prompt
from acclog.journal.models import Granularity


def test_insight_prompt_lists_highest_impact_first(make_entry):
    entries = [
        make_entry("2026-02-01T09:00:00+00:00", rating=3, text="Fixed a typo"),
        make_entry("2026-02-02T09:00:00+00:00", rating=9, text="Launched search"),
        make_entry("2026-02-03T09:00:00+00:00", rating=6, text="Mentored an intern"),
    ]

    prompt = build_insight_prompt(entries, Granularity.MONTH, "2026-02")

    assert "February 2026" in prompt
    assert "Accomplishments (3 total)" in prompt
    first = prompt.index("1. [Impact: 9/10] Launched search")
    second = prompt.index("2. [Impact: 6/10] Mentored an intern")
    third = prompt.index("3. [Impact: 3/10] Fixed a typo")
    assert first < second < third


def test_insight_prompt_year_label(make_entry):
    prompt = build_insight_prompt(
        [make_entry("2026-02-01T09:00:00+00:00")], Granularity.YEAR, "2026"
    )
    assert "accomplishments for 2026." in prompt


def test_compliment_prompt():
    prompt = build_compliment_prompt("Ran a half marathon", 8)
    assert '"Ran a half marathon"' in prompt
    assert "8/10" in prompt
