"""Integration test fixtures: complete drafts."""

import pytest

from scholarly_integrity.cognition import DEFAULT_COGNITIVE_STEPS


@pytest.fixture
def memory_draft() -> list[dict]:
    """One-section draft citing the sleep research source."""
    return [
        {
            "section_id": "intro",
            "name": "Introduction",
            "text": "Memory consolidation occurs during REM sleep [Rodriguez et al., 2023].",
        }
    ]


@pytest.fixture
def uncited_draft() -> list[dict]:
    """One-section draft with a single unsupported claim."""
    return [
        {
            "section_id": "intro",
            "name": "Introduction",
            "text": "This fact is universally accepted",
        }
    ]


@pytest.fixture
def finance_draft() -> list[dict]:
    """Multi-section draft citing the finance sources."""
    return [
        {
            "section_id": "intro",
            "name": "Introduction",
            "text": (
                "## Motivation\n\n"
                "A market in which prices fully reflect available information "
                "is called efficient (Fama 1970). Stock price volatility is far "
                "too high to be explained by dividends [Shiller, 1981]."
            ),
        },
        {
            "section_id": "results",
            "name": "Results",
            "text": "Volatility declined after the reform. Prices recovered quickly.",
        },
    ]


@pytest.fixture
def step_draft() -> list[dict]:
    """Draft whose sections follow the full cognitive sequence."""
    return [
        {
            "section_id": f"s{i}",
            "name": step,
            "text": "The evidence base was examined carefully.",
        }
        for i, step in enumerate(DEFAULT_COGNITIVE_STEPS)
    ]
