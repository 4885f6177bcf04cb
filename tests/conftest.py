"""Test configuration and fixtures."""

import pytest

from scholarly_integrity.registry.registry import SourceRegistry
from scholarly_integrity.state.models import SourceRecord


# Configure pytest-asyncio
pytest_plugins = ['pytest_asyncio']


@pytest.fixture(scope="session")
def anyio_backend():
    """Use asyncio as the async backend."""
    return "asyncio"


# =============================================================================
# Source Fixtures
# =============================================================================


@pytest.fixture
def memory_source() -> SourceRecord:
    """Sleep research source cited as [Rodriguez et al., 2023]."""
    return SourceRecord(
        id="rodriguez2023",
        title="Sleep-dependent memory consolidation",
        authors=["Rodriguez, Ana", "Chen, Li", "Okafor, Ben"],
        excerpt_text="Memory consolidation during sleep strengthens newly encoded traces.",
        publication_year=2023,
        venue="Journal of Sleep Research",
        discipline="neuroscience",
    )


@pytest.fixture
def fama_source() -> SourceRecord:
    """Efficient markets source cited as (Fama 1970)."""
    return SourceRecord(
        id="fama1970",
        title="Efficient capital markets: A review of theory and empirical work",
        authors=["Fama, Eugene F."],
        excerpt_text=(
            "A market in which prices always fully reflect available "
            "information is called efficient."
        ),
        publication_year=1970,
        venue="Journal of Finance",
        discipline="finance",
    )


@pytest.fixture
def shiller_source() -> SourceRecord:
    """Excess volatility source cited as (Shiller 1981)."""
    return SourceRecord(
        id="shiller1981",
        title="Do stock prices move too much to be justified by subsequent changes in dividends?",
        authors=["Shiller, Robert J."],
        excerpt_text=(
            "Stock price volatility is far too high to be attributed to new "
            "information about future real dividends."
        ),
        publication_year=1981,
        venue="American Economic Review",
        discipline="finance",
    )


@pytest.fixture
def registry(memory_source, fama_source, shiller_source) -> SourceRegistry:
    """Registry loaded with the three sample sources."""
    return SourceRegistry([memory_source, fama_source, shiller_source])


@pytest.fixture
def empty_registry() -> SourceRegistry:
    """Registry with no sources."""
    return SourceRegistry()
