"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from pagetran.core.models import Page
from pagetran.core.pipeline import PipelineConfig
from tests.fixtures.backends import FakeTranslator, RecordingSleep


@pytest.fixture
def fake_translator():
    """Always-succeeding translator."""
    return FakeTranslator()


@pytest.fixture
def no_sleep():
    """Sleep replacement so retry tests run instantly."""
    return RecordingSleep()


@pytest.fixture
def sample_pages():
    """Three small source pages."""
    return [
        Page(index=1, source_text="First page."),
        Page(index=2, source_text="Second page with more words."),
        Page(index=3, source_text="Third page."),
    ]


@pytest.fixture
def mock_config(tmp_path):
    """Pipeline configuration that needs no network or font download."""
    return PipelineConfig(
        source_lang="en",
        target_lang="fr",
        backend="local",
        download_fonts=False,
        retry_base_delay=0.001,
        retry_max_jitter=0.0,
        upload_dir=tmp_path / "uploads"
    )


@pytest.fixture
def pdf_generator():
    """Sample PDF generator."""
    from tests.fixtures.pdf_generator import SamplePDFGenerator
    return SamplePDFGenerator()
