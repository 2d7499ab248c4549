import shutil
from pathlib import Path

import pytest

from sourcelens.config.settings import Settings


@pytest.fixture()
def poppler() -> None:
    if shutil.which("pdftotext") is None or shutil.which("pdftoppm") is None:
        pytest.skip("poppler-utils (pdftotext, pdftoppm) not installed")


@pytest.fixture()
def example_settings(workspace_root: Path) -> Settings:
    return Settings(
        use_example_llm=True,
        workspace_root=str(workspace_root),
        direct_extractors="pdftotext,pdfplumber",
    )
