import os
import sys

import pytest

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, ROOT_DIR)

from attachment_extractor.diagnostics import CollectingDiagnosticSink  # noqa: E402
from samples import make_pdf  # noqa: E402


@pytest.fixture
def sink():
    return CollectingDiagnosticSink()


@pytest.fixture
def pdf_bytes():
    return make_pdf()
