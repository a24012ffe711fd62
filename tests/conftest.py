import logging
import os
import sys

import pytest

# Ensure tests can import the top-level modules (lexer, parser, ...) when pytest changes CWD.
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)


@pytest.fixture
def debug_logs(caplog):
    """Capture DEBUG records from every pipeline stage."""
    caplog.set_level(logging.DEBUG)
    return caplog
