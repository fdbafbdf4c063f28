"""Frontend test fixtures."""

from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def patch_theme_persistence():
    """Keep UI tests from reading or writing the saved theme."""
    with patch("hntui.get_theme", return_value="textual-dark"), patch("hntui.set_theme"):
        yield
