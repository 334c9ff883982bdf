"""
Tests for constants.
"""

import tomltree
from tomltree.const import APP_NAME, APP_VERSION


def test_constants():
    """Test that constants are defined."""
    assert APP_NAME == "tomltree"
    assert APP_VERSION == "0.1.0"
    assert tomltree.__version__ == APP_VERSION
