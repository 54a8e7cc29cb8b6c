"""Unit tests for the privilege check."""

from unittest.mock import patch

import pytest
from syscleaner.core.privilege import PrivilegeError, require_root


class TestRequireRoot:
    """Tests for require_root function."""

    @patch("syscleaner.core.privilege.os.geteuid", return_value=0)
    def test_root_passes(self, _mock: object) -> None:
        """Effective uid 0 passes."""
        require_root()

    @patch("syscleaner.core.privilege.os.geteuid", return_value=1000)
    def test_non_root_raises(self, _mock: object) -> None:
        """Any other uid raises PrivilegeError."""
        with pytest.raises(PrivilegeError, match="Root privileges required"):
            require_root()
