"""
Unit tests for serving-root containment.
"""

import logging
import os

import pytest

from fileserver.files.safety import PathSafetyValidator


class TestPathSafetyValidator:
    """Tests for PathSafetyValidator."""

    def test_file_inside_root(self, serving_root):
        validator = PathSafetyValidator(serving_root)
        assert validator.is_safe(f"{serving_root}/data.bin") is True

    def test_missing_file_inside_root(self, serving_root):
        """Containment is about location, not existence."""
        validator = PathSafetyValidator(serving_root)
        assert validator.is_safe(f"{serving_root}/nope/missing.txt") is True

    def test_root_itself_is_inside(self, serving_root):
        validator = PathSafetyValidator(serving_root)
        assert validator.is_safe(str(serving_root)) is True

    def test_dotdot_escape(self, serving_root):
        validator = PathSafetyValidator(serving_root)
        assert validator.is_safe(f"{serving_root}/../../etc/passwd") is False

    def test_dotdot_that_stays_inside(self, serving_root):
        validator = PathSafetyValidator(serving_root)
        assert validator.is_safe(f"{serving_root}/docs/../data.bin") is True

    def test_sibling_with_common_prefix(self, serving_root):
        """/srv/www-evil is not inside /srv/www."""
        validator = PathSafetyValidator(serving_root)
        sibling = serving_root.parent / "www-evil" / "secret.txt"
        assert validator.is_safe(str(sibling)) is False

    def test_dotdot_into_sibling(self, serving_root):
        validator = PathSafetyValidator(serving_root)
        assert validator.is_safe(f"{serving_root}/../www-evil/secret.txt") is False

    def test_double_slash_stays_inside(self, serving_root):
        validator = PathSafetyValidator(serving_root)
        assert validator.is_safe(f"{serving_root}//data.bin") is True

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="needs symlinks")
    def test_symlink_pointing_outside(self, serving_root):
        """Links are followed, so a link out of the root is refused."""
        link = serving_root / "escape"
        link.symlink_to(serving_root.parent / "www-evil")

        validator = PathSafetyValidator(serving_root)
        assert validator.is_safe(f"{serving_root}/escape/secret.txt") is False

    def test_rejection_is_logged(self, serving_root, caplog):
        validator = PathSafetyValidator(serving_root)

        with caplog.at_level(logging.WARNING, logger="fileserver.files.safety"):
            validator.is_safe(f"{serving_root}/../../etc/passwd")

        assert "Path traversal attempt" in caplog.text

    def test_relative_root_is_resolved(self, serving_root, monkeypatch):
        monkeypatch.chdir(serving_root.parent)
        validator = PathSafetyValidator("www")

        assert validator.serving_root == serving_root.resolve()
        assert validator.is_safe("www/data.bin") is True
        assert validator.is_safe("www-evil/secret.txt") is False
