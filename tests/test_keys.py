"""
Tests for master key management.
"""

import os
import stat
import tempfile
from pathlib import Path

import pytest

from super_env.errors import InvalidKeyError, KeyNotFoundError
from super_env.keys import KEY_LENGTH, generate_key, load_key, save_key


class TestGenerateKey:
    """Tests for generate_key."""

    def test_key_is_32_bytes(self):
        """Test that generated keys are always 32 bytes."""
        for _ in range(10):
            assert len(generate_key()) == KEY_LENGTH == 32

    def test_keys_are_unique(self):
        """Test that two generated keys differ."""
        assert generate_key() != generate_key()


class TestSaveAndLoadKey:
    """Tests for save_key and load_key."""

    @pytest.fixture
    def temp_dir(self):
        """Create a temporary directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    def test_save_then_load_is_identical(self, temp_dir):
        """Test that a saved key loads back byte for byte."""
        key = generate_key()
        key_path = temp_dir / "MASTER_KEY.key"

        save_key(key, key_path)

        assert load_key(key_path) == key
        assert key_path.read_bytes() == key

    def test_save_overwrites_existing_file(self, temp_dir):
        """Test that saving replaces an existing key file."""
        key_path = temp_dir / "MASTER_KEY.key"
        save_key(generate_key(), key_path)

        new_key = generate_key()
        save_key(new_key, key_path)

        assert load_key(key_path) == new_key

    def test_saved_key_is_owner_only(self, temp_dir):
        """Test that the key file is not readable by group or others."""
        if os.name == "nt":
            pytest.skip("Permission tests not applicable on Windows")

        key_path = temp_dir / "MASTER_KEY.key"
        save_key(generate_key(), key_path)

        mode = stat.S_IMODE(key_path.stat().st_mode)
        assert mode == 0o600

    def test_load_missing_key_raises_error(self, temp_dir):
        """Test that loading a missing key raises KeyNotFoundError."""
        missing = temp_dir / "missing.key"

        with pytest.raises(KeyNotFoundError) as exc_info:
            load_key(missing)

        assert "not found" in str(exc_info.value).lower()
        assert exc_info.value.path == str(missing)

    def test_key_not_found_is_a_file_not_found_error(self, temp_dir):
        """Test that callers can catch a missing key as FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_key(temp_dir / "missing.key")

    def test_load_wrong_length_raises_error(self, temp_dir):
        """Test that a key file of the wrong size is rejected."""
        key_path = temp_dir / "short.key"
        key_path.write_bytes(b"too short")

        with pytest.raises(InvalidKeyError) as exc_info:
            load_key(key_path)

        assert "32 bytes" in str(exc_info.value)
