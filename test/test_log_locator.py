#!/usr/bin/env python3
"""Tests for locating the current validator log file."""

import functools

import pytest

from hl_validator_monitor.log_locator import (
    LogLocatorError,
    NoDirectoriesFound,
    NoFilesFound,
    compare_log_file_names,
    find_latest_dir,
    find_latest_file,
    find_latest_log_file,
)


def make_files(directory, names):
    """Create empty files under a directory."""
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / name).write_text("")


class TestFindLatestDir:
    """Tests for date directory selection."""

    def test_lexicographic_maximum(self, tmp_path):
        """Test that the greatest directory name wins."""
        for name in ["2024-01-01", "2024-01-02", "2023-12-31"]:
            (tmp_path / name).mkdir()

        assert find_latest_dir(tmp_path) == tmp_path / "2024-01-02"

    def test_not_numeric(self, tmp_path):
        """Test that names are compared as strings, not numbers."""
        for name in ["9", "10"]:
            (tmp_path / name).mkdir()

        assert find_latest_dir(tmp_path).name == "9"

    def test_files_are_ignored(self, tmp_path):
        """Test that plain files in the base path are not candidates."""
        (tmp_path / "20240101").mkdir()
        (tmp_path / "zzz.log").write_text("")

        assert find_latest_dir(tmp_path).name == "20240101"

    def test_no_directories(self, tmp_path):
        """Test that an empty base path raises NoDirectoriesFound."""
        (tmp_path / "stray-file").write_text("")

        with pytest.raises(NoDirectoriesFound, match="no directories found"):
            find_latest_dir(tmp_path)

    def test_missing_base_path(self, tmp_path):
        """Test that a missing base path surfaces the OS error."""
        with pytest.raises(FileNotFoundError):
            find_latest_dir(tmp_path / "missing")


class TestFindLatestFile:
    """Tests for log file selection."""

    def test_numeric_order(self, tmp_path):
        """Test that integer names compare numerically."""
        make_files(tmp_path, ["10", "2", "9"])
        assert find_latest_file(tmp_path).name == "10"

    def test_mixed_names_use_single_comparator(self, tmp_path):
        """Test that a mixed pair falls back to string comparison."""
        make_files(tmp_path, ["10", "abc"])
        # "10" < "abc" as strings, so the non-numeric name sorts last
        assert find_latest_file(tmp_path).name == "abc"

    def test_directories_are_ignored(self, tmp_path):
        """Test that subdirectories are not candidates."""
        make_files(tmp_path, ["3"])
        (tmp_path / "99").mkdir()

        assert find_latest_file(tmp_path).name == "3"

    def test_no_files(self, tmp_path):
        """Test that an empty directory raises NoFilesFound."""
        (tmp_path / "sub").mkdir()

        with pytest.raises(NoFilesFound, match="no files found"):
            find_latest_file(tmp_path)


class TestCompareLogFileNames:
    """Tests for the numeric-if-possible comparator."""

    def test_numeric(self):
        """Test numeric comparison of integer names."""
        assert compare_log_file_names("2", "10") < 0
        assert compare_log_file_names("10", "2") > 0
        assert compare_log_file_names("007", "7") == 0

    def test_signed_integers(self):
        """Test that signed names still parse as integers."""
        assert compare_log_file_names("-1", "0") < 0
        assert compare_log_file_names("+5", "4") > 0

    def test_lexicographic_fallback(self):
        """Test string comparison when either name is not an integer."""
        assert compare_log_file_names("10", "abc") < 0
        assert compare_log_file_names("9", "10.log") > 0
        assert compare_log_file_names("abc", "abd") < 0

    def test_partial_integers_are_strings(self):
        """Test that whitespace or underscores do not count as integers."""
        assert compare_log_file_names(" 9", "10") < 0
        assert compare_log_file_names("1_000", "2") < 0

    def test_names_beyond_int64_are_strings(self):
        """Test that integers outside the signed 64-bit range compare as text."""
        assert compare_log_file_names("9223372036854775807", "9") > 0
        assert compare_log_file_names("9223372036854775808", "9") < 0
        assert compare_log_file_names("-9223372036854775809", "-1") > 0

    def test_sorted_numeric_list(self):
        """Test sorting a purely numeric list."""
        names = ["10", "2", "9", "1"]
        assert sorted(names, key=functools.cmp_to_key(compare_log_file_names)) == [
            "1", "2", "9", "10"
        ]


class TestFindLatestLogFile:
    """Tests for the combined lookup."""

    def test_latest_file_in_latest_dir(self, tmp_path):
        """Test the full two-level lookup."""
        make_files(tmp_path / "20240101", ["23"])
        make_files(tmp_path / "20240102", ["0", "1", "11", "2"])

        assert find_latest_log_file(tmp_path) == tmp_path / "20240102" / "11"

    def test_latest_dir_empty(self, tmp_path):
        """Test that an empty latest directory fails even if older ones have files."""
        make_files(tmp_path / "20240101", ["23"])
        (tmp_path / "20240102").mkdir()

        with pytest.raises(NoFilesFound):
            find_latest_log_file(tmp_path)

    def test_errors_share_base_class(self, tmp_path):
        """Test that locator failures can be caught together."""
        with pytest.raises(LogLocatorError):
            find_latest_log_file(tmp_path)
