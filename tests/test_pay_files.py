"""Unit tests for pay stub file discovery."""

import re

import pytest

from services.pay_files import identify_pay_files, parse_regex_flags


@pytest.fixture
def pay_dir(tmp_path):
    for name in ["a.pdf", "B.PDF", "notes.txt", "2024-01 pay.pdf"]:
        (tmp_path / name).write_bytes(b"%PDF-1.4")
    (tmp_path / "folder.pdf").mkdir()
    return tmp_path


class TestParseRegexFlags:
    """Tests for flag letters."""

    def test_letters(self):
        """Test letters combine into re flags."""
        assert parse_regex_flags("im") == re.IGNORECASE | re.MULTILINE

    @pytest.mark.parametrize("flags", ["", None])
    def test_empty(self, flags):
        """Test no letters means no flags."""
        assert parse_regex_flags(flags) == 0

    def test_unknown_letter(self):
        """Test unknown letters are rejected."""
        with pytest.raises(ValueError):
            parse_regex_flags("iq")


class TestIdentifyPayFiles:
    """Tests for listing pay stubs."""

    def test_lists_pdf_files_sorted(self, pay_dir):
        """Test only regular .pdf files are listed, in sorted order."""
        files = identify_pay_files(str(pay_dir))
        assert files == sorted(str(pay_dir / name) for name in ["a.pdf", "B.PDF", "2024-01 pay.pdf"])

    def test_pattern_with_flags(self, pay_dir):
        """Test the pattern filters full paths with the given flags."""
        files = identify_pay_files(str(pay_dir), pattern=r"[\\/]b\.pdf$", flags="i")
        assert files == [str(pay_dir / "B.PDF")]

    def test_pattern_is_case_sensitive_without_flags(self, pay_dir):
        """Test no flags means an exact-case match."""
        assert identify_pay_files(str(pay_dir), pattern=r"[\\/]b\.pdf$", flags="") == []

    def test_pattern_searches_anywhere(self, pay_dir):
        """Test the pattern need not match the whole path."""
        files = identify_pay_files(str(pay_dir), pattern="2024-01")
        assert files == [str(pay_dir / "2024-01 pay.pdf")]

    def test_single_file_skips_scan(self, tmp_path):
        """Test a named file is returned without listing the directory."""
        assert identify_pay_files(str(tmp_path), file="stub.pdf") == [str(tmp_path / "stub.pdf")]

    def test_missing_directory(self, tmp_path):
        """Test a missing directory surfaces the OS error."""
        with pytest.raises(FileNotFoundError):
            identify_pay_files(str(tmp_path / "missing"))
