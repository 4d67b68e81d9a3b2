"""Tests for unpack output parsers."""

import pytest

from extensions.errors import FetchParseError
from extensions.parsing import parse_archive_root, parse_quoted_path, url_filename


class TestParseQuotedPath:
    def test_gem_unpack_output(self):
        output = "Unpacked gem: '/tmp/widget-1.2'\n"

        assert parse_quoted_path(output) == "/tmp/widget-1.2"

    def test_takes_first_quoted_substring(self):
        output = "Unpacked gem: 'widget-1.2'\nSee also 'other'\n"

        assert parse_quoted_path(output) == "widget-1.2"

    @pytest.mark.parametrize("output", ["", "Unpacked gem: /tmp/widget", "''", None])
    def test_missing_path_raises(self, output):
        with pytest.raises(FetchParseError):
            parse_quoted_path(output)


class TestParseArchiveRoot:
    def test_first_segment_of_first_line(self):
        output = "widget-1.2/README\nwidget-1.2/lib/widget.rb\n"

        assert parse_archive_root(output) == "widget-1.2"

    def test_leading_dot_slash_is_ignored(self):
        assert parse_archive_root("./widget/\n./widget/README\n") == "widget"

    def test_bsdtar_listing(self):
        assert parse_archive_root("x widget-1.2/\nx widget-1.2/README\n") == "widget-1.2"

    @pytest.mark.parametrize("output", ["", "\n", "   \nwidget/README", "./\n"])
    def test_empty_first_line_raises(self, output):
        with pytest.raises(FetchParseError):
            parse_archive_root(output)


class TestUrlFilename:
    def test_basename_ignores_query(self):
        url = "http://files.example.com/pkg/widget-1.2.tar.gz?token=abc"

        assert url_filename(url) == "widget-1.2.tar.gz"

    def test_url_without_file_raises(self):
        with pytest.raises(FetchParseError):
            url_filename("http://files.example.com/")
