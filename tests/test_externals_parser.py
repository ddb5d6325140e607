"""Tests for svn:externals parsing and editing."""

from svnscope.svn.externals_parser import (
    format_external,
    parse_definition,
    parse_externals,
    remove_external,
)


class TestParseDefinition:
    def test_revision_url_and_name(self):
        ext = parse_definition("-r42 http://example.com/repo/lib vendor/lib", "/wc")
        assert ext.url == "http://example.com/repo/lib"
        assert ext.name == "vendor/lib"
        assert ext.revision == 42
        assert ext.path == "/wc/vendor/lib"

    def test_spaced_revision(self):
        ext = parse_definition("-r 42 http://example.com/repo/lib vendor/lib", "/wc")
        assert ext.revision == 42
        assert ext.name == "vendor/lib"

    def test_bare_url_takes_last_segment(self):
        ext = parse_definition("http://example.com/repo/lib", "/wc")
        assert ext.name == "lib"
        assert ext.revision is None
        assert ext.path == "/wc/lib"

    def test_peg_revision(self):
        ext = parse_definition("^/vendor/lib@40 third_party/lib", "/wc")
        assert ext.url == "^/vendor/lib"
        assert ext.peg_revision == 40
        assert ext.revision is None

    def test_old_layout(self):
        ext = parse_definition("third_party/lib -r21 http://svn.example.com/lib", "/wc")
        assert ext.name == "third_party/lib"
        assert ext.url == "http://svn.example.com/lib"
        assert ext.revision == 21

    def test_quoted_local_path(self):
        ext = parse_definition('http://example.com/repo/lib "my lib"', "/wc")
        assert ext.name == "my lib"

    def test_hyphenated_url(self):
        ext = parse_definition("http://svn.example.com/my-repo/lib-core core", "/wc")
        assert ext.url == "http://svn.example.com/my-repo/lib-core"

    def test_empty(self):
        assert parse_definition("   ", "/wc") is None


class TestParseExternals:
    def test_recursive_output(self, sample_externals_text: str):
        externals = parse_externals(sample_externals_text, "/wc")
        assert [(e.path, e.url) for e in externals] == [
            ("/wc/third_party/lib", "^/vendor/lib"),
            ("/wc/vendor/lib", "http://example.com/repo/lib"),
            ("/wc/sub/tools", "http://svn.example.com/tools"),
        ]

    def test_plain_property_value_uses_base_path(self):
        externals = parse_externals("http://example.com/a a\nhttp://example.com/b b\n", "/wc")
        assert [e.path for e in externals] == ["/wc/a", "/wc/b"]

    def test_comments_skipped(self):
        assert parse_externals("# nothing here\n\n", "/wc") == []

    def test_hyphen_inside_quoted_local_path(self):
        externals = parse_externals('http://x.example.com/y "My - Lib"\n', "/wc")
        assert [(e.path, e.url, e.name) for e in externals] == [
            ("/wc/My - Lib", "http://x.example.com/y", "My - Lib"),
        ]

    def test_owner_prefix_with_quoted_local_path(self):
        externals = parse_externals('/wc/sub - -r7 ^/vendor "A - B"\n', "/wc")
        assert [(e.path, e.url, e.revision) for e in externals] == [("/wc/sub/A - B", "^/vendor", 7)]


class TestEditing:
    def test_format_external(self):
        assert format_external("http://x/lib", "vendor/lib", 42) == "-r42 http://x/lib vendor/lib"
        assert format_external("http://x/lib") == "http://x/lib lib"
        assert format_external("http://x/lib", "my lib") == 'http://x/lib "my lib"'

    def test_formatted_line_parses_back(self):
        ext = parse_definition(format_external("http://x/lib", "my lib", 7), "/wc")
        assert (ext.url, ext.name, ext.revision) == ("http://x/lib", "my lib", 7)

    def test_remove_external(self):
        value = "-r42 http://example.com/repo/lib vendor/lib\nhttp://example.com/tools tools\n"
        assert remove_external(value, "tools") == "-r42 http://example.com/repo/lib vendor/lib"

    def test_remove_keeps_comments_and_unmatched(self):
        value = "# keep\nhttp://example.com/tools tools"
        assert remove_external(value, "missing") == value
