import pytest

from offmcp.server.uri import ParsedUri, UriKind, UriParser


@pytest.fixture
def parser():
    return UriParser(
        scheme="openfoodfacts",
        static_uris=["openfoodfacts://schema", "openfoodfacts://api-docs"],
        static_taxonomy_ids=["categories"],
    )


class TestUriParser:
    @pytest.mark.parametrize(
        "uri, kind, argument",
        [
            ("openfoodfacts://structure", UriKind.STRUCTURE, ""),
            ("openfoodfacts://structure/", UriKind.STRUCTURE, ""),
            (
                "openfoodfacts://structure/lib/ProductOpener",
                UriKind.STRUCTURE,
                "lib/ProductOpener",
            ),
            ("openfoodfacts://file/lib/Display.pm", UriKind.FILE, "lib/Display.pm"),
            ("openfoodfacts://file/", UriKind.FILE, ""),
            ("openfoodfacts://info", UriKind.INFO, ""),
            (
                "openfoodfacts://taxonomy/categories",
                UriKind.STATIC_TAXONOMY,
                "categories",
            ),
            ("openfoodfacts://taxonomy/labels", UriKind.TAXONOMY, "labels"),
            ("openfoodfacts://taxonomy/", UriKind.TAXONOMY, ""),
            ("openfoodfacts://template/", UriKind.TEMPLATE, ""),
            ("openfoodfacts://template/taxonomy", UriKind.TEMPLATE, "taxonomy"),
            ("openfoodfacts://schema", UriKind.STATIC, ""),
            ("openfoodfacts://nothing-here", UriKind.UNKNOWN, ""),
            ("file:///home/user/notes.txt", UriKind.FOREIGN_FILE, ""),
            ("https://world.openfoodfacts.org/", UriKind.UNKNOWN, ""),
        ],
    )
    def test_classifies_uris(self, parser, uri, kind, argument):
        # Act
        parsed = parser.parse(uri)

        # Assert
        assert parsed.kind == kind
        assert parsed.argument == argument
        assert parsed.uri == uri

    def test_file_path_is_url_decoded(self, parser):
        # Act
        parsed = parser.parse("openfoodfacts://file/docs/my%20notes.md")

        # Assert
        assert parsed.argument == "docs/my notes.md"

    def test_structure_wins_over_other_prefixes(self, parser):
        # "structure" is a bare prefix, so it also swallows lookalikes
        assert parser.parse("openfoodfacts://structures").kind == UriKind.STRUCTURE

    def test_taxonomy_for_static_id_only_matches_exactly(self, parser):
        # Act
        parsed = parser.parse("openfoodfacts://taxonomy/categories-extra")

        # Assert
        assert parsed.kind == UriKind.TAXONOMY
        assert parsed.argument == "categories-extra"

    def test_info_must_match_exactly(self, parser):
        assert parser.parse("openfoodfacts://info/more").kind == UriKind.UNKNOWN

    def test_scheme_is_case_insensitive(self, parser):
        assert parser.parse("OpenFoodFacts://file/a.txt").kind == UriKind.FILE

    def test_parsed_uri_keeps_path_for_foreign_schemes(self, parser):
        # Act
        parsed = parser.parse("file:///tmp/a.txt")

        # Assert
        assert parsed == ParsedUri(
            kind=UriKind.FOREIGN_FILE,
            uri="file:///tmp/a.txt",
            scheme="file",
            path="/tmp/a.txt",
        )

    @pytest.mark.parametrize("uri", ["not a uri", "", "relative/path"])
    def test_missing_scheme_is_invalid(self, parser, uri):
        with pytest.raises(ValueError, match="Invalid URL"):
            parser.parse(uri)
