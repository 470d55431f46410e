from unittest.mock import AsyncMock

import pytest

from offmcp.protocol.resources import ReadResourceResult
from offmcp.protocol.roots import Root
from offmcp.server.config import ServerConfig
from offmcp.server.failures import ResourceFailure
from offmcp.server.providers.taxonomy import TaxonomyProvider
from offmcp.server.roots import RootsRegistry
from offmcp.server.router import OUTSIDE_ROOTS_MESSAGE, ResourceRouter
from offmcp.server.taxonomy import TaxonomyFormatter, TaxonomyLocator


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "checkout" / "server"
    (root / "lib").mkdir(parents=True)
    (root / "lib" / "Display.pm").write_text("package Display;\n", encoding="utf-8")
    (root / "README.md").write_text("# Product Opener\n", encoding="utf-8")
    return root


@pytest.fixture
def config(project):
    return ServerConfig(project_root=str(project))


@pytest.fixture
def roots():
    return RootsRegistry()


@pytest.fixture
def router(config, roots, tmp_path):
    working_dir = tmp_path / "cwd"
    working_dir.mkdir()
    taxonomies = TaxonomyProvider(
        TaxonomyLocator(config.project_root, str(working_dir)),
        TaxonomyFormatter(config.scheme, config.indent_unit),
    )
    return ResourceRouter(config, roots, taxonomies=taxonomies)


def error_text(result: ReadResourceResult) -> str:
    assert len(result.contents) == 1
    assert result.contents[0].is_error is True
    return result.contents[0].text


class TestListResources:
    def test_standard_mode_hides_developer_resources(self, router):
        # Act
        uris = [resource.uri for resource in router.list_resources()]

        # Assert
        assert uris == [
            "openfoodfacts://structure/",
            "openfoodfacts://info",
            "openfoodfacts://schema",
            "openfoodfacts://api-docs",
            "openfoodfacts://taxonomy/categories",
        ]

    def test_developer_mode_lists_everything(self, router):
        # Act
        resources = router.list_resources(developer_mode=True)

        # Assert
        assert len(resources) == 8
        assert "openfoodfacts://template/" in [r.uri for r in resources]


class TestResolveDispatch:
    async def test_structure_lists_directory(self, router):
        # Act
        result = await router.resolve("openfoodfacts://structure/lib")

        # Assert
        assert result.contents[0].text == "Directory lib:\nDisplay.pm (file)"

    async def test_file_returns_content(self, router):
        # Act
        result = await router.resolve("openfoodfacts://file/README.md")

        # Assert
        assert result.contents[0].uri == "openfoodfacts://file/README.md"
        assert result.contents[0].text == "# Product Opener\n"
        assert result.contents[0].metadata["filename"] == "README.md"

    async def test_empty_filepath_is_a_missing_parameter(self, router):
        # Act
        result = await router.resolve("openfoodfacts://file/")

        # Assert
        assert error_text(result) == (
            "Error processing request: Filepath parameter is required"
        )

    async def test_info_is_served_as_json(self, router):
        # Act
        result = await router.resolve("openfoodfacts://info")

        # Assert
        assert result.contents[0].metadata == {"contentType": "application/json"}

    async def test_static_taxonomy_skips_the_locator(self, config, roots):
        # Arrange
        taxonomies = AsyncMock(spec=TaxonomyProvider)
        router = ResourceRouter(config, roots, taxonomies=taxonomies)

        # Act
        result = await router.resolve("openfoodfacts://taxonomy/categories")

        # Assert
        taxonomies.read.assert_not_called()
        assert result.contents[0].metadata["taxonomyId"] == "categories"
        assert "## Food Categories" in result.contents[0].text

    async def test_static_taxonomy_ids_are_configurable(self, project, roots, tmp_path):
        # Arrange
        config = ServerConfig(project_root=str(project), static_taxonomy_ids=())
        router = ResourceRouter(
            config,
            roots,
            taxonomies=TaxonomyProvider(
                TaxonomyLocator(config.project_root, str(tmp_path)),
                TaxonomyFormatter(),
            ),
        )

        # Act
        result = await router.resolve("openfoodfacts://taxonomy/categories")

        # Assert
        assert result.contents[0].metadata["isMock"] is True

    @pytest.mark.parametrize(
        "uri",
        [
            "openfoodfacts://taxonomy/categories?lang=en",
            "openfoodfacts://taxonomy/%63ategories",
        ],
    )
    async def test_static_taxonomy_matches_by_decoded_id(self, router, uri):
        # Act
        result = await router.resolve(uri)

        # Assert
        assert not result.is_error
        assert result.contents[0].uri == uri
        assert result.contents[0].metadata["taxonomyId"] == "categories"

    async def test_static_id_without_canned_text_reads_from_disk(
        self, project, roots, tmp_path
    ):
        # Arrange
        taxonomies = project / "taxonomies"
        taxonomies.mkdir()
        (taxonomies / "labels.txt").write_text("en:Organic\n", encoding="utf-8")
        config = ServerConfig(
            project_root=str(project), static_taxonomy_ids=("categories", "labels")
        )
        router = ResourceRouter(
            config,
            roots,
            taxonomies=TaxonomyProvider(
                TaxonomyLocator(config.project_root, str(tmp_path)),
                TaxonomyFormatter(),
            ),
        )

        # Act
        result = await router.resolve("openfoodfacts://taxonomy/labels")

        # Assert
        assert result.contents[0].metadata == {
            "taxonomyId": "labels",
            "filepath": "taxonomies/labels.txt",
        }

    async def test_taxonomy_is_read_from_disk(self, router, project):
        # Arrange
        taxonomies = project / "taxonomies"
        taxonomies.mkdir()
        (taxonomies / "labels.txt").write_text("en:Organic\n", encoding="utf-8")

        # Act
        result = await router.resolve("openfoodfacts://taxonomy/labels")

        # Assert
        assert result.contents[0].metadata == {
            "taxonomyId": "labels",
            "filepath": "taxonomies/labels.txt",
        }

    async def test_unknown_taxonomy_is_an_error_envelope(self, router):
        # Act
        result = await router.resolve("openfoodfacts://taxonomy/nutrients")

        # Assert
        assert error_text(result).startswith(
            "Error processing request: Taxonomy 'nutrients' not found"
        )

    async def test_static_document(self, router):
        # Act
        result = await router.resolve("openfoodfacts://api-docs")

        # Assert
        assert "Open Food Facts API" in result.contents[0].text
        assert not result.is_error


class TestResolveErrors:
    async def test_unknown_scheme_is_not_found(self, router):
        # Arrange
        uri = "gopher://example.com/menu"

        # Act
        result = await router.resolve(uri)

        # Assert
        assert result.to_protocol() == {
            "contents": [
                {
                    "uri": uri,
                    "text": f"Error processing request: Resource not found: {uri}",
                    "isError": True,
                }
            ]
        }

    async def test_unknown_app_path_is_not_found(self, router):
        # Act
        result = await router.resolve("openfoodfacts://nowhere")

        # Assert
        assert error_text(result) == (
            "Error processing request: Resource not found: openfoodfacts://nowhere"
        )

    async def test_unparseable_uri_keeps_the_raw_string(self, router):
        # Act
        result = await router.resolve("no scheme here")

        # Assert
        assert result.contents[0].uri == "no scheme here"
        assert error_text(result) == (
            "Error processing request: Invalid URL: no scheme here"
        )

    async def test_path_escape_is_access_denied(self, router):
        # Act
        result = await router.resolve("openfoodfacts://file/../../etc/passwd")

        # Assert
        assert error_text(result) == (
            "Error processing request: Access denied: Path outside project directory"
        )

    async def test_wrong_kind_targets(self, router):
        # Act
        listing = await router.resolve("openfoodfacts://structure/README.md")
        file = await router.resolve("openfoodfacts://file/lib")

        # Assert
        assert error_text(listing) == (
            "Error processing request: Not a directory: README.md"
        )
        assert error_text(file) == "Error processing request: Not a file: lib"

    async def test_provider_exceptions_become_error_envelopes(self, config, roots):
        # Arrange
        taxonomies = AsyncMock(spec=TaxonomyProvider)
        taxonomies.read.side_effect = RuntimeError("disk on fire")
        router = ResourceRouter(config, roots, taxonomies=taxonomies)

        # Act
        result = await router.resolve("openfoodfacts://taxonomy/labels")

        # Assert
        assert error_text(result) == "Error processing request: disk on fire"

    async def test_failures_are_prefixed_once(self, config, roots):
        # Arrange
        taxonomies = AsyncMock(spec=TaxonomyProvider)
        taxonomies.read.return_value = ResourceFailure.not_found("gone")
        router = ResourceRouter(config, roots, taxonomies=taxonomies)

        # Act
        result = await router.resolve("openfoodfacts://taxonomy/labels")

        # Assert
        assert error_text(result) == "Error processing request: gone"


class TestDeveloperMode:
    @pytest.mark.parametrize(
        "uri",
        [
            "openfoodfacts://code-patterns",
            "openfoodfacts://file-organization",
            "openfoodfacts://template",
            "openfoodfacts://template/",
            "openfoodfacts://template/taxonomy",
        ],
    )
    async def test_developer_resources_are_hidden_in_standard_mode(self, router, uri):
        # Act
        result = await router.resolve(uri)

        # Assert
        assert error_text(result) == (
            f"Error processing request: Resource not found: {uri}"
        )

    async def test_developer_resources_resolve_in_developer_mode(self, router):
        # Act
        patterns = await router.resolve(
            "openfoodfacts://code-patterns", developer_mode=True
        )
        template = await router.resolve(
            "openfoodfacts://template/taxonomy", developer_mode=True
        )

        # Assert
        assert not patterns.is_error
        assert template.contents[0].metadata["templateId"] == "taxonomy"

    async def test_names_sharing_a_developer_prefix_are_not_hidden(self, router):
        # Act
        result = await router.resolve("openfoodfacts://templates-x")

        # Assert
        assert "Resource not found" not in error_text(result)
        assert error_text(result).startswith(
            "Error processing request: Template 's-x' not found"
        )

    async def test_configured_developer_mode_is_the_default(self, project, roots):
        # Arrange
        config = ServerConfig(project_root=str(project), developer_mode=True)
        router = ResourceRouter(config, roots)

        # Act
        result = await router.resolve("openfoodfacts://template/")

        # Assert
        assert result.contents[0].text.startswith("# Available Resource Templates")


class TestAccessBoundary:
    async def test_app_scheme_ignores_roots(self, router, roots):
        # Arrange
        roots.update_roots([Root(uri="file:///somewhere/else")])

        # Act
        result = await router.resolve("openfoodfacts://file/README.md")

        # Assert
        assert not result.is_error

    async def test_uri_outside_roots_is_denied_before_dispatch(self, router, roots):
        # Arrange
        roots.update_roots([Root(uri="file:///somewhere/else")])
        uri = "gopher://example.com/menu"

        # Act
        result = await router.resolve(uri)

        # Assert
        assert error_text(result) == OUTSIDE_ROOTS_MESSAGE
        assert result.contents[0].uri == uri

    async def test_foreign_file_inside_root_serves_real_bytes(
        self, router, roots, project
    ):
        # Arrange
        roots.update_roots([Root(uri=project.as_uri(), name="Server")])
        uri = (project / "README.md").as_uri()

        # Act
        result = await router.resolve(uri)

        # Assert
        content = result.contents[0]
        assert content.text == "# Product Opener\n"
        assert content.mime_type == "text/plain"
        assert content.metadata["root"] == "Server"

    async def test_foreign_file_uses_most_specific_root(self, router, roots, project):
        # Arrange
        roots.update_roots(
            [
                Root(uri=project.parent.as_uri(), name="Checkout"),
                Root(uri=(project / "lib").as_uri(), name="Lib"),
            ]
        )
        uri = (project / "lib" / "Display.pm").as_uri()

        # Act
        result = await router.resolve(uri)

        # Assert
        assert result.contents[0].metadata["root"] == "Lib"

    async def test_foreign_file_without_roots_is_denied(self, router, project):
        # Act
        result = await router.resolve((project / "README.md").as_uri())

        # Assert
        assert error_text(result) == (
            "Error processing request: File is not within any defined root"
        )

    async def test_foreign_file_outside_roots_is_denied(self, router, roots, project):
        # Arrange
        roots.update_roots([Root(uri=(project / "lib").as_uri())])

        # Act
        result = await router.resolve((project / "README.md").as_uri())

        # Assert
        assert error_text(result) == OUTSIDE_ROOTS_MESSAGE

    async def test_foreign_file_in_sibling_of_root_is_denied(
        self, router, roots, project
    ):
        # Arrange
        sibling = project.parent / f"{project.name}-private"
        sibling.mkdir()
        (sibling / "secret.txt").write_text("nope", encoding="utf-8")
        roots.update_roots([Root(uri=project.as_uri())])

        # Act
        result = await router.resolve((sibling / "secret.txt").as_uri())

        # Assert
        assert error_text(result).startswith("Error processing request: Access denied")
        assert "nope" not in error_text(result)

    async def test_routers_with_separate_registries_are_isolated(self, config):
        # Arrange
        locked = RootsRegistry([Root(uri="file:///nowhere")])
        open_ = RootsRegistry()
        uri = "gopher://example.com/menu"

        # Act
        locked_result = await ResourceRouter(config, locked).resolve(uri)
        open_result = await ResourceRouter(config, open_).resolve(uri)

        # Assert
        assert error_text(locked_result) == OUTSIDE_ROOTS_MESSAGE
        assert "Resource not found" in error_text(open_result)
