"""Single entry point for resource reads.

The router checks the access boundary, classifies the URI, hands it to the
matching provider, and turns every outcome into a `ReadResourceResult`.
Providers return `ResourceFailure` values for expected problems; anything
they raise is caught here too, so a read never fails at the protocol level.
"""

import logging
from typing import Awaitable, Callable

from offmcp.protocol.resources import ReadResourceResult, Resource
from offmcp.server.catalog import build_catalog, filter_for_standard_mode
from offmcp.server.config import ServerConfig
from offmcp.server.failures import ResourceFailure
from offmcp.server.filesystem import FilesystemAccessor
from offmcp.server.providers.files import ProjectFilesProvider, RootedFileProvider
from offmcp.server.providers.project_info import ProjectInfoProvider
from offmcp.server.providers.static import StaticProvider
from offmcp.server.providers.taxonomy import TaxonomyProvider
from offmcp.server.providers.templates import TemplateProvider
from offmcp.server.roots import RootsRegistry
from offmcp.server.taxonomy import TaxonomyFormatter, TaxonomyLocator
from offmcp.server.uri import ParsedUri, UriKind, UriParser

ProviderOutcome = ReadResourceResult | ResourceFailure
UriHandler = Callable[[ParsedUri], Awaitable[ProviderOutcome]]

ERROR_PREFIX = "Error processing request: "
OUTSIDE_ROOTS_MESSAGE = (
    "Access denied: The requested resource is not within any defined root"
)


class ResourceRouter:
    def __init__(
        self,
        config: ServerConfig,
        roots: RootsRegistry,
        files: ProjectFilesProvider | None = None,
        rooted_files: RootedFileProvider | None = None,
        taxonomies: TaxonomyProvider | None = None,
        static: StaticProvider | None = None,
        templates: TemplateProvider | None = None,
        project_info: ProjectInfoProvider | None = None,
    ):
        self.config = config
        self.roots = roots

        self.files = files or ProjectFilesProvider(
            FilesystemAccessor(config.project_root)
        )
        self.rooted_files = rooted_files or RootedFileProvider()
        self.taxonomies = taxonomies or TaxonomyProvider(
            TaxonomyLocator(config.project_root),
            TaxonomyFormatter(config.scheme, config.indent_unit),
        )
        self.static = static or StaticProvider(config.scheme)
        self.templates = templates or TemplateProvider(config.scheme)
        self.project_info = project_info or ProjectInfoProvider(config.project_root)

        self.catalog = build_catalog(config.scheme)
        self.parser = UriParser(
            scheme=config.scheme,
            static_uris=self.static.document_uris,
            static_taxonomy_ids=tuple(
                taxonomy_id
                for taxonomy_id in config.static_taxonomy_ids
                if taxonomy_id in self.static.taxonomy_ids
            ),
        )
        self._handlers: dict[UriKind, UriHandler] = {
            UriKind.STRUCTURE: self._read_structure,
            UriKind.FILE: self._read_file,
            UriKind.INFO: self._read_info,
            UriKind.STATIC_TAXONOMY: self._read_static_taxonomy,
            UriKind.TAXONOMY: self._read_taxonomy,
            UriKind.TEMPLATE: self._read_template,
            UriKind.STATIC: self._read_static,
            UriKind.FOREIGN_FILE: self._read_foreign_file,
        }
        self.logger = logging.getLogger("offmcp.server.router")

    # ================================
    # Catalog
    # ================================

    def list_resources(self, developer_mode: bool | None = None) -> list[Resource]:
        """Resources advertised to the client, minus developer-only ones
        unless running in developer mode."""
        if self._developer_mode(developer_mode):
            return list(self.catalog)
        return filter_for_standard_mode(self.catalog)

    # ================================
    # Resolution
    # ================================

    def is_accessible(self, uri: str) -> bool:
        """App-scheme URIs are always served; everything else needs a root."""
        if uri.startswith(self.config.scheme_prefix):
            return True
        return self.roots.is_within_roots(uri)

    async def resolve(
        self, uri: str, developer_mode: bool | None = None
    ) -> ReadResourceResult:
        """Read a resource, always answering with a one-entry envelope.

        Args:
            uri: The URI exactly as the client sent it.
            developer_mode: Overrides the configured mode for this read. In
                standard mode, developer-only resources are not found.
        """
        try:
            if not self.is_accessible(uri):
                self.logger.info(f"Denied access outside roots: {uri}")
                return ReadResourceResult.error(uri, OUTSIDE_ROOTS_MESSAGE)

            parsed = self.parser.parse(uri)
            handler = self._handlers.get(parsed.kind)
            if handler is None or self._is_hidden(uri, developer_mode):
                return self._error(uri, f"Resource not found: {uri}")

            self.logger.debug(f"Routing {uri} as {parsed.kind.value}")
            outcome = await handler(parsed)
        except Exception as e:
            self.logger.exception(f"Provider failed for {uri}")
            return self._error(uri, str(e))

        if isinstance(outcome, ResourceFailure):
            self.logger.debug(f"{outcome.kind.value} for {uri}: {outcome.message}")
            return self._error(uri, outcome.message)
        return outcome

    def _error(self, uri: str, message: str) -> ReadResourceResult:
        return ReadResourceResult.error(uri, f"{ERROR_PREFIX}{message}")

    def _developer_mode(self, developer_mode: bool | None) -> bool:
        if developer_mode is None:
            return self.config.developer_mode
        return developer_mode

    def _is_hidden(self, uri: str, developer_mode: bool | None) -> bool:
        if self._developer_mode(developer_mode):
            return False
        for resource in self.catalog:
            if not resource.developer_only:
                continue
            # Entries ending in "/" also cover their bare form and subpaths
            if uri in (resource.uri, resource.uri.rstrip("/")) or (
                resource.uri.endswith("/") and uri.startswith(resource.uri)
            ):
                return True
        return False

    # ================================
    # Handlers
    # ================================

    async def _read_structure(self, parsed: ParsedUri) -> ProviderOutcome:
        return await self.files.read_structure(parsed.uri, parsed.argument)

    async def _read_file(self, parsed: ParsedUri) -> ProviderOutcome:
        return await self.files.read_file(parsed.uri, parsed.argument)

    async def _read_info(self, parsed: ParsedUri) -> ProviderOutcome:
        return await self.project_info.read(parsed.uri)

    async def _read_taxonomy(self, parsed: ParsedUri) -> ProviderOutcome:
        return await self.taxonomies.read(parsed.uri, parsed.argument)

    async def _read_template(self, parsed: ParsedUri) -> ProviderOutcome:
        return self.templates.read(parsed.uri, parsed.argument)

    async def _read_static(self, parsed: ParsedUri) -> ProviderOutcome:
        return self.static.read(parsed.uri)

    async def _read_static_taxonomy(self, parsed: ParsedUri) -> ProviderOutcome:
        return self.static.read_taxonomy(parsed.uri, parsed.argument)

    async def _read_foreign_file(self, parsed: ParsedUri) -> ProviderOutcome:
        root = self.roots.most_specific_root(parsed.uri)
        if root is None:
            return ResourceFailure.access_denied("File is not within any defined root")
        return await self.rooted_files.read(parsed.uri, root)
