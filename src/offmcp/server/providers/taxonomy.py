import logging

from offmcp.protocol.resources import ReadResourceResult
from offmcp.server.failures import ResourceFailure
from offmcp.server.taxonomy import (
    MOCK_TAXONOMIES,
    TaxonomyFormatter,
    TaxonomyLocator,
)


class TaxonomyProvider:
    """Serves formatted taxonomies, widening the search as lookups fail.

    The real file comes first, then the built-in mock table, and finally an
    error listing the taxonomies that do exist. Nothing is retried.
    """

    def __init__(self, locator: TaxonomyLocator, formatter: TaxonomyFormatter):
        self.locator = locator
        self.formatter = formatter
        self.mocks = dict(MOCK_TAXONOMIES)
        self.logger = logging.getLogger("offmcp.server.providers.taxonomy")

    async def read(
        self, uri: str, taxonomy_id: str
    ) -> ReadResourceResult | ResourceFailure:
        if not taxonomy_id:
            return ResourceFailure.parameter_missing("Taxonomy ID is required")

        self.logger.debug(f"Processing taxonomy request for: {taxonomy_id}")
        taxonomy_file = await self.locator.locate(taxonomy_id)
        if taxonomy_file is not None:
            return ReadResourceResult.text(
                uri,
                self.formatter.format(
                    taxonomy_id,
                    taxonomy_file.raw_content,
                    taxonomy_file.matched_path,
                ),
                metadata={
                    "taxonomyId": taxonomy_id,
                    "filepath": taxonomy_file.matched_path,
                },
            )

        if taxonomy_id in self.mocks:
            self.logger.info(f"Using mock taxonomy for: {taxonomy_id}")
            return ReadResourceResult.text(
                uri,
                f"# Mock {taxonomy_id} Taxonomy (fallback content)\n\n"
                f"{self.mocks[taxonomy_id]}",
                metadata={
                    "taxonomyId": taxonomy_id,
                    "filepath": f"mock://{taxonomy_id}",
                    "isMock": True,
                },
            )

        available = await self.locator.list_available()
        checked = self.locator.candidate_paths(taxonomy_id)
        return ResourceFailure.not_found(
            f"Taxonomy '{taxonomy_id}' not found despite checking multiple paths."
            f"\n\nAvailable taxonomies include: {', '.join(available)}"
            f"\n\nDebug info:\nProject root: {self.locator.project_root}"
            f"\nWorking directory: {self.locator.working_dir}"
            f"\nPaths checked: {', '.join(checked)}"
        )
