from offmcp.protocol.resources import Resource


def build_catalog(scheme: str = "openfoodfacts") -> list[Resource]:
    """The resources advertised through resources/list."""
    return [
        Resource(
            uri=f"{scheme}://structure/",
            name="Project Structure",
            description=(
                "Navigate the directory structure of the Open Food Facts codebase"
            ),
        ),
        Resource(
            uri=f"{scheme}://info",
            name="Project Information",
            description="Overview of the Open Food Facts project and its components",
            mime_type="application/json",
        ),
        Resource(
            uri=f"{scheme}://schema",
            name="Database Schema",
            description="Information about the Open Food Facts data model",
        ),
        Resource(
            uri=f"{scheme}://api-docs",
            name="API Documentation",
            description="Documentation of the Open Food Facts API endpoints",
        ),
        Resource(
            uri=f"{scheme}://code-patterns",
            name="Code Patterns",
            description=(
                "Common patterns and conventions in the Open Food Facts codebase"
            ),
            developer_only=True,
        ),
        Resource(
            uri=f"{scheme}://file-organization",
            name="File Organization",
            description="How files are organized in the Open Food Facts project",
            developer_only=True,
        ),
        Resource(
            uri=f"{scheme}://taxonomy/categories",
            name="Categories Taxonomy",
            description="Food categories taxonomy used in Open Food Facts",
        ),
        Resource(
            uri=f"{scheme}://template/",
            name="Resource Templates",
            description="Templates for common Open Food Facts development tasks",
            developer_only=True,
        ),
    ]


def filter_for_standard_mode(resources: list[Resource]) -> list[Resource]:
    """Drop developer-only resources."""
    return [resource for resource in resources if not resource.developer_only]
