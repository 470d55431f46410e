"""Markdown scaffolds for common contributor tasks."""

from dataclasses import dataclass

from offmcp.protocol.resources import ReadResourceResult
from offmcp.server.failures import ResourceFailure


@dataclass(frozen=True)
class Template:
    id: str
    name: str
    description: str
    body: str


TEMPLATES = {
    template.id: template
    for template in (
        Template(
            id="api-endpoint",
            name="API Endpoint Template",
            description="Template for creating a new API endpoint",
            body="""
# API Endpoint Template

## Endpoint Overview
- **Name**: [Endpoint Name]
- **Path**: /api/v2/[path]
- **Method**: [GET/POST/PUT/DELETE]
- **Description**: [Brief description of what this endpoint does]

## Implementation Steps
1. Create route handler in the appropriate module
2. Implement parameter validation
3. Add authentication checks if needed
4. Process request and generate response
5. Add error handling
6. Document in API documentation

## Testing
- Test with valid parameters
- Test with missing parameters
- Test with invalid parameters
- Test with edge cases
""",
        ),
        Template(
            id="taxonomy",
            name="Taxonomy Template",
            description="Template for creating or updating a taxonomy",
            body="""
# Taxonomy Template

## Taxonomy Overview
- **Name**: [Taxonomy Name]
- **File**: taxonomies/[taxonomy_id].txt
- **Description**: [Brief description of what this taxonomy represents]

## Structure Guidelines
Taxonomies in Open Food Facts follow a hierarchical structure:

```
category1:en:Main Category 1
  subcategory1:en:Subcategory 1
    subsubcategory1:en:Sub-subcategory 1
  subcategory2:en:Subcategory 2
category2:en:Main Category 2
```

## Implementation Steps
1. Create or update the taxonomy file in the taxonomies directory
2. Add translations for all entries
3. Ensure proper indentation (2 spaces per level)
4. Add comments where necessary with #
""",
        ),
        Template(
            id="mongodb-query",
            name="MongoDB Query Template",
            description="Template for creating MongoDB queries for Open Food Facts data",
            body="""
# MongoDB Query Template

## Query Overview
- **Purpose**: [What the query retrieves]
- **Collection**: products
- **Expected result size**: [Approximate number of documents]

## Query
```javascript
db.products.find(
  { categories_tags: "en:[category]" },
  { code: 1, product_name: 1, brands: 1 }
).limit(100)
```

## Performance Notes
- Filter on indexed *_tags fields where possible
- Project only the fields you need
- Always bound result sets with limit()
""",
        ),
        Template(
            id="product-schema",
            name="Product Schema Template",
            description="Template showing the product data schema",
            body="""
# Product Schema Template

```json
{
  "code": "string | Barcode",
  "product_name": "string | Product name",
  "brands": "string | Comma-separated brands",
  "categories_tags": ["en:category"],
  "ingredients_text": "string | Ingredient list as printed",
  "nutriments": {"energy_100g": "number"},
  "images": {"front": {"sizes": {"thumb": {}, "display": {}, "small": {}}}}
}
```
""",
        ),
        Template(
            id="data-import",
            name="Data Import Template",
            description="Template for creating data import scripts",
            body="""
# Data Import Template

## Import Overview
- **Source**: [Data source]
- **Format**: [CSV/JSON/XML]
- **Fields mapped**: [List of fields]

## Error Handling
- Log all errors with product codes
- Continue processing on non-fatal errors
- Validate required fields before storage
- Consider a dry-run mode

## Testing
- Test with a small sample first
- Verify field mappings are correct
- Check for duplicates
- Validate against product schema
""",
        ),
    )
}


class TemplateProvider:
    """Serves templates by id, or the list of templates for an empty id."""

    def __init__(self, scheme: str = "openfoodfacts"):
        self.scheme = scheme

    def list_text(self) -> str:
        result = "# Available Resource Templates\n\n"
        for template in TEMPLATES.values():
            result += f"## {template.name}\n"
            result += f"ID: {template.id}\n"
            result += f"{template.description}\n"
            result += f"URI: {self.scheme}://template/{template.id}\n\n"
        result += "Use the URI to access a specific template."
        return result

    def read(self, uri: str, template_id: str) -> ReadResourceResult | ResourceFailure:
        template_id = template_id.strip()
        if not template_id:
            return ReadResourceResult.text(
                uri, self.list_text(), metadata={"contentType": "text/plain"}
            )

        template = TEMPLATES.get(template_id)
        if template is None:
            return ResourceFailure.not_found(
                f"Template '{template_id}' not found. "
                f"Available templates: {', '.join(TEMPLATES)}"
            )

        return ReadResourceResult.text(
            uri,
            template.body,
            metadata={
                "templateId": template.id,
                "templateName": template.name,
                "contentType": "text/markdown",
            },
        )
