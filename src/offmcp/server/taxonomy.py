"""Taxonomy files: finding them on disk and rendering them for reading.

Taxonomies are flat text files where two-space indentation encodes depth and
each data line is `entry_id[:description]`. Checkouts keep them in a few
different places, so the locator probes a fixed list of candidate paths and
reports which one matched.
"""

import asyncio
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Tried in order; the first regular file wins. Relative to the project root.
CANDIDATE_TEMPLATES = (
    "taxonomies/{id}/taxonomy.txt",
    "taxonomies/{id}.txt",
    "taxonomies/{id}",
    "taxonomies/{id}.txt.typed",
    "../taxonomies/{id}/taxonomy.txt",
    "../taxonomies/{id}.txt",
    "../taxonomies/{id}",
    "../taxonomies/{id}.txt.typed",
)

NO_TAXONOMIES_FOUND = "No taxonomies found. Please check the path to taxonomies folder."

# Served when the real file is missing so clients still get something useful.
MOCK_TAXONOMIES: dict[str, str] = {
    "categories": """# Mock Categories Taxonomy (fallback content - real file not found)
# Note: This is placeholder content provided because the categories.txt file was not found

food:en:Food
  plant_based_food:en:Plant-based foods
    fruits:en:Fruits
      citrus:en:Citrus fruits
        orange:en:Oranges
        lemon:en:Lemons
        lime:en:Limes
      berries:en:Berries
        strawberry:en:Strawberries
        blueberry:en:Blueberries
        raspberry:en:Raspberries
      tropical_fruits:en:Tropical fruits
        banana:en:Bananas
        pineapple:en:Pineapples
        mango:en:Mangoes
    vegetables:en:Vegetables
      root_vegetables:en:Root vegetables
        carrot:en:Carrots
        potato:en:Potatoes
      leafy_vegetables:en:Leafy vegetables
        spinach:en:Spinach
        lettuce:en:Lettuce
    grains:en:Grains
      wheat:en:Wheat
      rice:en:Rice
      oats:en:Oats
  animal_based_food:en:Animal-based foods
    dairy:en:Dairy products
      milk:en:Milk
      cheese:en:Cheese
      yogurt:en:Yogurt
    meat:en:Meat
      beef:en:Beef
      pork:en:Pork
      chicken:en:Chicken
    seafood:en:Seafood
      fish:en:Fish
      shellfish:en:Shellfish
  processed_food:en:Processed foods
    sweets:en:Sweets
      chocolate:en:Chocolate
      candy:en:Candy
    snacks:en:Snacks
      chips:en:Chips
      crackers:en:Crackers
    beverages:en:Beverages
      water:en:Water
      juice:en:Fruit juices
      soda:en:Soft drinks""",
}


@dataclass(frozen=True)
class TaxonomyFile:
    raw_content: str
    matched_path: str
    """The candidate template that matched, relative to the project root."""


def is_safe_taxonomy_id(taxonomy_id: str) -> bool:
    """Reject ids that would steer the candidate paths somewhere else."""
    if not taxonomy_id or taxonomy_id in (".", ".."):
        return False
    return not any(char in taxonomy_id for char in ("/", "\\", "\x00"))


class TaxonomyLocator:
    """Finds taxonomy files under the project root."""

    def __init__(self, project_root: str, working_dir: str | None = None):
        self.project_root = os.path.abspath(project_root)
        self.working_dir = os.path.abspath(working_dir or os.getcwd())

    def candidate_paths(self, taxonomy_id: str) -> list[str]:
        return [template.format(id=taxonomy_id) for template in CANDIDATE_TEMPLATES]

    async def locate(self, taxonomy_id: str) -> TaxonomyFile | None:
        """Return the first candidate that exists as a regular file, or None."""
        if not is_safe_taxonomy_id(taxonomy_id):
            logger.warning(f"Refusing taxonomy id: {taxonomy_id!r}")
            return None
        return await asyncio.to_thread(self._probe, taxonomy_id)

    def _probe(self, taxonomy_id: str) -> TaxonomyFile | None:
        for relative_path in self.candidate_paths(taxonomy_id):
            full_path = os.path.abspath(os.path.join(self.project_root, relative_path))
            logger.debug(f"Looking for taxonomy {taxonomy_id} at: {full_path}")
            if not os.path.isfile(full_path):
                continue
            try:
                with open(full_path, encoding="utf-8") as f:
                    content = f.read()
            except (OSError, UnicodeDecodeError) as e:
                logger.debug(f"Could not read {full_path}: {e}")
                continue
            logger.debug(f"Found taxonomy {taxonomy_id} at: {full_path}")
            return TaxonomyFile(raw_content=content, matched_path=relative_path)

        logger.warning(f"Taxonomy not found: {taxonomy_id}")
        return None

    def search_dirs(self) -> list[str]:
        """Directories scanned when listing the taxonomies that do exist."""
        return [
            os.path.abspath(os.path.join(self.project_root, "taxonomies")),
            os.path.abspath(os.path.join(self.project_root, "../taxonomies")),
            os.path.abspath(os.path.join(self.working_dir, "../taxonomies")),
            os.path.abspath(os.path.join(self.working_dir, "../../taxonomies")),
            os.path.abspath(os.path.join(self.working_dir, "taxonomies")),
        ]

    async def list_available(self) -> list[str]:
        return await asyncio.to_thread(self._list_available)

    def _list_available(self) -> list[str]:
        found: dict[str, None] = {}
        for directory in self.search_dirs():
            if not os.path.isdir(directory):
                continue
            logger.debug(f"Found taxonomy directory: {directory}")
            try:
                names = os.listdir(directory)
            except OSError as e:
                logger.warning(f"Error reading taxonomy directory {directory}: {e}")
                continue
            for name in names:
                if name.startswith(".") or not name.endswith(".txt"):
                    continue
                found[name.replace(".txt", "", 1).replace(".typed", "", 1)] = None

        for mock_id in MOCK_TAXONOMIES:
            found[f"{mock_id} (mock available)"] = None

        if not found:
            return [NO_TAXONOMIES_FOUND]
        return list(found)


class TaxonomyFormatter:
    """Renders raw taxonomy text as an indented bullet listing.

    Blank lines and lines starting with `#` pass through untouched. Data
    lines become `<indent>- entry_id[: description]`, where the indent is two
    spaces per level and the level is the leading whitespace count divided by
    the indent unit.
    """

    def __init__(self, scheme: str = "openfoodfacts", indent_unit: int = 2):
        self.scheme = scheme
        self.indent_unit = indent_unit

    def format_line(self, line: str) -> str:
        if line.strip() == "" or line.startswith("#"):
            return line

        leading = len(line) - len(line.lstrip())
        depth = leading // self.indent_unit

        entry_id, sep, description = line.strip().partition(":")
        entry_id = entry_id.strip()
        description = description.strip()

        formatted = f"{'  ' * depth}- {entry_id}"
        if sep and description:
            formatted += f": {description}"
        return formatted

    def navigation(self, taxonomy_id: str) -> list[str]:
        return [
            "\n## Navigation",
            f"- Use {self.scheme}://taxonomy/{{taxonomy_id}} to view other taxonomies",
            f"- View the raw taxonomy file at {self.scheme}://file/taxonomies/"
            f"{taxonomy_id}.txt",
        ]

    def format(self, taxonomy_id: str, raw_content: str, source_path: str) -> str:
        lines = [self.format_line(line) for line in raw_content.split("\n")]
        lines.extend(self.navigation(taxonomy_id))
        header = f"# Taxonomy: {taxonomy_id}\n\nFile: {source_path}\n\n"
        return header + "\n".join(lines)
