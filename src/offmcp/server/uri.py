"""Classifies resource URIs into the provider that should answer them.

Several patterns overlap, so the checks run in a fixed order and the first
match wins:

    structure > file > info > taxonomy (static ids first) > template
    > static documents > foreign file: > unknown
"""

from dataclasses import dataclass
from enum import Enum
from urllib.parse import unquote, urlsplit


class UriKind(str, Enum):
    STRUCTURE = "structure"
    FILE = "file"
    INFO = "info"
    STATIC_TAXONOMY = "static_taxonomy"
    TAXONOMY = "taxonomy"
    TEMPLATE = "template"
    STATIC = "static"
    FOREIGN_FILE = "foreign_file"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ParsedUri:
    kind: UriKind
    uri: str
    scheme: str
    path: str
    """For the app scheme, everything after `scheme://`; otherwise the URI path."""

    argument: str = ""
    """The part after the routing prefix: a relative path or an id."""


class UriParser:
    def __init__(
        self,
        scheme: str,
        static_uris: list[str] | tuple[str, ...] = (),
        static_taxonomy_ids: list[str] | tuple[str, ...] = (),
    ):
        self.scheme = scheme
        self.static_uris = frozenset(static_uris)
        self.static_taxonomy_ids = frozenset(static_taxonomy_ids)

    def parse(self, uri: str) -> ParsedUri:
        """Classify a URI.

        Raises:
            ValueError: If the string is not an absolute URI.
        """
        parts = urlsplit(uri)
        scheme = parts.scheme.lower()
        if not scheme:
            raise ValueError(f"Invalid URL: {uri}")

        if scheme != self.scheme:
            kind = UriKind.FOREIGN_FILE if scheme == "file" else UriKind.UNKNOWN
            return ParsedUri(kind=kind, uri=uri, scheme=scheme, path=parts.path)

        path = parts.netloc + parts.path

        def parsed(kind: UriKind, argument: str = "") -> ParsedUri:
            return ParsedUri(
                kind=kind, uri=uri, scheme=scheme, path=path, argument=argument
            )

        if path.startswith("structure"):
            return parsed(UriKind.STRUCTURE, unquote(_after(path, "structure")))

        if path.startswith("file/"):
            return parsed(UriKind.FILE, unquote(path[len("file/") :]))

        if uri == f"{self.scheme}://info":
            return parsed(UriKind.INFO)

        if path.startswith("taxonomy/"):
            taxonomy_id = unquote(path[len("taxonomy/") :])
            if taxonomy_id in self.static_taxonomy_ids:
                return parsed(UriKind.STATIC_TAXONOMY, taxonomy_id)
            return parsed(UriKind.TAXONOMY, taxonomy_id)

        if path.startswith("template"):
            return parsed(UriKind.TEMPLATE, unquote(_after(path, "template")))

        if uri in self.static_uris:
            return parsed(UriKind.STATIC)

        return parsed(UriKind.UNKNOWN)


def _after(path: str, prefix: str) -> str:
    """Strip a routing prefix and one following slash."""
    rest = path[len(prefix) :]
    if rest.startswith("/"):
        rest = rest[1:]
    return rest
