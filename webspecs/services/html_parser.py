from bs4 import BeautifulSoup


def parse_html(html: str) -> BeautifulSoup:
    """Parse *html* into a tree-walkable document with the lxml parser."""
    if html is None:
        raise TypeError("parse_html() requires an HTML string, got None")
    return BeautifulSoup(html, "lxml")


def require_document(document) -> BeautifulSoup:
    """Return *document* unchanged or raise :class:`TypeError` for a bad handle."""
    if not isinstance(document, BeautifulSoup):
        raise TypeError(
            f"expected a parsed BeautifulSoup document, got {type(document).__name__}"
        )
    return document
