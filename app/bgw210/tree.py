"""
Small set of tree walking helpers for the router's HTML.

The router pages have no ids or classes worth keying off of so BeautifulSoup's find() with
    keyword filters isn't much help. Instead, callers hand in a predicate and we walk the tree
    in document order until it matches.
"""

from typing import Callable

from bs4 import NavigableString, Tag
from bs4.element import PageElement, PreformattedString

NodePredicate = Callable[[PageElement], bool]


def find_descendant(node: PageElement, predicate: NodePredicate) -> PageElement | None:
    """Depth first, document order search below `node`.

    `node` itself is never tested. The first match wins; nothing below it is visited.
    """
    if not isinstance(node, Tag):
        return None
    # .descendants is a generator over next_element so there's no recursion to blow the stack on
    for descendant in node.descendants:
        if predicate(descendant):
            return descendant
    return None


def find_followup_sibling(node: PageElement) -> PageElement | None:
    """Next sibling (strictly after `node`) with the same tag name as `node`."""
    for sibling in node.next_siblings:
        if sibling.name == node.name:
            return sibling
    return None


def is_tag(name: str) -> NodePredicate:
    """Predicate matching any element called `name`"""
    return lambda node: isinstance(node, Tag) and node.name == name


def get_attribute(node: PageElement, key: str) -> str:
    """
    Value of attribute `key`, or "" if the node doesn't have it.

    Missing and empty are deliberately the same thing here.
    bs4 hands back multi-valued attributes (class, rel ...) as lists so those get joined back up.
    """
    if not isinstance(node, Tag):
        return ""
    value = node.attrs.get(key, "")
    if isinstance(value, list):
        return " ".join(value)
    return value


def _is_text(node: PageElement) -> bool:
    # Comments, CDATA, doctype ... are all PreformattedString; none of them are page text
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def get_inner_text(node: PageElement) -> str:
    """Concatenation of every text node below `node`. No whitespace clean up."""
    if _is_text(node):
        return str(node)
    if not isinstance(node, Tag):
        return ""
    return "".join(str(d) for d in node.descendants if _is_text(d))
