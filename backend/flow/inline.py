"""Inline edge parser: navigation markers embedded in page markup.

Any element carrying the marker attribute becomes an edge::

    <button data-dr-link="dashboard.html">Continue</button>

The target is the attribute value and the label is the element's visible
text with surrounding whitespace trimmed.
"""

from __future__ import annotations

from typing import List, Optional, Union

from bs4 import BeautifulSoup, ParserRejectedMarkup

from backend.config import settings
from backend.flow.models import FlowEdge
from backend.logging_config import get_logger

logger = get_logger(__name__)


def extract_inline_links(
    markup: Union[bytes, str],
    attribute: Optional[str] = None,
    page: str = "",
) -> List[FlowEdge]:
    """Return one edge per marked element, in document order.

    Elements whose marker value is empty are skipped.  Markup the parser
    rejects yields no edges and a warning.

    Args:
        markup: Raw page bytes or text.
        attribute: Marker attribute name.  Defaults to
            ``settings.flow_link_attribute``.
        page: Page path, used only for log messages.
    """
    attr = attribute or settings.flow_link_attribute
    try:
        soup = BeautifulSoup(markup, "html.parser")
    except (ParserRejectedMarkup, UnicodeDecodeError) as exc:
        logger.warning("Skipping inline links of %r: unparseable markup (%s)", page, exc)
        return []

    edges: List[FlowEdge] = []
    for element in soup.find_all(attrs={attr: True}):
        target = element.get(attr)
        if isinstance(target, list):
            target = " ".join(target)
        target = (target or "").strip()
        if not target:
            continue
        edges.append(FlowEdge(target=target, label=element.get_text().strip()))
    return edges
