"""
FIX Dictionary Document

Reads a FIX data dictionary (QuickFIX XML layout) into a tree of named nodes
with string attributes, the only shape the schema compiler depends on.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union
from xml.etree import ElementTree as ET

from fixspec.core.exceptions import DocumentError

logger = logging.getLogger(__name__)


@dataclass
class SpecNode:
    """A named node with string attributes and ordered children."""

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["SpecNode"] = field(default_factory=list)

    def get(self, attribute: str, default: Optional[str] = None) -> Optional[str]:
        """Get an attribute value."""
        return self.attributes.get(attribute, default)

    def iter_descendants(self) -> Iterator["SpecNode"]:
        """Iterate all descendants depth-first in document order."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def find(self, name: str) -> Optional["SpecNode"]:
        """Find the first descendant named `name`, or None."""
        for node in self.iter_descendants():
            if node.name == name:
                return node
        return None

    def children_named(self, *names: str) -> List["SpecNode"]:
        """Direct children whose name is one of `names`, in document order."""
        return [child for child in self.children if child.name in names]

    @classmethod
    def from_element(cls, element: ET.Element) -> "SpecNode":
        """Convert an ElementTree element (and its subtree)."""
        return cls(
            name=_local_name(element.tag),
            attributes={_local_name(k): v for k, v in element.attrib.items()},
            children=[
                cls.from_element(child)
                for child in element
                if isinstance(child.tag, str)
            ],
        )


def _local_name(tag: str) -> str:
    """Strip an ElementTree {namespace} prefix."""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def parse_document(text: Union[str, bytes], source: str = "<string>") -> SpecNode:
    """
    Parse dictionary markup into a SpecNode tree.

    Args:
        text: XML document text
        source: Name used in error messages

    Returns:
        Root node of the document

    Raises:
        DocumentError: If the text is not well-formed XML
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        line = e.position[0] if getattr(e, "position", None) else None
        raise DocumentError(f"Malformed dictionary document {source}: {e}", path=source, line=line)

    return SpecNode.from_element(root)


def load_document(path: Union[str, Path]) -> SpecNode:
    """
    Load a dictionary file into a SpecNode tree.

    Args:
        path: Path to the XML dictionary

    Returns:
        Root node of the document
    """
    path = Path(path)

    try:
        data = path.read_bytes()
    except OSError as e:
        raise DocumentError(f"Cannot read dictionary document: {e}", path=str(path))

    root = parse_document(data, source=str(path))
    logger.debug(f"Loaded dictionary document {path} (root <{root.name}>)")
    return root
