"""
FIX Dictionary Fields

Typed field declarations and the registry that owns them:
- Conversion of raw dictionary nodes into typed fields
- Uniqueness of names and tags
- Length/data field pairing
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from fixspec.core.constants import NODE_FIELD, NODE_VALUE, NO_RELATED_TAG
from fixspec.core.exceptions import SchemaError, SchemaErrorKind
from fixspec.dictionary.document import SpecNode
from fixspec.dictionary.fix_codes import FieldLocation, FieldType, WireType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnumValue:
    """One enumerated (code, description) pair of a field."""

    code: str
    description: str = ""


@dataclass
class Field:
    """A scalar, tagged protocol attribute."""

    tag: int
    name: str
    field_type: FieldType
    description: Optional[str] = None
    location: FieldLocation = FieldLocation.BODY
    related: int = NO_RELATED_TAG
    enumerated_values: Optional[List[EnumValue]] = None

    @property
    def wire_type(self) -> WireType:
        """Runtime wire type of the field."""
        return self.field_type.wire_type

    @property
    def is_length(self) -> bool:
        return self.field_type is FieldType.LENGTH

    @property
    def tag_text(self) -> str:
        """Decimal representation of the tag."""
        return str(self.tag)

    @property
    def tag_prefix(self) -> str:
        """The "<tag>=" prefix written before the value on the wire."""
        return f"{self.tag}="

    def __str__(self) -> str:
        return f"{self.name}({self.tag})"


class FieldRegistry:
    """
    Registry of every field of one schema version.

    Fields are kept in declaration order; that order decides which data field
    a length field is paired with.
    """

    def __init__(self, version: Optional[str] = None):
        self.version = version
        self._by_name: Dict[str, Field] = {}
        self._by_tag: Dict[int, Field] = {}

    def register(self, node: SpecNode) -> Field:
        """
        Register a field declaration node.

        Args:
            node: A <field number name type> declaration

        Returns:
            The typed field

        Raises:
            SchemaError: If the declaration is malformed or not unique
        """
        name = (node.get("name") or "").strip()
        if not name:
            raise SchemaError(
                SchemaErrorKind.INVALID_FIELD,
                f"Field declaration without a name (number={node.get('number')!r}) in {self.version}",
                name=None,
                version=self.version,
            )

        raw_tag = (node.get("number") or "").strip()
        if not raw_tag.isdigit() or int(raw_tag) <= 0:
            raise SchemaError(
                SchemaErrorKind.INVALID_FIELD,
                f"Field {name} has a missing or non-numeric tag {raw_tag!r} in {self.version}",
                name=name,
                version=self.version,
            )
        tag = int(raw_tag)

        field_type = FieldType.from_code(node.get("type"))
        if field_type is None:
            raise SchemaError(
                SchemaErrorKind.UNKNOWN_FIELD_TYPE,
                f"Field {name} has unknown type {node.get('type')!r} in {self.version}",
                name=name,
                version=self.version,
            )

        if name in self._by_name:
            raise SchemaError(
                SchemaErrorKind.DUPLICATE_NAME,
                f"Field name {name} declared more than once in {self.version}",
                name=name,
                version=self.version,
            )

        if tag in self._by_tag:
            raise SchemaError(
                SchemaErrorKind.DUPLICATE_TAG,
                f"Field {name} reuses tag {tag} of {self._by_tag[tag].name} in {self.version}",
                name=name,
                version=self.version,
            )

        values = [
            EnumValue(code=value.get("enum", ""), description=value.get("description", ""))
            for value in node.children_named(NODE_VALUE)
        ]

        fix_field = Field(
            tag=tag,
            name=name,
            field_type=field_type,
            description=node.get("description"),
            enumerated_values=values or None,
        )
        self._by_name[name] = fix_field
        self._by_tag[tag] = fix_field
        return fix_field

    def lookup(self, name: str) -> Optional[Field]:
        """Get a field by name."""
        return self._by_name.get(name)

    def lookup_tag(self, tag: int) -> Optional[Field]:
        """Get a field by tag."""
        return self._by_tag.get(tag)

    def resolve_length_pairs(self) -> int:
        """
        Pair every length field with the data field it measures.

        A length field named e.g. EncodedTextLen is paired with the first
        other field, in declaration order, whose name prefixes it
        (EncodedText). Both sides store the other's tag. Length fields are
        never candidates and a data field is paired at most once.

        Returns:
            Number of pairs created
        """
        pairs = 0
        for length_field in self._by_name.values():
            if not length_field.is_length or length_field.related != NO_RELATED_TAG:
                continue
            for candidate in self._by_name.values():
                if candidate.is_length or candidate.related != NO_RELATED_TAG:
                    continue
                if length_field.name.startswith(candidate.name):
                    length_field.related = candidate.tag
                    candidate.related = length_field.tag
                    pairs += 1
                    logger.debug(f"Paired length field {length_field} with {candidate}")
                    break
        return pairs

    def sorted_by_tag(self) -> List[Field]:
        """All fields in ascending tag order."""
        return [self._by_tag[tag] for tag in sorted(self._by_tag)]

    @property
    def max_tag(self) -> int:
        """Largest registered tag, 0 when empty."""
        return max(self._by_tag, default=0)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[Field]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)

    @classmethod
    def from_section(cls, section: SpecNode, version: Optional[str] = None) -> "FieldRegistry":
        """Build a registry from the <fields> section and pair length fields."""
        registry = cls(version=version)
        for node in section.children_named(NODE_FIELD):
            registry.register(node)

        pairs = registry.resolve_length_pairs()
        logger.info(f"Registered {len(registry)} fields ({pairs} length pairs) for {version}")
        return registry
