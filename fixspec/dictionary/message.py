"""
FIX Dictionary Messages

Message definitions assembled from the standard header, the message's own
members and the standard trailer, together with:
- The numeric message type id
- The tag sequence table used by decoders to check field order
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Optional

from fixspec.core.constants import NODE_MESSAGE, TAG_NOT_PRESENT
from fixspec.core.exceptions import SchemaError, SchemaErrorKind
from fixspec.dictionary.document import SpecNode
from fixspec.dictionary.field import Field
from fixspec.dictionary.fix_codes import MemberKind
from fixspec.dictionary.member import Member, build_members, iter_members

if TYPE_CHECKING:
    from fixspec.dictionary.spec import Spec

logger = logging.getLogger(__name__)


def pack_type_id(msg_type: str) -> int:
    """
    Pack a message type string into an integer, most significant byte first.

    "A" -> 65, "AB" -> (65 << 8) | 66 = 16706, "" -> 0.
    """
    type_id = 0
    for b in msg_type.encode("utf-8"):
        type_id = (type_id << 8) | b
    return type_id


def unpack_type_id(type_id: int) -> str:
    """Recover the message type string from a packed type id."""
    if type_id <= 0:
        return ""
    length = (type_id.bit_length() + 7) // 8
    return type_id.to_bytes(length, "big").decode("utf-8")


def build_tag_sequence(
    members: List[Member],
    find_field: Callable[[str], Optional[Field]],
    max_tag: int,
) -> List[int]:
    """
    Build a tag sequence table over a member list.

    Slot t holds the 1-based position at which tag t is expected, or 0 when
    the tag is not part of the list. Members that do not name a field (or
    whose tag is beyond max_tag) record nothing but still take a position.

    Args:
        members: Ordered members
        find_field: Field lookup by name
        max_tag: Largest tag the table can index

    Returns:
        Table of max_tag + 1 slots
    """
    table = [TAG_NOT_PRESENT] * (max_tag + 1)

    for seq, member in enumerate(members, start=1):
        if member.kind is MemberKind.COMPONENT:
            continue
        fix_field = find_field(member.name)
        if fix_field is not None and 0 < fix_field.tag <= max_tag:
            table[fix_field.tag] = seq

    return table


@dataclass
class Message:
    """A message definition with its derived lookup tables."""

    name: str
    msg_type: str
    category: Optional[str] = None
    description: Optional[str] = None
    members: List[Member] = field(default_factory=list)
    tag_sequence: List[int] = field(default_factory=list)
    group_sequences: Dict[str, List[int]] = field(default_factory=dict)

    @property
    def type_id(self) -> int:
        """Message type packed into an integer."""
        return pack_type_id(self.msg_type)

    @property
    def sequence_members(self) -> List[Member]:
        """Members in the order the tag sequence table was built from."""
        if len(self.members) < 2:
            return list(self.members)
        header, *body, trailer = self.members
        return header.children + body + trailer.children

    def position_of(self, tag: int) -> int:
        """Expected 1-based position of a tag, 0 if not part of the message."""
        if 0 <= tag < len(self.tag_sequence):
            return self.tag_sequence[tag]
        return TAG_NOT_PRESENT

    def __str__(self) -> str:
        return f"{self.name} [{self.msg_type}]"


class MessageRegistry:
    """Registry of the messages of one schema version."""

    def __init__(self, version: Optional[str] = None):
        self.version = version
        self._by_name: Dict[str, Message] = {}
        self._by_type: Dict[str, Message] = {}

    def build(self, node: SpecNode, spec: "Spec") -> Message:
        """
        Build and register a message from a <message> node.

        The member list is [header] ++ own members ++ [trailer]; component
        references in the body are expanded first unless expansion is
        disabled for the schema.

        Args:
            node: A <message name msgtype msgcat> declaration
            spec: The schema being compiled (header, trailer and lookups)

        Returns:
            The registered message
        """
        name = node.get("name", "")
        msg_type = node.get("msgtype", "")

        if msg_type in self._by_type or name in self._by_name:
            raise SchemaError(
                SchemaErrorKind.DUPLICATE_MESSAGE,
                f"Message {name} [{msg_type}] declared more than once in {self.version}",
                name=name,
                version=self.version,
            )

        body = spec.resolve_members(build_members(node), owner=name)

        message = Message(
            name=name,
            msg_type=msg_type,
            category=node.get("msgcat"),
            description=node.get("description"),
            members=[spec.header] + body + [spec.trailer],
        )
        message.tag_sequence = build_tag_sequence(
            message.sequence_members, spec.find_field, spec.max_tag
        )
        for member in iter_members(body):
            if member.kind is MemberKind.GROUP:
                message.group_sequences[member.name] = build_tag_sequence(
                    member.children, spec.find_field, spec.max_tag
                )

        self._by_name[name] = message
        self._by_type[msg_type] = message
        logger.debug(f"Built message {message} with {len(message.sequence_members)} members")
        return message

    def lookup(self, name: str) -> Optional[Message]:
        """Get a message by name."""
        return self._by_name.get(name)

    def lookup_type(self, msg_type: str) -> Optional[Message]:
        """Get a message by wire message type."""
        return self._by_type.get(msg_type)

    def sorted_by_type(self) -> List[Message]:
        """All messages in ascending lexicographic order of message type."""
        return [self._by_type[t] for t in sorted(self._by_type)]

    def __iter__(self) -> Iterator[Message]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)

    @classmethod
    def from_section(cls, section: SpecNode, spec: "Spec") -> "MessageRegistry":
        """Build a registry from the <messages> section."""
        registry = cls(version=spec.version_label)
        for node in section.children_named(NODE_MESSAGE):
            registry.build(node, spec)

        logger.info(f"Built {len(registry)} messages for {spec.version_label}")
        return registry
