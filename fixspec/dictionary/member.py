"""
FIX Dictionary Members

Structural member trees shared by components, groups, the standard header
and trailer, and message bodies. Trees are built from dictionary nodes by
name only; names are resolved later by the schema compiler so that forward
references between components are tolerated.
"""

from dataclasses import dataclass, field
from typing import Iterator, List

from fixspec.core.constants import MEMBER_NODE_NAMES, REQUIRED_YES
from fixspec.dictionary.document import SpecNode
from fixspec.dictionary.fix_codes import MemberKind


@dataclass
class Member:
    """
    A node of a member tree: a field reference, a repeating group or a
    component reference.

    `required_explicit` records whether the declaration carried a required
    attribute at all, which matters when a component reference is expanded.
    """

    name: str
    kind: MemberKind
    required: bool = False
    required_explicit: bool = False
    children: List["Member"] = field(default_factory=list)

    @classmethod
    def build(cls, node: SpecNode) -> "Member":
        """Build a member (and its subtree) from a field/group/component node."""
        return cls(
            name=node.get("name", ""),
            kind=MemberKind.from_node_name(node.name) or MemberKind.COMPONENT,
            required=node.get("required") == REQUIRED_YES,
            required_explicit="required" in node.attributes,
            children=build_members(node),
        )

    @classmethod
    def root(cls, name: str, node: SpecNode) -> "Member":
        """Build the root of a named tree (component, header or trailer)."""
        return cls(
            name=name,
            kind=MemberKind.COMPONENT,
            required=True,
            children=build_members(node),
        )

    def walk(self) -> Iterator["Member"]:
        """This member and all descendants, depth-first in document order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def __str__(self) -> str:
        flag = "required" if self.required else "optional"
        return f"{self.kind.value} {self.name} ({flag}, {len(self.children)} children)"


def build_members(node: SpecNode) -> List[Member]:
    """
    Build the ordered member list of a node.

    Children that are not field, group or component declarations are ignored.
    """
    return [
        Member.build(child)
        for child in node.children
        if child.name in MEMBER_NODE_NAMES
    ]


def iter_members(members: List[Member]) -> Iterator[Member]:
    """All members of a list and their descendants, depth-first."""
    for member in members:
        yield from member.walk()
