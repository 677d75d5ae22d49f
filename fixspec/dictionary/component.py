"""
FIX Dictionary Components

Named, reusable member trees and their expansion into the member lists of
messages, groups, the header and the trailer.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from fixspec.core.constants import NODE_COMPONENT
from fixspec.core.exceptions import SchemaError, SchemaErrorKind
from fixspec.dictionary.document import SpecNode
from fixspec.dictionary.fix_codes import MemberKind
from fixspec.dictionary.member import Member

logger = logging.getLogger(__name__)


@dataclass
class Component:
    """A named, reusable member tree."""

    name: str
    root: Member

    @property
    def members(self) -> List[Member]:
        return self.root.children


class ComponentRegistry:
    """Registry of the components of one schema version."""

    def __init__(self, version: Optional[str] = None):
        self.version = version
        self._components: Dict[str, Component] = {}

    def register(self, name: str, tree: Member) -> Component:
        """Register a component tree under `name`."""
        if not name:
            raise SchemaError(
                SchemaErrorKind.INVALID_FIELD,
                f"Component declaration without a name in {self.version}",
                version=self.version,
            )
        if name in self._components:
            raise SchemaError(
                SchemaErrorKind.DUPLICATE_COMPONENT,
                f"Component {name} declared more than once in {self.version}",
                name=name,
                version=self.version,
            )

        component = Component(name=name, root=tree)
        self._components[name] = component
        return component

    def register_node(self, node: SpecNode) -> Component:
        """Register a <component name> declaration node."""
        name = node.get("name", "")
        return self.register(name, Member.root(name, node))

    def lookup(self, name: str) -> Optional[Component]:
        """Get a component by name."""
        return self._components.get(name)

    def expand(self, members: List[Member], path: Tuple[str, ...] = ()) -> List[Member]:
        """
        Replace component references with the referenced component's members.

        Returns a new tree; the input members and the registered components
        are left untouched. A reference that explicitly declares
        required="N" makes the substituted top-level members optional;
        otherwise each substituted member keeps its own required flag.

        Args:
            members: Members to expand
            path: Names of the components currently being expanded

        Raises:
            SchemaError: On a reference to an unknown component or a cycle
        """
        expanded: List[Member] = []

        for member in members:
            if member.kind is not MemberKind.COMPONENT:
                expanded.append(
                    Member(
                        name=member.name,
                        kind=member.kind,
                        required=member.required,
                        required_explicit=member.required_explicit,
                        children=self.expand(member.children, path),
                    )
                )
                continue

            if member.name in path:
                cycle = " -> ".join(path + (member.name,))
                raise SchemaError(
                    SchemaErrorKind.CYCLIC_COMPONENT_REFERENCE,
                    f"Component {member.name} references itself ({cycle}) in {self.version}",
                    name=member.name,
                    version=self.version,
                )

            component = self.lookup(member.name)
            if component is None:
                raise SchemaError(
                    SchemaErrorKind.UNRESOLVED_COMPONENT_REFERENCE,
                    f"Unknown component {member.name} referenced in {self.version}",
                    name=member.name,
                    version=self.version,
                )

            weaken = member.required_explicit and not member.required
            for child in self.expand(component.members, path + (member.name,)):
                if weaken:
                    child.required = False
                expanded.append(child)

        return expanded

    def __contains__(self, name: object) -> bool:
        return name in self._components

    def __iter__(self) -> Iterator[Component]:
        return iter(self._components.values())

    def __len__(self) -> int:
        return len(self._components)

    @classmethod
    def from_section(cls, section: SpecNode, version: Optional[str] = None) -> "ComponentRegistry":
        """Build a registry from the <components> section."""
        registry = cls(version=version)
        for node in section.children_named(NODE_COMPONENT):
            registry.register_node(node)

        logger.info(f"Registered {len(registry)} components for {version}")
        return registry
