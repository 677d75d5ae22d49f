"""
FIX Dictionary Schema Compiler

Compiles a FIX data dictionary document into a cross-referenced schema:
fields -> components -> header/trailer (with location propagation) ->
messages. Any inconsistency is fatal for the whole version; a Spec is only
ever returned fully resolved.
"""

import logging
import time
from pathlib import Path
from typing import List, Optional, Union

from prometheus_client import Counter, Histogram

from fixspec.core.config import CompilerConfig, get_config
from fixspec.core.constants import (
    DEFAULT_MAX_TAG,
    REQUIRED_SECTIONS,
    SECTION_COMPONENTS,
    SECTION_FIELDS,
    SECTION_HEADER,
    SECTION_MESSAGES,
    SECTION_TRAILER,
)
from fixspec.core.exceptions import SchemaError, SchemaErrorKind
from fixspec.core.structured_logging import LogContext, PerformanceLogger
from fixspec.dictionary.component import Component, ComponentRegistry
from fixspec.dictionary.document import SpecNode, load_document
from fixspec.dictionary.field import Field, FieldRegistry
from fixspec.dictionary.fix_codes import FieldLocation, MemberKind
from fixspec.dictionary.member import Member, iter_members
from fixspec.dictionary.message import Message, MessageRegistry

logger = logging.getLogger(__name__)

# Metrics
SCHEMA_COMPILATIONS = Counter(
    'fixspec_compilations_total',
    'Total dictionary schema compilations',
    ['result']
)

SCHEMA_ERRORS = Counter(
    'fixspec_schema_errors_total',
    'Total fatal schema errors',
    ['kind']
)

COMPILE_DURATION = Histogram(
    'fixspec_compile_duration_seconds',
    'Time spent compiling one dictionary schema'
)

_performance = PerformanceLogger(logger)

STANDARD_HEADER = "StandardHeader"
STANDARD_TRAILER = "StandardTrailer"


class Spec:
    """
    A compiled schema version.

    Holds the field, component and message registries and the resolved
    header and trailer trees shared by every message.

    Example:
        spec = Spec.compile(load_document("ref/FIX44.xml"))
        heartbeat = spec.find_message("0")
        heartbeat.position_of(35)
    """

    def __init__(
        self,
        major: str,
        minor: str,
        fix_type: str = "FIX",
        max_tag: int = DEFAULT_MAX_TAG,
        expand_components: bool = True,
    ):
        self.major = major
        self.minor = minor
        self.fix_type = fix_type
        self.max_tag = max_tag
        self.expand_components = expand_components
        self.source: Optional[str] = None

        self.fields = FieldRegistry(version=self.version_label)
        self.components = ComponentRegistry(version=self.version_label)
        self.messages = MessageRegistry(version=self.version_label)
        self.header = Member(name=STANDARD_HEADER, kind=MemberKind.COMPONENT, required=True)
        self.trailer = Member(name=STANDARD_TRAILER, kind=MemberKind.COMPONENT, required=True)

    @property
    def version_label(self) -> str:
        """Human readable version, e.g. FIX.4.4."""
        return f"{self.fix_type}.{self.major}.{self.minor}"

    @property
    def symbol(self) -> str:
        """Name of the runtime version spec symbol, e.g. fix44Spec."""
        return f"fix{self.major}{self.minor}Spec"

    def find_field(self, name: str) -> Optional[Field]:
        """Find a field by name."""
        return self.fields.lookup(name)

    def find_component(self, name: str) -> Optional[Component]:
        """Find a component by name."""
        return self.components.lookup(name)

    def find_message(self, msg_type: str) -> Optional[Message]:
        """Find a message by wire message type."""
        return self.messages.lookup_type(msg_type)

    def resolve_members(self, members: List[Member], owner: str) -> List[Member]:
        """
        Expand component references (unless disabled) and check that every
        name resolves.

        Field references must name a registered field and component
        references a registered component. A group whose name is not a
        field is tolerated; it takes a table position without recording a
        tag.

        Args:
            members: Unresolved members
            owner: Name of the enclosing message or component, for errors

        Returns:
            The resolved member list
        """
        if self.expand_components:
            members = self.components.expand(members)

        for member in iter_members(members):
            if member.kind is MemberKind.FIELD and self.find_field(member.name) is None:
                raise SchemaError(
                    SchemaErrorKind.UNRESOLVED_COMPONENT_REFERENCE,
                    f"{owner} references unknown field {member.name} in {self.version_label}",
                    name=member.name,
                    version=self.version_label,
                )
            if member.kind is MemberKind.COMPONENT and self.find_component(member.name) is None:
                raise SchemaError(
                    SchemaErrorKind.UNRESOLVED_COMPONENT_REFERENCE,
                    f"{owner} references unknown component {member.name} in {self.version_label}",
                    name=member.name,
                    version=self.version_label,
                )
            if member.kind is MemberKind.GROUP and self.find_field(member.name) is None:
                logger.warning(
                    f"Group {member.name} in {owner} has no count field in {self.version_label}"
                )

        return members

    def validate_components(self) -> None:
        """Expand every component once to reject cycles and unknown names."""
        for component in self.components:
            expanded = self.components.expand(component.members, (component.name,))
            for member in iter_members(expanded):
                if member.kind is MemberKind.FIELD and self.find_field(member.name) is None:
                    raise SchemaError(
                        SchemaErrorKind.UNRESOLVED_COMPONENT_REFERENCE,
                        f"Component {component.name} references unknown field {member.name} "
                        f"in {self.version_label}",
                        name=member.name,
                        version=self.version_label,
                    )

    def propagate_location(self, member: Member, location: FieldLocation) -> None:
        """
        Set `location` on every field named in a header or trailer tree.

        Raises:
            SchemaError: UnresolvedHeaderField / UnresolvedTrailerField when a
                member does not name a registered field
        """
        if member.kind is not MemberKind.COMPONENT:
            fix_field = self.find_field(member.name)
            if fix_field is None:
                kind = (
                    SchemaErrorKind.UNRESOLVED_TRAILER_FIELD
                    if location is FieldLocation.TRAILER
                    else SchemaErrorKind.UNRESOLVED_HEADER_FIELD
                )
                raise SchemaError(
                    kind,
                    f"{location.label} member {member.name} is not a registered field "
                    f"in {self.version_label}",
                    name=member.name,
                    version=self.version_label,
                )
            if fix_field.location is not FieldLocation.BODY and fix_field.location is not location:
                raise SchemaError(
                    SchemaErrorKind.INVALID_FIELD,
                    f"Field {member.name} is used in both the {fix_field.location.label} "
                    f"and the {location.label} in {self.version_label}",
                    name=member.name,
                    version=self.version_label,
                )
            fix_field.location = location

        for child in member.children:
            self.propagate_location(child, location)

    def _build_section_tree(self, name: str, node: SpecNode, location: FieldLocation) -> Member:
        """Build, expand and propagate a header or trailer tree."""
        tree = Member.root(name, node)
        tree.children = self.components.expand(tree.children)
        self.propagate_location(tree, location)
        return tree

    @classmethod
    def compile(
        cls,
        root: SpecNode,
        config: Optional[CompilerConfig] = None,
        source: Optional[str] = None,
    ) -> "Spec":
        """
        Compile a dictionary document into a resolved schema.

        Args:
            root: Root node of the dictionary document
            config: Compiler configuration (global configuration if None)
            source: Where the document was read from

        Returns:
            The compiled schema

        Raises:
            SchemaError: If the schema is inconsistent
        """
        config = config or get_config()
        start_time = time.perf_counter()

        try:
            spec = cls._compile(root, config)
        except SchemaError as e:
            SCHEMA_COMPILATIONS.labels(result="failure").inc()
            SCHEMA_ERRORS.labels(kind=e.kind.value).inc()
            logger.error(f"Schema compilation failed for {e.version or source}: {e.message}")
            raise
        finally:
            COMPILE_DURATION.observe(time.perf_counter() - start_time)

        spec.source = source
        SCHEMA_COMPILATIONS.labels(result="success").inc()
        logger.info(
            f"Compiled {spec.version_label}: {len(spec.fields)} fields, "
            f"{len(spec.components)} components, {len(spec.messages)} messages"
        )
        return spec

    @classmethod
    def _compile(cls, root: SpecNode, config: CompilerConfig) -> "Spec":
        major = (root.get("major") or "").strip()
        minor = (root.get("minor") or "").strip()
        fix_type = (root.get("type") or "FIX").strip()
        if not major.isdigit() or not minor.isdigit():
            raise SchemaError(
                SchemaErrorKind.INVALID_VERSION,
                f"Dictionary root <{root.name}> has invalid version major={major!r} minor={minor!r}",
                name=root.name,
                version=f"{fix_type}.{major}.{minor}",
            )

        spec = cls(major, minor, fix_type, expand_components=config.expand_components)
        context = LogContext(version=spec.version_label, component="schema_compiler")

        sections = {}
        for section_name in REQUIRED_SECTIONS:
            section = root.find(section_name)
            if section is None:
                raise SchemaError(
                    SchemaErrorKind.MISSING_SECTION,
                    f"Dictionary has no <{section_name}> section in {spec.version_label}",
                    name=section_name,
                    version=spec.version_label,
                )
            sections[section_name] = section

        with _performance.time_operation("fields", context):
            spec.fields = FieldRegistry.from_section(sections[SECTION_FIELDS], spec.version_label)
        spec.max_tag = config.max_tag_for(major, minor, spec.fields.max_tag)

        with _performance.time_operation("components", context):
            spec.components = ComponentRegistry.from_section(
                sections[SECTION_COMPONENTS], spec.version_label
            )
            spec.validate_components()

        with _performance.time_operation("header_trailer", context):
            spec.header = spec._build_section_tree(
                STANDARD_HEADER, sections[SECTION_HEADER], FieldLocation.HEADER
            )
            spec.trailer = spec._build_section_tree(
                STANDARD_TRAILER, sections[SECTION_TRAILER], FieldLocation.TRAILER
            )

        with _performance.time_operation("messages", context):
            spec.messages = MessageRegistry.from_section(sections[SECTION_MESSAGES], spec)

        return spec

    def __str__(self) -> str:
        return f"Spec({self.version_label}, {len(self.fields)} fields, {len(self.messages)} messages)"


def compile_file(
    path: Union[str, Path],
    config: Optional[CompilerConfig] = None,
) -> Spec:
    """
    Load and compile a dictionary file.

    Args:
        path: Path to the XML dictionary
        config: Compiler configuration

    Returns:
        The compiled schema
    """
    root = load_document(path)
    return Spec.compile(root, config=config, source=str(path))
