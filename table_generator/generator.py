"""
Table Generator Core

Serializes a compiled dictionary schema into the static tables consumed by
the runtime protocol engine, with support for several target languages.
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Type

from prometheus_client import Counter

from fixspec.core.constants import DEFAULT_REFERENCE_DIR, NO_RELATED_TAG, TAG_TABLE_SENTINEL
from fixspec.core.exceptions import EmissionError, SchemaError, SchemaErrorKind
from fixspec.dictionary.field import Field
from fixspec.dictionary.fix_codes import FieldLocation, FieldType, WireType
from fixspec.dictionary.spec import Spec

logger = logging.getLogger(__name__)

TABLES_EMITTED = Counter(
    'fixspec_tables_emitted_total',
    'Total generated table artifacts',
    ['language']
)


class Language(Enum):
    """Supported output languages."""

    C = "c"
    PYTHON = "python"

    @classmethod
    def from_name(cls, name: str) -> "Language":
        """Get language from its name, raising EmissionError if unsupported."""
        for language in cls:
            if language.value == name.lower():
                return language
        raise EmissionError(f"Unsupported output language: {name}", language=name)


@dataclass
class GeneratorConfig:
    """Configuration for table generation."""

    # Directory the dictionary is referenced from in the preamble
    reference_dir: str = DEFAULT_REFERENCE_DIR


@dataclass(frozen=True)
class TagRow:
    """One row of the tag table."""

    tag: int
    wire_type: Optional[WireType]
    location: Optional[FieldLocation]
    related: int
    tag_length: int
    tag_prefix: Optional[str]

    @property
    def is_sentinel(self) -> bool:
        return self.tag == TAG_TABLE_SENTINEL


SENTINEL_ROW = TagRow(
    tag=TAG_TABLE_SENTINEL,
    wire_type=None,
    location=None,
    related=NO_RELATED_TAG,
    tag_length=0,
    tag_prefix=None,
)


@dataclass(frozen=True)
class MessageBlock:
    """The generated record of one message."""

    version_symbol: str
    type_id: int
    msg_type: str
    name: str
    tag_sequence: List[int]
    group_sequences: Dict[str, List[int]] = field(default_factory=dict)


class TableEmitter:
    """
    Deterministic extraction of the generated records from a schema.

    Tag rows come out in ascending tag order followed by the sentinel row;
    message blocks in ascending order of message type.
    """

    def __init__(self, spec: Spec):
        self.spec = spec

    def tag_rows(self) -> List[TagRow]:
        """Tag table rows, sorted by tag and terminated by the sentinel."""
        rows = [self.tag_row(f) for f in self.spec.fields.sorted_by_tag()]
        rows.append(SENTINEL_ROW)
        return rows

    def tag_row(self, fix_field: Field) -> TagRow:
        """Build the tag row of a field."""
        return TagRow(
            tag=fix_field.tag,
            wire_type=TypeMapper.wire_type(fix_field, self.spec.version_label),
            location=fix_field.location,
            related=fix_field.related,
            tag_length=len(fix_field.tag_text),
            tag_prefix=fix_field.tag_prefix,
        )

    def message_blocks(self) -> List[MessageBlock]:
        """Message blocks sorted by message type."""
        return [
            MessageBlock(
                version_symbol=self.spec.symbol,
                type_id=message.type_id,
                msg_type=message.msg_type,
                name=message.name,
                tag_sequence=list(message.tag_sequence),
                group_sequences={
                    name: list(table) for name, table in message.group_sequences.items()
                },
            )
            for message in self.spec.messages.sorted_by_type()
        ]


class BaseLanguageGenerator:
    """Base class for language-specific table renderers."""

    language: Language = None
    file_extension: str = ""

    def __init__(self, spec: Spec, config: GeneratorConfig):
        self.spec = spec
        self.config = config
        self.emitter = TableEmitter(spec)

    def render(self) -> str:
        """Render the complete artifact."""
        raise NotImplementedError

    @property
    def source_reference(self) -> str:
        """Path the dictionary is referenced as in the preamble, e.g. ref/FIX44.xml."""
        return (
            f"{self.config.reference_dir}/"
            f"{self.spec.fix_type}{self.spec.major}{self.spec.minor}.xml"
        )

    def default_file_name(self) -> str:
        """File name used when only an output directory is given."""
        return f"{self.spec.symbol}{self.file_extension}"


class TableGenerator:
    """
    Multi-language table generator.

    Renders the tag table and message tables of a compiled schema.
    Output is rendered completely in memory before anything is written, so
    a failure never leaves a partial artifact.

    Example:
        generator = TableGenerator(spec)
        generator.generate(Language.C, "src/ofix/fix44.c")
    """

    def __init__(
        self,
        spec: Spec,
        config: Optional[GeneratorConfig] = None,
    ):
        """
        Initialize table generator.

        Args:
            spec: Compiled schema
            config: Generator configuration
        """
        self.spec = spec
        self.config = config or GeneratorConfig()
        self._generators: Dict[Language, Type[BaseLanguageGenerator]] = {}

        # Register built-in generators
        self._register_generators()

    def _register_generators(self) -> None:
        """Register language generators."""
        from table_generator.languages.c import CGenerator
        from table_generator.languages.python import PythonGenerator

        self._generators[Language.C] = CGenerator
        self._generators[Language.PYTHON] = PythonGenerator

    def render(self, language: Language) -> str:
        """
        Render the tables for a language.

        Args:
            language: Target language

        Returns:
            Complete artifact text
        """
        generator_class = self._generators.get(language)
        if not generator_class:
            raise EmissionError(f"No generator for language: {language}", language=str(language))

        return generator_class(self.spec, self.config).render()

    def generate(self, language: Language, output_path: str) -> Path:
        """
        Render the tables for a language and write them.

        Args:
            language: Target language
            output_path: Output file, or an existing directory

        Returns:
            Path of the written file
        """
        content = self.render(language)

        path = Path(output_path)
        if path.is_dir():
            generator = self._generators[language](self.spec, self.config)
            path = path / generator.default_file_name()

        self._write_file(path, content, language)
        TABLES_EMITTED.labels(language=language.value).inc()
        logger.info(f"Generated {language.value} tables for {self.spec.version_label} in {path}")
        return path

    def register_generator(
        self,
        language: Language,
        generator_class: Type[BaseLanguageGenerator],
    ) -> None:
        """Register a custom generator."""
        self._generators[language] = generator_class

    def _write_file(self, path: Path, content: str, language: Language) -> None:
        """Write content to file, replacing any previous file atomically."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                os.chmod(tmp_name, 0o666 & ~_current_umask())
                os.replace(tmp_name, path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as e:
            raise EmissionError(
                f"Cannot write generated tables: {e}",
                language=language.value,
                output_path=str(path),
            )
        logger.debug(f"Generated: {path}")


def _current_umask() -> int:
    """Process umask; os.umask can only be read by setting it."""
    umask = os.umask(0)
    os.umask(umask)
    return umask


# Type mapping utilities
class TypeMapper:
    """Maps wire types and locations to language-specific identifiers."""

    @classmethod
    def wire_type(cls, fix_field: Field, version: Optional[str] = None) -> WireType:
        """
        Wire type of a field.

        Raises:
            SchemaError: UnknownFieldType if the field's type is not one of
                the recognized dictionary types
        """
        if not isinstance(fix_field.field_type, FieldType):
            raise SchemaError(
                SchemaErrorKind.UNKNOWN_FIELD_TYPE,
                f"Field {fix_field.name} has unknown type {fix_field.field_type!r} in {version}",
                name=fix_field.name,
                version=version,
            )
        return fix_field.field_type.wire_type

    @classmethod
    def map_wire_type(cls, language: Language, wire_type: Optional[WireType]) -> str:
        """Map a wire type to a language identifier."""
        if language == Language.C:
            return wire_type.identifier if wire_type else "0"
        return repr(wire_type.name) if wire_type else "None"

    @classmethod
    def map_location(cls, language: Language, location: Optional[FieldLocation]) -> str:
        """Map a field location to a language identifier."""
        if language == Language.C:
            return location.identifier if location else "0"
        return repr(location.name) if location else "None"
