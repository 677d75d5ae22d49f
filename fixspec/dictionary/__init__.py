"""
FIX Data Dictionary Compilation

Compiles a FIX data dictionary into a resolved schema:
- Field registry with length/data pairing and enumerated values
- Reusable components and repeating groups as member trees
- Standard header and trailer with field location propagation
- Messages with numeric type ids and tag sequence tables
"""

from fixspec.dictionary.fix_codes import (
    WireType,
    FieldType,
    FieldLocation,
    MemberKind,
)
from fixspec.dictionary.document import (
    SpecNode,
    load_document,
    parse_document,
)
from fixspec.dictionary.field import (
    EnumValue,
    Field,
    FieldRegistry,
)
from fixspec.dictionary.member import (
    Member,
    build_members,
    iter_members,
)
from fixspec.dictionary.component import (
    Component,
    ComponentRegistry,
)
from fixspec.dictionary.message import (
    Message,
    MessageRegistry,
    build_tag_sequence,
    pack_type_id,
    unpack_type_id,
)
from fixspec.dictionary.spec import (
    Spec,
    compile_file,
)

__all__ = [
    # Codes and enums
    "WireType",
    "FieldType",
    "FieldLocation",
    "MemberKind",
    # Document
    "SpecNode",
    "load_document",
    "parse_document",
    # Fields
    "EnumValue",
    "Field",
    "FieldRegistry",
    # Members and components
    "Member",
    "build_members",
    "iter_members",
    "Component",
    "ComponentRegistry",
    # Messages
    "Message",
    "MessageRegistry",
    "build_tag_sequence",
    "pack_type_id",
    "unpack_type_id",
    # Compiler
    "Spec",
    "compile_file",
]
