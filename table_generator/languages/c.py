"""
C Table Generator

Generates the C translation unit linked into the runtime engine:
- Tag table terminated by a sentinel row
- One message spec struct per message, ordered by message type, preceded by
  the tag sequence tables of its repeating groups
- The version spec record tying tags and messages together
"""

import re
from typing import Dict, List

from fixspec.core.constants import C_INCLUDES
from fixspec.core.exceptions import EmissionError
from table_generator.generator import (
    BaseLanguageGenerator,
    Language,
    MessageBlock,
    TagRow,
    TypeMapper,
)

MESSAGE_PREFIX = "msg_"
GROUP_PREFIX = "grp_"


class CGenerator(BaseLanguageGenerator):
    """C table generator."""

    language = Language.C
    file_extension = ".c"

    def render(self) -> str:
        """Render the C source."""
        blocks = self.emitter.message_blocks()
        identifiers = self._message_identifiers(blocks)
        group_identifiers = {
            block.name: self._group_identifiers(block, identifiers[block.name])
            for block in blocks
        }
        self._unique_identifiers(
            [ident for groups in group_identifiers.values() for ident in groups.values()],
            "group table",
        )
        parts = [
            self._render_preamble(),
            self._render_tags(self.emitter.tag_rows()),
        ]
        parts.extend(
            self._render_message(block, identifiers[block.name], group_identifiers[block.name])
            for block in blocks
        )
        parts.append(self._render_version_spec(blocks, identifiers))
        return "".join(parts)

    def _render_preamble(self) -> str:
        includes = "\n".join(f'#include "{header}"' for header in C_INCLUDES)
        return f'''
// This file is auto-generated from {self.source_reference} and should not be modified.

{includes}

extern struct _ofixVersionSpec\t{self.spec.symbol};

'''

    def _render_tags(self, rows: List[TagRow]) -> str:
        lines = [f"    {self._render_tag_row(row)}," for row in rows]
        body = "\n".join(lines)
        return f'''static struct _ofixTagSpec\ttags[] = {{
{body}
}};

'''

    def _render_tag_row(self, row: TagRow) -> str:
        if row.is_sentinel:
            return "{ 0, 0, 0, 0, 0, NULL }"
        wire_type = TypeMapper.map_wire_type(self.language, row.wire_type)
        location = TypeMapper.map_location(self.language, row.location)
        return (
            f'{{ {row.tag}, {wire_type}, {location}, {row.related}, '
            f'{row.tag_length}, "{row.tag_prefix}" }}'
        )

    def _render_message(
        self, block: MessageBlock, ident: str, group_identifiers: Dict[str, str]
    ) -> str:
        groups = "".join(
            self._render_group(block, group_ident, name)
            for name, group_ident in group_identifiers.items()
        )
        tag_sequence = ",".join(str(pos) for pos in block.tag_sequence)
        return f'''// {block.name} [{block.msg_type}]

{groups}static struct _ofixMsgSpec\t{MESSAGE_PREFIX}{ident} = {{
    &{block.version_symbol}, // version
    {block.type_id}, // tid
    "{self._escape(block.msg_type)}", // type
    "{self._escape(block.name)}", // name
    {{{tag_sequence}}},
}};

'''

    @staticmethod
    def _render_group(block: MessageBlock, group_ident: str, name: str) -> str:
        tag_sequence = ",".join(str(pos) for pos in block.group_sequences[name])
        return f'''// {block.name} [{block.msg_type}] group {name}
static int\t{group_ident}[] = {{{tag_sequence}}};

'''

    def _render_version_spec(self, blocks: List[MessageBlock], identifiers: Dict[str, str]) -> str:
        msgs = "".join(f"    &{MESSAGE_PREFIX}{identifiers[block.name]},\n" for block in blocks)
        return f'''static struct _ofixMsgSpec\t*msgs[] = {{
{msgs}    NULL
}};

struct _ofixVersionSpec\t{self.spec.symbol} = {{
    {self.spec.major}, // major
    {self.spec.minor}, // minor
    tags,
    msgs,
}};
'''

    def _message_identifiers(self, blocks: List[MessageBlock]) -> Dict[str, str]:
        """Map message names to unique C identifiers."""
        return self._unique_identifiers([block.name for block in blocks], "message")

    def _group_identifiers(self, block: MessageBlock, ident: str) -> Dict[str, str]:
        """Map group names of a message to unique C identifiers."""
        idents = self._unique_identifiers(list(block.group_sequences), f"group of {block.name}")
        return {name: f"{GROUP_PREFIX}{ident}_{group}" for name, group in idents.items()}

    def _unique_identifiers(self, names: List[str], what: str) -> Dict[str, str]:
        identifiers: Dict[str, str] = {}
        owners: Dict[str, str] = {}
        for name in names:
            ident = self._identifier(name)
            if ident in owners:
                raise EmissionError(
                    f"{what.capitalize()} names {owners[ident]!r} and {name!r} "
                    f"both map to C identifier {ident}",
                    language=self.language.value,
                )
            owners[ident] = name
            identifiers[name] = ident
        return identifiers

    @staticmethod
    def _identifier(name: str) -> str:
        """C identifier fragment for a dictionary name."""
        return re.sub(r"\W", "_", name)

    @staticmethod
    def _escape(text: str) -> str:
        """Escape text for a C string literal."""
        return text.replace("\\", "\\\\").replace('"', '\\"')
