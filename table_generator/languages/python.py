"""
Python Table Generator

Generates an importable Python module holding the same tag and message
tables as the C output, for Python-side decoders and tooling.
"""

from typing import List

from table_generator.generator import (
    BaseLanguageGenerator,
    Language,
    MessageBlock,
    TagRow,
    TypeMapper,
)


class PythonGenerator(BaseLanguageGenerator):
    """Python table generator."""

    language = Language.PYTHON
    file_extension = ".py"

    def render(self) -> str:
        """Render the Python module."""
        blocks = self.emitter.message_blocks()
        return "".join([
            self._render_preamble(),
            self._render_tags(self.emitter.tag_rows()),
            self._render_messages(blocks),
        ])

    def _render_preamble(self) -> str:
        return f'''"""
Tables for {self.spec.version_label}.

This file is auto-generated from {self.source_reference} and should not be modified.
"""

SYMBOL = {self.spec.symbol!r}
VERSION = ({self.spec.major}, {self.spec.minor})

'''

    def _render_tags(self, rows: List[TagRow]) -> str:
        lines = "".join(f"    {self._render_tag_row(row)},\n" for row in rows)
        return f'''# (tag, wire type, location, related tag, tag length, tag prefix)
TAGS = (
{lines})

'''

    def _render_tag_row(self, row: TagRow) -> str:
        wire_type = TypeMapper.map_wire_type(self.language, row.wire_type)
        location = TypeMapper.map_location(self.language, row.location)
        return (
            f"({row.tag}, {wire_type}, {location}, {row.related}, "
            f"{row.tag_length}, {row.tag_prefix!r})"
        )

    def _render_messages(self, blocks: List[MessageBlock]) -> str:
        entries = "".join(self._render_message(block) for block in blocks)
        return f'''MESSAGES = {{
{entries}}}
'''

    @staticmethod
    def _render_message(block: MessageBlock) -> str:
        tag_sequence = ", ".join(str(pos) for pos in block.tag_sequence)
        groups = "".join(
            f"            {name!r}: ({', '.join(str(pos) for pos in table)},),\n"
            for name, table in block.group_sequences.items()
        )
        return f'''    # {block.name} [{block.msg_type}]
    {block.msg_type!r}: {{
        "version": {block.version_symbol!r},
        "tid": {block.type_id},
        "name": {block.name!r},
        "tag_sequence": ({tag_sequence},),
        "groups": {{
{groups}        }},
    }},
'''
