"""
Tests for the table generator.

Tests cover:
- Tag table rows and the sentinel
- Message block ordering
- C and Python rendering, including group tables
- C identifier naming and collisions
- Determinism
- Write failures leave no artifact
- Output file permissions
"""

import os
import stat

import pytest
from prometheus_client import REGISTRY

from fixspec.core.exceptions import EmissionError, SchemaError, SchemaErrorKind
from fixspec.dictionary.field import Field
from fixspec.dictionary.fix_codes import FieldLocation, WireType
from fixspec.tests.conftest import build_dictionary
from table_generator import GeneratorConfig, Language, TableEmitter, TableGenerator
from table_generator.generator import BaseLanguageGenerator, TypeMapper


IDENTIFIER_FIELDS = (
    '<field number="8" name="BeginString" type="STRING"/>'
    '<field number="35" name="MsgType" type="STRING"/>'
    '<field number="10" name="CheckSum" type="STRING"/>'
)


def named_messages(*names):
    """Dictionary text with one message per name, typed 1, 2, ..."""
    messages = "".join(
        f'<message name="{name}" msgtype="{number}"><field name="MsgType" required="Y"/></message>'
        for number, name in enumerate(names, start=1)
    )
    return build_dictionary(
        fields=IDENTIFIER_FIELDS,
        header='<field name="BeginString" required="Y"/>',
        trailer='<field name="CheckSum" required="Y"/>',
        messages=messages,
    )


class TestTableEmitter:
    """Tests for extracting rows and blocks from a schema."""

    def test_tag_rows_sorted_with_sentinel(self, fix44_spec):
        """Test rows are sorted by tag and end with the sentinel."""
        rows = TableEmitter(fix44_spec).tag_rows()
        tags = [row.tag for row in rows]

        assert tags[:-1] == sorted(tags[:-1])
        assert len(rows) == len(fix44_spec.fields) + 1
        assert rows[-1].is_sentinel
        assert rows[-1].tag_prefix is None
        assert not any(row.is_sentinel for row in rows[:-1])

    def test_tag_row_contents(self, fix44_spec):
        """Test a row carries type, location, pairing and prefix."""
        rows = {row.tag: row for row in TableEmitter(fix44_spec).tag_rows()}

        signature_length = rows[93]
        assert signature_length.wire_type is WireType.LENGTH
        assert signature_length.location is FieldLocation.TRAILER
        assert signature_length.related == 89
        assert signature_length.tag_length == 2
        assert signature_length.tag_prefix == "93="

        assert rows[453].wire_type is WireType.NUM_IN_GROUP
        assert rows[453].location is FieldLocation.BODY
        assert rows[453].tag_length == 3

    def test_message_blocks_sorted_by_type(self, fix44_spec):
        """Test blocks are ordered by message type."""
        blocks = TableEmitter(fix44_spec).message_blocks()

        assert [(b.msg_type, b.name, b.type_id) for b in blocks] == [
            ("0", "Heartbeat", 48),
            ("A", "Logon", 65),
            ("D", "NewOrderSingle", 68),
        ]
        assert all(b.version_symbol == "fix44Spec" for b in blocks)
        assert blocks[0].tag_sequence[35] == 3

    def test_message_blocks_carry_groups(self, fix44_spec):
        """Test group tag sequences travel with their message block."""
        blocks = {b.msg_type: b for b in TableEmitter(fix44_spec).message_blocks()}
        order = fix44_spec.find_message("D")

        assert list(blocks["D"].group_sequences) == ["NoPartyIDs"]
        assert blocks["D"].group_sequences["NoPartyIDs"] == order.group_sequences["NoPartyIDs"]
        assert blocks["D"].group_sequences["NoPartyIDs"][448] == 1
        assert blocks["D"].group_sequences["NoPartyIDs"][452] == 2
        assert blocks["0"].group_sequences == {}

    def test_unknown_type_mapping(self):
        """Test a field without a mapped type cannot be emitted."""
        broken = Field(tag=5000, name="Custom", field_type="FROBNICATE")

        with pytest.raises(SchemaError) as exc_info:
            TypeMapper.wire_type(broken, "FIX.4.4")

        assert exc_info.value.kind is SchemaErrorKind.UNKNOWN_FIELD_TYPE
        assert exc_info.value.name == "Custom"


class TestCGenerator:
    """Tests for the C renderer."""

    def test_preamble(self, fix44_spec):
        """Test the generated header comment, includes and extern."""
        source = TableGenerator(fix44_spec).render(Language.C)

        assert (
            "// This file is auto-generated from ref/FIX44.xml and should not be modified."
            in source
        )
        for header in [
            "ofix/tagspec.h",
            "ofix/tagreq.h",
            "ofix/msgspec.h",
            "ofix/versionspec.h",
        ]:
            assert f'#include "{header}"' in source
        assert "extern struct _ofixVersionSpec\tfix44Spec;" in source

    def test_reference_dir(self, fix44_spec):
        """Test the preamble follows the configured reference directory."""
        config = GeneratorConfig(reference_dir="dict")
        source = TableGenerator(fix44_spec, config).render(Language.C)

        assert "auto-generated from dict/FIX44.xml" in source

    def test_tag_table(self, fix44_spec):
        """Test tag rows and the sentinel row."""
        source = TableGenerator(fix44_spec).render(Language.C)

        assert '{ 8, OFIX_STR, OFIX_HEADER, 0, 1, "8=" },' in source
        assert '{ 93, OFIX_LENGTH, OFIX_TRAILER, 89, 2, "93=" },' in source
        assert '{ 355, OFIX_DATA, OFIX_BODY, 354, 3, "355=" },' in source
        assert "{ 0, 0, 0, 0, 0, NULL }" in source
        assert source.index('"8="') < source.index('"9="') < source.index('"453="')
        assert source.index('"453="') < source.index("NULL }")

    def test_message_blocks(self, fix44_spec):
        """Test message comments, ids and ordering."""
        source = TableGenerator(fix44_spec).render(Language.C)

        heartbeat = source.index("// Heartbeat [0]")
        logon = source.index("// Logon [A]")
        order = source.index("// NewOrderSingle [D]")
        assert heartbeat < logon < order

        assert "static struct _ofixMsgSpec\tmsg_Logon = {" in source
        assert "    &fix44Spec, // version" in source
        assert "    65, // tid" in source
        assert '    "A", // type' in source
        assert '    "Logon", // name' in source

    def test_tag_sequence_literal(self, fix44_spec):
        """Test each message carries its full tag sequence table."""
        source = TableGenerator(fix44_spec).render(Language.C)
        heartbeat = fix44_spec.find_message("0")

        literal = "{" + ",".join(str(p) for p in heartbeat.tag_sequence) + "}"
        assert literal in source

    def test_version_spec(self, fix44_spec):
        """Test the closing version record lists every message."""
        source = TableGenerator(fix44_spec).render(Language.C)

        assert "struct _ofixVersionSpec\tfix44Spec = {" in source
        assert "    &msg_Heartbeat,\n    &msg_Logon,\n    &msg_NewOrderSingle,\n    NULL" in source
        assert source.rstrip().endswith("};")

    def test_group_tables(self, fix44_spec):
        """Test each group gets its own tag sequence table before its message."""
        source = TableGenerator(fix44_spec).render(Language.C)
        order = fix44_spec.find_message("D")

        table = order.group_sequences["NoPartyIDs"]
        literal = "{" + ",".join(str(p) for p in table) + "}"
        declaration = f"static int\tgrp_NewOrderSingle_NoPartyIDs[] = {literal};"
        assert "// NewOrderSingle [D] group NoPartyIDs" in source
        assert declaration in source
        assert source.index(declaration) < source.index("_ofixMsgSpec\tmsg_NewOrderSingle")
        assert "grp_Heartbeat" not in source

    def test_message_names_do_not_clash_with_tables(self, compile_text):
        """Test messages named tags and msgs do not redefine the shared tables."""
        spec = compile_text(named_messages("tags", "msgs"))
        source = TableGenerator(spec).render(Language.C)

        assert "static struct _ofixMsgSpec\tmsg_tags = {" in source
        assert "static struct _ofixMsgSpec\tmsg_msgs = {" in source
        assert source.count("\ttags[]") == 1
        assert source.count("\t*msgs[]") == 1

    def test_identifier_collision(self, compile_text):
        """Test names mapping to the same C identifier are rejected."""
        spec = compile_text(named_messages("Foo-Bar", "Foo_Bar"))

        with pytest.raises(EmissionError) as exc_info:
            TableGenerator(spec).render(Language.C)

        assert "Foo_Bar" in str(exc_info.value)
        assert exc_info.value.context["language"] == "c"

    def test_punctuation_in_names(self, compile_text):
        """Test characters outside C identifiers are replaced."""
        spec = compile_text(named_messages("Foo-Bar"))
        source = TableGenerator(spec).render(Language.C)

        assert "static struct _ofixMsgSpec\tmsg_Foo_Bar = {" in source
        assert '    "Foo-Bar", // name' in source

    def test_deterministic(self, fix44_spec, fix44_root, compiler_config):
        """Test identical input renders identical output."""
        from fixspec.dictionary.spec import Spec

        first = TableGenerator(fix44_spec).render(Language.C)
        second = TableGenerator(Spec.compile(fix44_root, config=compiler_config)).render(Language.C)

        assert first == second


class TestPythonGenerator:
    """Tests for the Python renderer."""

    def test_module_is_importable(self, fix44_spec):
        """Test the generated module defines the tables."""
        source = TableGenerator(fix44_spec).render(Language.PYTHON)
        namespace = {}
        exec(compile(source, "fix44Spec.py", "exec"), namespace)

        assert namespace["SYMBOL"] == "fix44Spec"
        assert namespace["VERSION"] == (4, 4)
        assert namespace["TAGS"][0] == (8, "STR", "HEADER", 0, 1, "8=")
        assert namespace["TAGS"][-1] == (0, None, None, 0, 0, None)
        assert list(namespace["MESSAGES"]) == ["0", "A", "D"]

        order = namespace["MESSAGES"]["D"]
        assert order["tid"] == 68
        assert order["name"] == "NewOrderSingle"
        assert order["tag_sequence"][453] == 12
        assert len(order["tag_sequence"]) == 1000

    def test_preamble(self, fix44_spec):
        """Test the module docstring names its source."""
        source = TableGenerator(fix44_spec).render(Language.PYTHON)

        assert "auto-generated from ref/FIX44.xml and should not be modified." in source

    def test_group_tables(self, fix44_spec):
        """Test group tag sequences are exported per message."""
        source = TableGenerator(fix44_spec).render(Language.PYTHON)
        namespace = {}
        exec(compile(source, "fix44Spec.py", "exec"), namespace)

        groups = namespace["MESSAGES"]["D"]["groups"]
        assert list(groups) == ["NoPartyIDs"]
        assert groups["NoPartyIDs"] == tuple(fix44_spec.find_message("D").group_sequences["NoPartyIDs"])
        assert groups["NoPartyIDs"][448] == 1
        assert groups["NoPartyIDs"][452] == 2
        assert namespace["MESSAGES"]["0"]["groups"] == {}


class TestGenerate:
    """Tests for writing generated tables."""

    def test_generate_file(self, fix44_spec, tmp_path):
        """Test output is written to the given file."""
        output = tmp_path / "out" / "fix44.c"

        path = TableGenerator(fix44_spec).generate(Language.C, str(output))

        assert path == output
        assert output.read_text(encoding="utf-8") == TableGenerator(fix44_spec).render(Language.C)

    def test_generate_into_directory(self, fix44_spec, tmp_path):
        """Test a directory target gets the default file name."""
        path = TableGenerator(fix44_spec).generate(Language.PYTHON, str(tmp_path))

        assert path == tmp_path / "fix44Spec.py"
        assert path.exists()

    @pytest.mark.parametrize("umask, mode", [(0o022, 0o644), (0o077, 0o600), (0o002, 0o664)])
    def test_file_mode_follows_umask(self, fix44_spec, tmp_path, umask, mode):
        """Test the written file gets the usual permissions for the umask."""
        previous = os.umask(umask)
        try:
            path = TableGenerator(fix44_spec).generate(Language.C, str(tmp_path / "fix44.c"))
        finally:
            os.umask(previous)

        assert stat.S_IMODE(os.stat(path).st_mode) == mode

    def test_emitted_counter(self, fix44_spec, tmp_path):
        """Test written artifacts are counted per language."""
        labels = {"language": "c"}
        before = REGISTRY.get_sample_value("fixspec_tables_emitted_total", labels) or 0

        TableGenerator(fix44_spec).generate(Language.C, str(tmp_path / "fix44.c"))

        assert REGISTRY.get_sample_value("fixspec_tables_emitted_total", labels) == before + 1

    def test_render_failure_writes_nothing(self, fix44_spec, tmp_path):
        """Test a failing renderer leaves no file behind."""

        class FailingGenerator(BaseLanguageGenerator):
            language = Language.C

            def render(self):
                raise SchemaError(SchemaErrorKind.UNKNOWN_FIELD_TYPE, "boom")

        generator = TableGenerator(fix44_spec)
        generator.register_generator(Language.C, FailingGenerator)
        output = tmp_path / "fix44.c"

        with pytest.raises(SchemaError):
            generator.generate(Language.C, str(output))

        assert not output.exists()
        assert list(tmp_path.iterdir()) == []

    def test_write_failure(self, fix44_spec, tmp_path):
        """Test an unwritable target raises an emission error."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(EmissionError) as exc_info:
            TableGenerator(fix44_spec).generate(Language.C, str(blocker / "fix44.c"))

        assert exc_info.value.error_code == "EMISSION_ERROR"
        assert exc_info.value.context["language"] == "c"

    def test_unknown_language(self):
        """Test unsupported language names are rejected."""
        with pytest.raises(EmissionError):
            Language.from_name("cobol")

        assert Language.from_name("C") is Language.C
