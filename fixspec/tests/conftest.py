"""
FIXSPEC - Pytest Configuration and Fixtures

This module provides shared fixtures for the compiler and generator tests.
"""

import pytest
from pathlib import Path

from fixspec.core import config as config_module
from fixspec.core.config import CompilerConfig
from fixspec.dictionary.document import SpecNode, parse_document
from fixspec.dictionary.spec import Spec


# A small FIX 4.4 dictionary in QuickFIX layout
FIX44_DICTIONARY = """<?xml version="1.0" encoding="UTF-8"?>
<fix type="FIX" major="4" minor="4" servicepack="0">
  <header>
    <field name="BeginString" required="Y"/>
    <field name="BodyLength" required="Y"/>
    <field name="MsgType" required="Y"/>
    <field name="SenderCompID" required="Y"/>
    <field name="TargetCompID" required="Y"/>
    <field name="MsgSeqNum" required="Y"/>
    <field name="SendingTime" required="Y"/>
  </header>
  <trailer>
    <field name="SignatureLength" required="N"/>
    <field name="Signature" required="N"/>
    <field name="CheckSum" required="Y"/>
  </trailer>
  <messages>
    <message name="Heartbeat" msgtype="0" msgcat="admin">
      <field name="TestReqID" required="N"/>
    </message>
    <message name="NewOrderSingle" msgtype="D" msgcat="app">
      <field name="ClOrdID" required="Y"/>
      <component name="Instrument" required="Y"/>
      <field name="Side" required="Y"/>
      <group name="NoPartyIDs" required="N">
        <field name="PartyID" required="N"/>
        <field name="PartyRole" required="N"/>
      </group>
      <field name="EncodedTextLen" required="N"/>
      <field name="EncodedText" required="N"/>
    </message>
    <message name="Logon" msgtype="A" msgcat="admin">
      <field name="EncryptMethod" required="Y"/>
      <field name="HeartBtInt" required="Y"/>
    </message>
  </messages>
  <components>
    <component name="Instrument">
      <field name="Symbol" required="Y"/>
      <field name="SecurityID" required="N"/>
    </component>
  </components>
  <fields>
    <field number="8" name="BeginString" type="STRING"/>
    <field number="9" name="BodyLength" type="LENGTH"/>
    <field number="10" name="CheckSum" type="STRING"/>
    <field number="11" name="ClOrdID" type="STRING"/>
    <field number="34" name="MsgSeqNum" type="SEQNUM"/>
    <field number="35" name="MsgType" type="STRING">
      <value enum="0" description="HEARTBEAT"/>
      <value enum="A" description="LOGON"/>
      <value enum="D" description="ORDER_SINGLE"/>
    </field>
    <field number="48" name="SecurityID" type="STRING"/>
    <field number="49" name="SenderCompID" type="STRING"/>
    <field number="52" name="SendingTime" type="UTCTIMESTAMP"/>
    <field number="54" name="Side" type="CHAR">
      <value enum="1" description="BUY"/>
      <value enum="2" description="SELL"/>
    </field>
    <field number="55" name="Symbol" type="STRING"/>
    <field number="56" name="TargetCompID" type="STRING"/>
    <field number="89" name="Signature" type="DATA"/>
    <field number="93" name="SignatureLength" type="LENGTH"/>
    <field number="98" name="EncryptMethod" type="INT"/>
    <field number="108" name="HeartBtInt" type="INT"/>
    <field number="112" name="TestReqID" type="STRING"/>
    <field number="354" name="EncodedTextLen" type="LENGTH"/>
    <field number="355" name="EncodedText" type="DATA"/>
    <field number="448" name="PartyID" type="STRING"/>
    <field number="452" name="PartyRole" type="INT"/>
    <field number="453" name="NoPartyIDs" type="NUMINGROUP"/>
  </fields>
</fix>
"""

HEADER_TAGS = (8, 9, 35, 49, 56, 34, 52)
TRAILER_TAGS = (93, 89, 10)


def build_dictionary(
    fields: str = "",
    header: str = "",
    trailer: str = "",
    messages: str = "",
    components: str = "",
    major: str = "4",
    minor: str = "4",
) -> str:
    """Assemble a dictionary document from section bodies."""
    return (
        f'<fix type="FIX" major="{major}" minor="{minor}">'
        f"<header>{header}</header>"
        f"<trailer>{trailer}</trailer>"
        f"<messages>{messages}</messages>"
        f"<components>{components}</components>"
        f"<fields>{fields}</fields>"
        f"</fix>"
    )


def field_node(number, name, field_type="STRING") -> SpecNode:
    """Build a <field> declaration node."""
    attributes = {"name": name, "type": field_type}
    if number is not None:
        attributes["number"] = str(number)
    return SpecNode(name="field", attributes=attributes)


@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    """Isolate tests from the global configuration and FIXSPEC_ variables."""
    for key in [
        "LOG_LEVEL",
        "JSON_LOGS",
        "MAX_TAG",
        "DERIVE_MAX_TAG",
        "EXPAND_COMPONENTS",
        "LANGUAGE",
        "REFERENCE_DIR",
    ]:
        monkeypatch.delenv(f"FIXSPEC_{key}", raising=False)
    monkeypatch.setattr(config_module, "_config", None)


@pytest.fixture
def compiler_config():
    """Default compiler configuration."""
    return CompilerConfig()


@pytest.fixture
def fix44_root():
    """Parsed FIX 4.4 test dictionary."""
    return parse_document(FIX44_DICTIONARY)


@pytest.fixture
def fix44_spec(fix44_root, compiler_config):
    """Compiled FIX 4.4 test dictionary."""
    return Spec.compile(fix44_root, config=compiler_config, source="ref/FIX44.xml")


@pytest.fixture
def dictionary_file(tmp_path) -> Path:
    """FIX 4.4 test dictionary written to disk."""
    path = tmp_path / "FIX44.xml"
    path.write_text(FIX44_DICTIONARY, encoding="utf-8")
    return path


@pytest.fixture
def compile_text(compiler_config):
    """Compile dictionary text with the default configuration."""
    def _compile(text, config=None):
        return Spec.compile(parse_document(text), config=config or compiler_config)
    return _compile
