"""
FIX Dictionary Codes and Constants

Defines:
- Wire types understood by the runtime encoder/decoder
- Field types as declared in a FIX data dictionary
- Field locations (body, header, trailer)
- Member kinds (field, group, component)
"""

from enum import Enum
from typing import Optional


class WireType(Enum):
    """Primitive wire types of the runtime protocol engine."""

    CHAR = ("OFIX_CHAR", "Single character")
    INT = ("OFIX_INT", "Integer")
    FLOAT = ("OFIX_FLOAT", "Floating point or decimal")
    BOOL = ("OFIX_BOOL", "Y/N boolean")
    STR = ("OFIX_STR", "String")
    MULTI_STR = ("OFIX_MULTI_STR", "Space separated string values")
    DATA = ("OFIX_DATA", "Raw data")
    LENGTH = ("OFIX_LENGTH", "Length of a data field")
    SEQ_NUM = ("OFIX_SEQNUM", "Sequence number")
    NUM_IN_GROUP = ("OFIX_NUMINGROUP", "Repeating group count")
    TAG_NUM = ("OFIX_TAGNUM", "Tag number")
    DATE = ("OFIX_DATE", "Date")
    TIME = ("OFIX_TIME", "Time of day")
    TIMESTAMP = ("OFIX_TIMESTAMP", "Date and time")
    TZ_TIME = ("OFIX_TZTIME", "Time of day with zone offset")
    TZ_TIMESTAMP = ("OFIX_TZTIMESTAMP", "Date and time with zone offset")
    MONTH_YEAR = ("OFIX_MONTHYEAR", "Month and year")
    DAY_OF_MONTH = ("OFIX_DAYOFMONTH", "Day of month")
    COUNTRY = ("OFIX_COUNTRY", "ISO 3166 country code")
    CURRENCY = ("OFIX_CURRENCY", "ISO 4217 currency code")
    EXCHANGE = ("OFIX_EXCHANGE", "ISO 10383 market identifier code")
    LANGUAGE = ("OFIX_LANG", "ISO 639-1 language code")

    def __init__(self, identifier: str, description: str):
        self._identifier = identifier
        self._description = description

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def description(self) -> str:
        return self._description


class FieldType(Enum):
    """Field types declared by the type attribute of a dictionary field."""

    # Strings and characters
    STRING = ("STRING", WireType.STR)
    CHAR = ("CHAR", WireType.CHAR)
    MULTIPLEVALUESTRING = ("MULTIPLEVALUESTRING", WireType.MULTI_STR)
    MULTIPLESTRINGVALUE = ("MULTIPLESTRINGVALUE", WireType.MULTI_STR)
    MULTIPLECHARVALUE = ("MULTIPLECHARVALUE", WireType.MULTI_STR)
    BOOLEAN = ("BOOLEAN", WireType.BOOL)
    DATA = ("DATA", WireType.DATA)
    XMLDATA = ("XMLDATA", WireType.DATA)

    # Integers
    INT = ("INT", WireType.INT)
    LENGTH = ("LENGTH", WireType.LENGTH)
    SEQNUM = ("SEQNUM", WireType.SEQ_NUM)
    NUMINGROUP = ("NUMINGROUP", WireType.NUM_IN_GROUP)
    TAGNUM = ("TAGNUM", WireType.TAG_NUM)
    DAYOFMONTH = ("DAYOFMONTH", WireType.DAY_OF_MONTH)

    # Floats and amounts
    FLOAT = ("FLOAT", WireType.FLOAT)
    AMT = ("AMT", WireType.FLOAT)
    PRICE = ("PRICE", WireType.FLOAT)
    PRICEOFFSET = ("PRICEOFFSET", WireType.FLOAT)
    QTY = ("QTY", WireType.FLOAT)
    PERCENTAGE = ("PERCENTAGE", WireType.FLOAT)

    # Dates and times
    UTCTIMESTAMP = ("UTCTIMESTAMP", WireType.TIMESTAMP)
    UTCTIMEONLY = ("UTCTIMEONLY", WireType.TIME)
    UTCDATEONLY = ("UTCDATEONLY", WireType.DATE)
    UTCDATE = ("UTCDATE", WireType.DATE)
    LOCALMKTDATE = ("LOCALMKTDATE", WireType.DATE)
    DATE = ("DATE", WireType.DATE)
    TIME = ("TIME", WireType.TIMESTAMP)
    MONTHYEAR = ("MONTHYEAR", WireType.MONTH_YEAR)
    TZTIMEONLY = ("TZTIMEONLY", WireType.TZ_TIME)
    TZTIMESTAMP = ("TZTIMESTAMP", WireType.TZ_TIMESTAMP)

    # Codes
    COUNTRY = ("COUNTRY", WireType.COUNTRY)
    CURRENCY = ("CURRENCY", WireType.CURRENCY)
    EXCHANGE = ("EXCHANGE", WireType.EXCHANGE)
    LANGUAGE = ("LANGUAGE", WireType.LANGUAGE)

    def __init__(self, code: str, wire_type: WireType):
        self._code = code
        self._wire_type = wire_type

    @property
    def code(self) -> str:
        return self._code

    @property
    def wire_type(self) -> WireType:
        return self._wire_type

    @classmethod
    def from_code(cls, code: Optional[str]) -> Optional["FieldType"]:
        """Get field type from the dictionary type string (case-insensitive)."""
        if not code:
            return None
        code = code.strip().upper()
        for field_type in cls:
            if field_type.code == code:
                return field_type
        return None


class FieldLocation(Enum):
    """Section of a message a field may appear in."""

    BODY = ("Body", "OFIX_BODY")
    HEADER = ("Header", "OFIX_HEADER")
    TRAILER = ("Trailer", "OFIX_TRAILER")

    def __init__(self, label: str, identifier: str):
        self._label = label
        self._identifier = identifier

    @property
    def label(self) -> str:
        return self._label

    @property
    def identifier(self) -> str:
        return self._identifier


class MemberKind(str, Enum):
    """Kinds of structural member nodes."""

    FIELD = "field"
    GROUP = "group"
    COMPONENT = "component"

    @classmethod
    def from_node_name(cls, name: str) -> Optional["MemberKind"]:
        """Get member kind from a declaration node name, None if not a member."""
        for kind in cls:
            if kind.value == name:
                return kind
        return None
