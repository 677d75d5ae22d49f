"""
FIXSPEC - Constants and Compilation Limits

This module defines compiler-wide constants: tag table bounds, dictionary
markup names and the strings used by the generated artifacts.
"""

# =============================================================================
# TAG TABLE LIMITS
# =============================================================================

# Largest tag number a message's tag sequence table can index. The table has
# DEFAULT_MAX_TAG + 1 slots, slot 0 is never used.
DEFAULT_MAX_TAG = 999

# Upper bound accepted from configuration for a per-version override
MAX_CONFIGURABLE_TAG = 99_999

# Value stored in a tag sequence slot for a tag that is not part of the message
TAG_NOT_PRESENT = 0

# Tag value of the sentinel row terminating the generated tag table
TAG_TABLE_SENTINEL = 0

# Tag value used for "no related field"
NO_RELATED_TAG = 0


# =============================================================================
# DICTIONARY MARKUP
# =============================================================================

# Section names located in the dictionary document
SECTION_FIELDS = "fields"
SECTION_COMPONENTS = "components"
SECTION_HEADER = "header"
SECTION_TRAILER = "trailer"
SECTION_MESSAGES = "messages"

REQUIRED_SECTIONS = (
    SECTION_FIELDS,
    SECTION_COMPONENTS,
    SECTION_HEADER,
    SECTION_TRAILER,
    SECTION_MESSAGES,
)

# Declaration node names
NODE_FIELD = "field"
NODE_GROUP = "group"
NODE_COMPONENT = "component"
NODE_MESSAGE = "message"
NODE_VALUE = "value"

MEMBER_NODE_NAMES = frozenset({NODE_FIELD, NODE_GROUP, NODE_COMPONENT})

# Literal marking a member as required
REQUIRED_YES = "Y"


# =============================================================================
# GENERATED OUTPUT
# =============================================================================

# Directory the dictionary sources are referenced from in generated preambles
DEFAULT_REFERENCE_DIR = "ref"

# Headers included by the generated C tables
C_INCLUDES = (
    "ofix/tagspec.h",
    "ofix/tagreq.h",
    "ofix/msgspec.h",
    "ofix/versionspec.h",
)

# Environment variable prefix for configuration overrides
ENV_PREFIX = "FIXSPEC_"
