"""String helpers for line-protocol names and escaping.

The ``REGEX_UNESC_*`` patterns match a space, equals sign or comma that is
not preceded by a backslash.  A character at the start of the string has no
predecessor and therefore counts as unescaped.
"""

from __future__ import annotations

import re

from metrics_influxdb.errors import NullInputError

REGEX_UNESC_SPACE = r"(?<!\\)[ ]"
REGEX_UNESC_EQUAL = r"(?<!\\)[=]"
REGEX_UNESC_COMMA = r"(?<!\\)[,]"

UNESC_SPACE_RE = re.compile(REGEX_UNESC_SPACE)
UNESC_EQUAL_RE = re.compile(REGEX_UNESC_EQUAL)
UNESC_COMMA_RE = re.compile(REGEX_UNESC_COMMA)


def lower_and_replace_spaces(
    value: str, lowercase: bool = True, replacement: str | None = "_"
) -> str:
    """Lowercase *value* and replace its unescaped spaces.

    Args:
        value:       The string to normalize.
        lowercase:   Convert to lowercase when True.
        replacement: Text substituted for every unescaped space.  ``""``
                     removes spaces, ``None`` leaves them untouched.

    Escaped spaces (``\\ ``) are never altered.

    Raises:
        NullInputError: if *value* is ``None``.
    """
    if value is None:
        raise NullInputError("value must not be None")
    if lowercase:
        value = value.lower()
    if replacement is not None:
        value = UNESC_SPACE_RE.sub(lambda _: replacement, value)
    return value


def _escape(value: str, *patterns: re.Pattern[str]) -> str:
    for pattern in patterns:
        value = pattern.sub(lambda m: "\\" + m.group(0), value)
    # A trailing backslash would escape the separator that follows it.
    if (len(value) - len(value.rstrip("\\"))) % 2:
        value += "\\"
    return value


def escape_measurement(value: str) -> str:
    """Escape unescaped commas and spaces in a measurement name."""
    return _escape(value, UNESC_COMMA_RE, UNESC_SPACE_RE)


def escape_key(value: str) -> str:
    """Escape unescaped commas, equals signs and spaces in a tag or field key."""
    return _escape(value, UNESC_COMMA_RE, UNESC_EQUAL_RE, UNESC_SPACE_RE)


escape_tag_value = escape_key


def escape_string_field(value: str) -> str:
    """Escape backslashes and double quotes for a quoted string field value."""
    return value.replace("\\", "\\\\").replace('"', '\\"')
