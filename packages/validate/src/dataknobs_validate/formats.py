"""Named string formats shared by ``StringValidator.format`` and the ``v`` helpers.

Each format is a predicate over an already kind-checked string. Formats are
looked up by name, so configuration can refer to them as
``{"type": "string", "format": "hostname"}``.
"""

from __future__ import annotations

import ipaddress
import re
from collections.abc import Callable

HOSTNAME_REGEX = re.compile(
    r"^(?=.{1,253}$)(?:(?!-)[a-zA-Z0-9-]{1,63}(?<!-)\.)+[a-zA-Z]{2,63}$"
)
# Python's re has no Unicode property classes; these ranges cover the emoji blocks
_EMOJI_CHAR = (
    "[\U0001F000-\U0001FAFF\u2600-\u27bf\u2b00-\u2bff\u2300-\u23ff"
    "\u2190-\u21ff\u3030\u303d\u3297\u3299\u00a9\u00ae\u203c\u2049\u2122\u2139]"
    "[\ufe0f\U0001F3FB-\U0001F3FF]*"
)
EMOJI_REGEX = re.compile(
    "^(?:" + _EMOJI_CHAR + "|[\U0001F1E6-\U0001F1FF]{2})(?:\u200d" + _EMOJI_CHAR + ")*$"
)
BASE64_REGEX = re.compile(r"^(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?$")
BASE64URL_REGEX = re.compile(r"^[A-Za-z0-9_-]*$")
HEX_REGEX = re.compile(r"^[0-9a-fA-F]*$")
JWT_REGEX = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*$")
NANOID_REGEX = re.compile(r"^[A-Za-z0-9_-]{21}$")
CUID_REGEX = re.compile(r"^c[^\s-]{8,}$", re.IGNORECASE)
CUID2_REGEX = re.compile(r"^[0-9a-z]+$")
ULID_REGEX = re.compile(r"^[0-9A-HJKMNP-TV-Z]{26}$")
MAC_REGEX = re.compile(r"^([0-9A-Fa-f]{2}:){5}[0-9A-Fa-f]{2}$")
E164_REGEX = re.compile(r"^\+[1-9]\d{1,14}$")
UUIDV4_REGEX = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE
)
ISO_DATE_REGEX = re.compile(r"^\d{4}-(?:0[1-9]|1[0-2])-(?:0[1-9]|[12]\d|3[01])$")
ISO_TIME_REGEX = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d(?::[0-5]\d(?:\.\d+)?)?$")
ISO_DATETIME_REGEX = re.compile(
    r"^\d{4}-(?:0[1-9]|1[0-2])-(?:0[1-9]|[12]\d|3[01])"
    r"T(?:[01]\d|2[0-3]):[0-5]\d:[0-5]\d(?:\.\d+)?Z?$"
)
ISO_DURATION_REGEX = re.compile(
    r"^P(?!$)(?:\d+Y)?(?:\d+M)?(?:\d+W)?(?:\d+D)?"
    r"(?:T(?=\d)(?:\d+H)?(?:\d+M)?(?:\d+(?:\.\d+)?S)?)?$"
)

HASH_LENGTHS = {
    "md5": 32,
    "sha1": 40,
    "sha256": 64,
    "sha384": 96,
    "sha512": 128,
}


def _matcher(regex: re.Pattern) -> Callable[[str], bool]:
    return lambda text: regex.match(text) is not None


def _is_cidr(text: str, version: int) -> bool:
    if "/" not in text:
        return False
    try:
        network = ipaddress.ip_network(text, strict=False)
    except ValueError:
        return False
    return network.version == version


def hash_matcher(algorithm: str) -> Callable[[str], bool]:
    """Predicate for the hex digest of ``algorithm``."""
    length = HASH_LENGTHS[algorithm]
    regex = re.compile(rf"^[a-fA-F0-9]{{{length}}}$")
    return _matcher(regex)


STRING_FORMATS: dict[str, Callable[[str], bool]] = {
    "hostname": _matcher(HOSTNAME_REGEX),
    "emoji": _matcher(EMOJI_REGEX),
    "base64": _matcher(BASE64_REGEX),
    "base64url": _matcher(BASE64URL_REGEX),
    "hex": _matcher(HEX_REGEX),
    "jwt": _matcher(JWT_REGEX),
    "nanoid": _matcher(NANOID_REGEX),
    "cuid": _matcher(CUID_REGEX),
    "cuid2": _matcher(CUID2_REGEX),
    "ulid": _matcher(ULID_REGEX),
    "mac": _matcher(MAC_REGEX),
    "cidrv4": lambda text: _is_cidr(text, 4),
    "cidrv6": lambda text: _is_cidr(text, 6),
    "e164": _matcher(E164_REGEX),
    "uuidv4": _matcher(UUIDV4_REGEX),
    "iso_date": _matcher(ISO_DATE_REGEX),
    "iso_time": _matcher(ISO_TIME_REGEX),
    "iso_datetime": _matcher(ISO_DATETIME_REGEX),
    "iso_duration": _matcher(ISO_DURATION_REGEX),
}
