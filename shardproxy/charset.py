"""MySQL character sets and collations known to the proxy."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

DEFAULT_CHARSET = "utf8"
DEFAULT_COLLATION_ID = 33
DEFAULT_COLLATION_NAME = "utf8_general_ci"

_QUOTES = "\"'`"
_GAP = "-"

# Collations numbered from 1 upwards; "-" marks an unused id.
_NAMED_FROM_1 = """
    big5_chinese_ci latin2_czech_cs dec8_swedish_ci cp850_general_ci
    latin1_german1_ci hp8_english_ci koi8r_general_ci latin1_swedish_ci
    latin2_general_ci swe7_swedish_ci ascii_general_ci ujis_japanese_ci
    sjis_japanese_ci cp1251_bulgarian_ci latin1_danish_ci hebrew_general_ci
    - tis620_thai_ci euckr_korean_ci latin7_estonian_cs
    latin2_hungarian_ci koi8u_general_ci cp1251_ukrainian_ci gb2312_chinese_ci
    greek_general_ci cp1250_general_ci latin2_croatian_ci gbk_chinese_ci
    cp1257_lithuanian_ci latin5_turkish_ci latin1_german2_ci armscii8_general_ci
    utf8_general_ci cp1250_czech_cs ucs2_general_ci cp866_general_ci
    keybcs2_general_ci macce_general_ci macroman_general_ci cp852_general_ci
    latin7_general_ci latin7_general_cs macce_bin cp1250_croatian_ci
    utf8mb4_general_ci utf8mb4_bin latin1_bin latin1_general_ci
    latin1_general_cs cp1251_bin cp1251_general_ci cp1251_general_cs
    macroman_bin utf16_general_ci utf16_bin utf16le_general_ci
    cp1256_general_ci cp1257_bin cp1257_general_ci utf32_general_ci
    utf32_bin utf16le_bin binary
"""

# Binary collations numbered from 64, given by charset.
_BIN_FROM_64 = """
    armscii8 ascii cp1250 cp1256 cp866 dec8 greek hebrew hp8 keybcs2 koi8r
    koi8u - latin2 latin5 latin7 cp850 cp852 swe7 utf8 big5 euckr gb2312
    gbk sjis tis620 ucs2 ujis
"""

_NAMED_FROM_92 = """
    geostd8_general_ci geostd8_bin latin1_spanish_ci cp932_japanese_ci
    cp932_bin eucjpms_japanese_ci eucjpms_bin cp1250_polish_ci
"""

# Each Unicode charset has the same run of language collations.
_UNICODE_SUFFIXES = """
    unicode_ci icelandic_ci latvian_ci romanian_ci slovenian_ci polish_ci
    estonian_ci spanish_ci swedish_ci turkish_ci czech_ci danish_ci
    lithuanian_ci slovak_ci spanish2_ci roman_ci persian_ci esperanto_ci
    hungarian_ci sinhala_ci german2_ci croatian_ci unicode_520_ci
    vietnamese_ci
"""

_UNICODE_BLOCKS = (("utf16", 101), ("ucs2", 128), ("utf32", 160), ("utf8", 192), ("utf8mb4", 224))

_MYSQL500 = (("ucs2", 159), ("utf8", 223))

# The default collation of every supported charset.
_DEFAULT_COLLATIONS = """
    big5_chinese_ci dec8_swedish_ci cp850_general_ci hp8_english_ci
    koi8r_general_ci latin1_swedish_ci latin2_general_ci swe7_swedish_ci
    ascii_general_ci ujis_japanese_ci sjis_japanese_ci hebrew_general_ci
    tis620_thai_ci euckr_korean_ci koi8u_general_ci gb2312_chinese_ci
    greek_general_ci cp1250_general_ci gbk_chinese_ci latin5_turkish_ci
    armscii8_general_ci utf8_general_ci ucs2_general_ci cp866_general_ci
    keybcs2_general_ci macce_general_ci macroman_general_ci cp852_general_ci
    latin7_general_ci utf8mb4_general_ci cp1251_general_ci utf16_general_ci
    utf16le_general_ci cp1256_general_ci cp1257_general_ci utf32_general_ci
    binary geostd8_general_ci cp932_japanese_ci eucjpms_japanese_ci
"""


def _build_collations() -> dict[int, str]:
    table: dict[int, str] = {}

    def put_run(start: int, names: Iterable[str]) -> None:
        for cid, name in enumerate(names, start):
            if name != _GAP:
                table[cid] = name

    put_run(1, _NAMED_FROM_1.split())
    put_run(64, (n if n == _GAP else f"{n}_bin" for n in _BIN_FROM_64.split()))
    put_run(92, _NAMED_FROM_92.split())
    suffixes = _UNICODE_SUFFIXES.split()
    for charset, start in _UNICODE_BLOCKS:
        put_run(start, (f"{charset}_{suffix}" for suffix in suffixes))
    for charset, cid in _MYSQL500:
        table[cid] = f"{charset}_general_mysql500_ci"
    return dict(sorted(table.items()))


COLLATIONS: Mapping[int, str] = MappingProxyType(_build_collations())

COLLATION_NAMES: Mapping[str, int] = MappingProxyType(
    {name: cid for cid, name in COLLATIONS.items()}
)

# Charset name -> id of its default collation.
CHARSET_IDS: Mapping[str, int] = MappingProxyType(
    {name.split("_", 1)[0]: COLLATION_NAMES[name] for name in _DEFAULT_COLLATIONS.split()}
)

# Charset name -> name of its default collation.
CHARSETS: Mapping[str, str] = MappingProxyType(
    {charset: COLLATIONS[cid] for charset, cid in CHARSET_IDS.items()}
)


def default_collation_id(charset: str) -> int:
    """Return the id of the default collation of ``charset``."""
    try:
        return CHARSET_IDS[charset]
    except KeyError:
        raise ValueError(f"invalid charset {charset}") from None


def collation_name(collation_id: int) -> str:
    """Return the name of the collation with the given id."""
    try:
        return COLLATIONS[collation_id]
    except KeyError:
        raise ValueError(f"invalid collation {collation_id}") from None


def resolve_charset(charset: str, collation_id: int = 0) -> tuple[str, int]:
    """Normalise a charset name and collation id as used by ``SET NAMES``.

    Quotes around the charset are stripped; a collation id of 0 selects the
    charset's default collation. Raises ValueError for an unknown charset or
    collation.
    """
    charset = charset.strip(_QUOTES)
    if collation_id == 0:
        default_name = CHARSETS.get(charset)
        collation_id = COLLATION_NAMES.get(default_name, 0) if default_name else 0
    if charset not in CHARSET_IDS:
        raise ValueError(f"invalid charset {charset}")
    if collation_id not in COLLATIONS:
        raise ValueError(f"invalid collation {collation_id}")
    return charset, collation_id