"""Text encodings offered for importing lyrics, and sample decoding."""

from __future__ import annotations

import codecs

_ENCODINGS: dict[str, str] = {
    "CP1256": "Arabic",
    "CP1257": "Baltic",
    "CP1250": "Central European",
    "GB18030": "Chinese Simplified",
    "GBK": "Chinese Simplified",
    "GB2313": "Chinese Simplified",
    "Big5": "Chinese Traditional",
    "Big5-HKSCS": "Chinese Traditional",
    "CP1251": "Cyrillic",
    "KOI8-R": "Cyrillic",
    "CP1253": "Greek",
    "CP1255": "Hebrew",
    "eucJP": "Japanese",
    "JIS7": "Japanese",
    "Shift-JIS": "Japanese",
    "eucKR": "Korean",
    "TSCII": "Tamil",
    "TIS-620": "Thai",
    "KOI8-U": "Ukrainian",
    "CP1254": "Turkish",
    "CP1258": "Vietnamese",
    "UTF-8": "Unicode",
    "UTF-16": "Unicode",
    "CP1252": "Western",
}

_CODEC_NAMES: dict[str, str] = {
    "CP1250": "cp1250",
    "CP1251": "cp1251",
    "CP1252": "cp1252",
    "CP1253": "cp1253",
    "CP1254": "cp1254",
    "CP1255": "cp1255",
    "CP1256": "cp1256",
    "CP1257": "cp1257",
    "CP1258": "cp1258",
    "GB18030": "gb18030",
    "GBK": "gbk",
    "GB2313": "gb2312",
    "Big5": "big5",
    "Big5-HKSCS": "big5hkscs",
    "KOI8-R": "koi8_r",
    "KOI8-U": "koi8_u",
    "eucJP": "euc_jp",
    "JIS7": "iso2022_jp",
    "Shift-JIS": "shift_jis",
    "eucKR": "euc_kr",
    "TIS-620": "tis_620",
    "UTF-8": "utf-8",
    "UTF-16": "utf-16",
}


def supported_encodings() -> dict[str, str]:
    """Return encoding name -> language, ordered by encoding name."""
    return {name: _ENCODINGS[name] for name in sorted(_ENCODINGS)}


def encoding_label(name: str) -> str:
    """Return the display label ``"<language> - <name>"`` for an encoding."""
    return f"{_ENCODINGS[name]} - {name}"


def decode_sample(data: bytes, encoding: str) -> str:
    """Decode bytes with one of the supported encodings.

    Invalid sequences are replaced. Raises LookupError if the encoding is
    not supported or no decoder is available for it.
    """
    if encoding not in _ENCODINGS:
        raise LookupError(f"unsupported encoding: {encoding!r}")
    codec = _CODEC_NAMES.get(encoding)
    if codec is None:
        raise LookupError(f"no decoder available for {encoding!r}")
    codecs.lookup(codec)
    return bytes(data).decode(codec, errors="replace")