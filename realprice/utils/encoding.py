"""Best-effort text recovery for MOI CSV payloads.

Recent releases are UTF-8 (often with a BOM); older ones are Big5/CP950.
The check is heuristic: UTF-8 first, and only when the result carries the
U+FFFD replacement marker is the legacy codec tried. A file that genuinely
contains U+FFFD is therefore routed to the legacy path as well; callers get
the chosen encoding back so the record trail shows which path was taken.

Legacy files may carry user-defined characters (造字, e.g. 0xFA40) that no
codec maps. Those bytes are replaced and the label gets a ``+replace`` suffix.
"""
from __future__ import annotations

import logging
from typing import NamedTuple

from realprice.core.errors import DecodeError

LOGGER = logging.getLogger(__name__)

PRIMARY_ENCODING = "utf-8"
DEFAULT_LEGACY_ENCODING = "cp950"
REPLACEMENT_CHAR = "\ufffd"
REPLACE_SUFFIX = "+replace"


class DecodedText(NamedTuple):
    text: str
    encoding: str


def decode_payload(raw: bytes, legacy_encoding: str = DEFAULT_LEGACY_ENCODING) -> DecodedText:
    # utf-8-sig: strips the BOM so the first header name stays clean
    text = raw.decode("utf-8-sig", errors="replace")
    if REPLACEMENT_CHAR not in text:
        return DecodedText(text, PRIMARY_ENCODING)

    try:
        return DecodedText(raw.decode(legacy_encoding), legacy_encoding)
    except LookupError as exc:
        raise DecodeError(f"unknown legacy encoding {legacy_encoding!r}: {exc}") from exc
    except UnicodeDecodeError as exc:
        LOGGER.warning("unmappable %s bytes replaced: %s", legacy_encoding, exc)

    text = raw.decode(legacy_encoding, errors="replace")
    return DecodedText(text, legacy_encoding + REPLACE_SUFFIX)


__all__ = [
    "DecodedText",
    "decode_payload",
    "PRIMARY_ENCODING",
    "DEFAULT_LEGACY_ENCODING",
    "REPLACE_SUFFIX",
]
