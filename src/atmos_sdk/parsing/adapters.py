"""
JSON adapters keyed by data type

Each supported type has a ``Codec`` (encode to JSON text, decode from JSON
text). ``build_adapter_table`` assembles the table once; ``JsonAdapter``
receives it explicitly and consults it when reading or writing documents.
Types without a codec go through plain ``json``.
"""

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa, x448, x25519

from ..exceptions import DocumentParseError
from .data_bag import DataBagItem, decode_data_bag_item, encode_data_bag_item
from .key_material import (
    KeyMaterialKind,
    dump_certificate,
    dump_private_key,
    dump_public_key,
    load_certificate,
    load_private_key,
    load_public_key,
)

PRIVATE_KEY_CLASSES: Tuple[type, ...] = (
    rsa.RSAPrivateKey,
    ec.EllipticCurvePrivateKey,
    ed25519.Ed25519PrivateKey,
    ed448.Ed448PrivateKey,
    dsa.DSAPrivateKey,
    x25519.X25519PrivateKey,
    x448.X448PrivateKey,
)

PUBLIC_KEY_CLASSES: Tuple[type, ...] = (
    rsa.RSAPublicKey,
    ec.EllipticCurvePublicKey,
    ed25519.Ed25519PublicKey,
    ed448.Ed448PublicKey,
    dsa.DSAPublicKey,
    x25519.X25519PublicKey,
    x448.X448PublicKey,
)


@dataclass(frozen=True)
class Codec:
    """
    Encoder/decoder pair for one data type

    Attributes:
        encode: Value to JSON text
        decode: JSON text to value
        matches: Whether a value is handled by this codec
    """
    encode: Callable[[Any], str]
    decode: Callable[[str], Any]
    matches: Callable[[Any], bool]


def _json_string(value: str) -> str:
    return json.dumps(value)


def _read_json_string(text: str) -> str:
    value = _loads(text)
    if not isinstance(value, str):
        raise DocumentParseError("Expected a JSON string", "INVALID_FORMAT")
    return value


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise DocumentParseError(f"Invalid JSON: {e}", "PARSE_ERROR") from e


def encode_iso8601(value: datetime) -> str:
    return _json_string(value.isoformat())


def decode_iso8601(text: str) -> datetime:
    value = _read_json_string(text)
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise DocumentParseError(f"Invalid ISO-8601 date: {value}", "INVALID_DATE") from e


def build_adapter_table() -> Dict[Any, Codec]:
    """
    Build the type to codec table.

    Returns:
        dict: Codecs keyed by ``DataBagItem``, ``datetime`` and each
        ``KeyMaterialKind``
    """
    return {
        DataBagItem: Codec(
            encode=encode_data_bag_item,
            decode=decode_data_bag_item,
            matches=lambda value: isinstance(value, DataBagItem)
        ),
        KeyMaterialKind.PRIVATE_KEY: Codec(
            encode=lambda key: _json_string(dump_private_key(key)),
            decode=lambda text: load_private_key(_read_json_string(text)),
            matches=lambda value: isinstance(value, PRIVATE_KEY_CLASSES)
        ),
        KeyMaterialKind.PUBLIC_KEY: Codec(
            encode=lambda key: _json_string(dump_public_key(key)),
            decode=lambda text: load_public_key(_read_json_string(text)),
            matches=lambda value: isinstance(value, PUBLIC_KEY_CLASSES)
        ),
        KeyMaterialKind.CERTIFICATE: Codec(
            encode=lambda cert: _json_string(dump_certificate(cert)),
            decode=lambda text: load_certificate(_read_json_string(text)),
            matches=lambda value: isinstance(value, x509.Certificate)
        ),
        datetime: Codec(
            encode=encode_iso8601,
            decode=decode_iso8601,
            matches=lambda value: isinstance(value, datetime)
        ),
    }


class JsonAdapter:
    """
    Reads and writes JSON using an explicit codec table
    """

    def __init__(self, table: Dict[Any, Codec]):
        """
        Initialize the adapter.

        Args:
            table: Codecs keyed by type, as built by ``build_adapter_table``
        """
        self.table = dict(table)

    def codec_for(self, kind: Any) -> Optional[Codec]:
        return self.table.get(kind)

    def to_json(self, value: Any) -> str:
        """
        Serialize a value; values nested in lists or dicts use their codecs too.
        """
        codec = self._codec_for_value(value)
        if codec is not None:
            return codec.encode(value)
        return json.dumps(value, default=self._default)

    def from_json(self, text: str, kind: Any = None) -> Any:
        """
        Deserialize text as the given kind.

        Args:
            text: JSON text
            kind: Table key; plain ``json`` decoding when None or unknown

        Raises:
            DocumentParseError: If the text is malformed
        """
        codec = self.codec_for(kind) if kind is not None else None
        if codec is not None:
            return codec.decode(text)
        return _loads(text)

    def _codec_for_value(self, value: Any) -> Optional[Codec]:
        for codec in self.table.values():
            if codec.matches(value):
                return codec
        return None

    def _default(self, value: Any) -> Any:
        codec = self._codec_for_value(value)
        if codec is None:
            raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
        return json.loads(codec.encode(value))
