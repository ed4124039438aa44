"""
JSON and key material adapters for Atmos Python SDK
"""

from .key_material import (
    KeyMaterialKind,
    unescape_pem,
    load_private_key,
    load_public_key,
    load_certificate,
    load_key_material,
    dump_private_key,
    dump_public_key,
    dump_certificate,
)

from .data_bag import (
    DataBagItem,
    encode_data_bag_item,
    decode_data_bag_item,
)

from .adapters import (
    Codec,
    JsonAdapter,
    build_adapter_table,
)

__all__ = [
    # Key material
    'KeyMaterialKind',
    'unescape_pem',
    'load_private_key',
    'load_public_key',
    'load_certificate',
    'load_key_material',
    'dump_private_key',
    'dump_public_key',
    'dump_certificate',
    # Data bag items
    'DataBagItem',
    'encode_data_bag_item',
    'decode_data_bag_item',
    # Adapter table
    'Codec',
    'JsonAdapter',
    'build_adapter_table',
]
