"""
Data bag items: opaque JSON documents keyed by an ``id`` field
"""

import json
from dataclasses import dataclass
from typing import Any

from ..exceptions import DocumentParseError


@dataclass(frozen=True)
class DataBagItem:
    """
    Opaque identifier-keyed JSON document

    Attributes:
        id: Value of the document's ``id`` field
        raw: The document's JSON text, kept as received
    """
    id: str
    raw: str

    def __str__(self) -> str:
        return self.raw


def encode_data_bag_item(item: DataBagItem) -> str:
    """Serialize an item to its raw JSON text."""
    return item.raw


def decode_data_bag_item(text: str) -> DataBagItem:
    """
    Read a data bag item, looking only at its ``id`` field.

    Args:
        text: JSON object text

    Returns:
        DataBagItem: Item whose raw text is the input, stripped

    Raises:
        DocumentParseError: If the text is not a JSON object with a string id
    """
    try:
        document: Any = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise DocumentParseError(f"Invalid data bag item JSON: {e}", "PARSE_ERROR") from e

    if not isinstance(document, dict):
        raise DocumentParseError("Data bag item must be a JSON object", "INVALID_FORMAT")

    item_id = document.get('id')
    if not isinstance(item_id, str):
        raise DocumentParseError("Data bag item requires a string 'id' field", "MISSING_ID")

    return DataBagItem(id=item_id, raw=text.strip())
