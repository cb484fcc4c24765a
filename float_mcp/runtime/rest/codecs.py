"""Body encoding and response decoding for the REST executor."""

from __future__ import annotations

import json
from typing import Any
from xml.etree import ElementTree as ET

from ...core.enums import ResponseFormat

JSON_CONTENT_TYPE = "application/json"


class DecodeError(ValueError):
    """Response body could not be decoded in the negotiated format."""


def encode_body(payload: Any) -> tuple[str | None, str | None]:
    """Serialize a request body.

    Returns:
        (serialized body, content type); both None when there is no body
    """
    if payload is None:
        return None, None
    return json.dumps(payload, default=str), JSON_CONTENT_TYPE


def encode_query(query: dict[str, Any] | None) -> dict[str, str] | None:
    """Render query parameters as strings.

    None values are dropped, booleans become 1/0 and sequences are joined
    with commas.
    """
    if not query:
        return None
    rendered: dict[str, str] = {}
    for key, value in query.items():
        if value is None:
            continue
        if isinstance(value, bool):
            rendered[key] = "1" if value else "0"
        elif isinstance(value, (list, tuple, set)):
            rendered[key] = ",".join(str(v) for v in value)
        else:
            rendered[key] = str(value)
    return rendered or None


def decode_body(
    text: str, response_format: ResponseFormat, *, many: bool | None = None
) -> Any:
    """Decode a response body. Empty bodies decode to None.

    ``many`` tells the XML decoder whether the document is a collection;
    JSON carries that in its own syntax and ignores it.
    """
    if not text or not text.strip():
        return None
    if response_format is ResponseFormat.XML:
        return decode_xml(text, many=many)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON response: {e.msg}") from e


def decode_xml(text: str, *, many: bool | None = None) -> Any:
    """Convert an XML document into plain lists and dicts.

    With ``many=True`` the root is a collection: each child decodes to one
    item and an empty root decodes to an empty list. With ``many=False`` the
    root is a single record. When the caller does not know, a root with more
    than one child sharing a tag is a collection and anything else a record.
    Elements decode to dicts keyed by child tag, with repeated tags collected
    into lists and leaf elements decoding to their text.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise DecodeError(f"Invalid XML response: {e}") from e

    children = list(root)
    if many is None:
        many = _is_empty(root) or (
            len(children) > 1
            and len({child.tag for child in children}) == 1
            and _is_record(children[0])
        )
    if many:
        return [_element_value(child) for child in children]
    if _is_empty(root):
        return None
    return _element_value(root)


def _is_empty(element: ET.Element) -> bool:
    return not len(element) and not element.attrib and not (element.text or "").strip()


def _is_record(element: ET.Element) -> bool:
    return len(element) > 0 or bool(element.attrib)


def _element_value(element: ET.Element) -> Any:
    children = list(element)
    if not children:
        if element.attrib:
            value: dict[str, Any] = dict(element.attrib)
            if element.text and element.text.strip():
                value["text"] = element.text.strip()
            return value
        return element.text.strip() if element.text else None

    result: dict[str, Any] = dict(element.attrib)
    for child in children:
        child_value = _element_value(child)
        if child.tag in result:
            existing = result[child.tag]
            if not isinstance(existing, list):
                result[child.tag] = [existing]
            result[child.tag].append(child_value)
        else:
            result[child.tag] = child_value
    return result


def best_effort_decode(text: str, response_format: ResponseFormat) -> Any:
    """Decode an error body, falling back to an empty object."""
    for fmt in (response_format, ResponseFormat.JSON):
        try:
            decoded = decode_body(text, fmt, many=False)
        except DecodeError:
            continue
        return decoded if decoded is not None else {}
    return {}
