"""Unit tests for request encoding and response decoding."""

import json

import pytest

from float_mcp.core import ResponseFormat
from float_mcp.runtime.rest.codecs import (
    DecodeError,
    best_effort_decode,
    decode_body,
    decode_xml,
    encode_body,
    encode_query,
)


class TestEncoding:
    def test_encode_body_serializes_json(self):
        data, content_type = encode_body({"name": "Ada", "active": 1})
        assert content_type == "application/json"
        assert json.loads(data) == {"name": "Ada", "active": 1}

    def test_encode_body_none_sends_nothing(self):
        assert encode_body(None) == (None, None)

    def test_encode_query_renders_strings(self):
        query = encode_query(
            {"active": True, "archived": False, "ids": [1, 2, 3], "name": None, "page": 2}
        )
        assert query == {"active": "1", "archived": "0", "ids": "1,2,3", "page": "2"}

    def test_encode_query_empty_is_none(self):
        assert encode_query({}) is None
        assert encode_query({"name": None}) is None


class TestDecoding:
    def test_empty_body_decodes_to_none(self):
        assert decode_body("", ResponseFormat.JSON) is None
        assert decode_body("   ", ResponseFormat.XML) is None

    def test_invalid_json_raises_decode_error(self):
        with pytest.raises(DecodeError):
            decode_body("{not json", ResponseFormat.JSON)

    def test_invalid_xml_raises_decode_error(self):
        with pytest.raises(DecodeError):
            decode_body("<people><person>", ResponseFormat.XML)

    def test_xml_collection_decodes_to_list(self):
        text = (
            "<people>"
            "<person><people_id>1</people_id><name>Ada</name></person>"
            "<person><people_id>2</people_id><name>Linus</name></person>"
            "</people>"
        )
        assert decode_xml(text) == [
            {"people_id": "1", "name": "Ada"},
            {"people_id": "2", "name": "Linus"},
        ]

    def test_xml_single_item_collection_is_still_a_list(self):
        text = "<people><person><people_id>1</people_id></person></people>"
        assert decode_xml(text, many=True) == [{"people_id": "1"}]
        assert decode_body(text, ResponseFormat.XML, many=True) == [{"people_id": "1"}]

    @pytest.mark.parametrize("many", [True, None])
    def test_empty_xml_collection_is_empty_list(self, many):
        assert decode_xml("<people>\n</people>", many=many) == []
        assert decode_xml("<people/>", many=many) == []

    def test_empty_xml_record_is_none(self):
        assert decode_xml("<project/>", many=False) is None

    @pytest.mark.parametrize("many", [False, None])
    def test_xml_record_with_one_nested_record_stays_a_dict(self, many):
        text = (
            "<project><client><client_id>1</client_id><name>Acme</name></client></project>"
        )
        assert decode_xml(text, many=many) == {"client": {"client_id": "1", "name": "Acme"}}

    def test_xml_error_body_decodes_as_record(self):
        text = "<error><message>Not found</message></error>"
        assert best_effort_decode(text, ResponseFormat.XML) == {"message": "Not found"}

    def test_xml_record_decodes_to_dict_with_repeated_tags(self):
        text = (
            "<role><role_id>3</role_id>"
            "<permissions>read</permissions><permissions>write</permissions></role>"
        )
        assert decode_xml(text) == {"role_id": "3", "permissions": ["read", "write"]}

    def test_best_effort_falls_back_to_json_then_empty(self):
        assert best_effort_decode('{"message": "x"}', ResponseFormat.XML) == {"message": "x"}
        assert best_effort_decode("<html>oops", ResponseFormat.JSON) == {}
        assert best_effort_decode("", ResponseFormat.JSON) == {}
