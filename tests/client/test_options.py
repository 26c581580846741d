"""Tests for request options, body encoding and descriptors."""

import httpx

from flyreq.client.options import RequestDescriptor, RequestOptions, encode_body


class TestRequestOptions:
    def test_defaults(self):
        opts = RequestOptions.from_mapping(None)
        assert opts == RequestOptions()
        assert opts.method is None
        assert opts.json is False

    def test_from_mapping_deep_copies(self):
        source = {"headers": {"X-A": "1"}, "body": {"nested": [1]}}
        opts = RequestOptions.from_mapping(source)
        source["headers"]["X-A"] = "changed"
        source["body"]["nested"].append(2)
        assert opts.headers == {"X-A": "1"}
        assert opts.body == {"nested": [1]}

    def test_unknown_keys_ignored(self):
        opts = RequestOptions.from_mapping({"method": "PUT", "timeout": 5})
        assert opts.method == "PUT"

    def test_empty_method_is_unset(self):
        assert RequestOptions.from_mapping({"method": ""}).method is None

    def test_as_dict_omits_unset_fields(self):
        assert RequestOptions(body="x").as_dict() == {"body": "x"}
        assert RequestOptions(method="GET", json=True).as_dict() == {"method": "GET", "json": True}


class TestEncodeBody:
    def test_structured_value(self):
        headers: dict = {}
        data = encode_body({"a": 1, "b": [True, None]}, headers)
        assert data == b'{"a":1,"b":[true,null]}'
        assert headers == {"content-type": "application/json", "content-length": str(len(data))}

    def test_content_length_counts_bytes(self):
        headers: dict = {}
        data = encode_body("héllo", headers)
        assert data == "héllo".encode()
        assert headers["content-length"] == "6"
        assert "content-type" not in headers

    def test_bytes_sent_as_is(self):
        headers: dict = {}
        assert encode_body(b"\x00\x01", headers) == b"\x00\x01"
        assert headers["content-length"] == "2"

    def test_existing_content_type_kept(self):
        headers = {"content-type": "text/json"}
        encode_body([1, 2], headers)
        assert headers["content-type"] == "text/json"

    def test_absent_body(self):
        headers: dict = {}
        assert encode_body(None, headers) is None
        assert encode_body("", headers) is None
        assert headers == {}

    def test_empty_mapping_is_still_a_body(self):
        headers: dict = {}
        assert encode_body({}, headers) == b"{}"
        assert headers["content-length"] == "2"


class TestRequestDescriptor:
    def test_payload_only_for_update_methods(self):
        url = httpx.URL("http://host/")
        for method in ("POST", "PUT"):
            assert RequestDescriptor(method, url, content=b"x").payload == b"x"
        for method in ("GET", "HEAD", "DELETE"):
            assert RequestDescriptor(method, url, content=b"x").payload is None
