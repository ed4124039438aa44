"""
Tests for string-to-sign construction
"""

import logging

import pytest

from atmos_sdk.signing import (
    AtmosRequest,
    CanonicalStringBuilder,
    HeaderMultimap,
    HttpMethod,
    MissingHeaderError,
    Payload,
    SignatureWire,
    SigningErrorCodes,
    WireDirection,
    build_string_to_sign,
)

DATE = "Tue, 01 Jan 2030 00:00:00 GMT"


def make_request(method=HttpMethod.GET, endpoint="/rest/objects/123", headers=None, payload=None):
    entries = [("Date", DATE)] + list(headers or [])
    return AtmosRequest(
        method=method,
        endpoint=endpoint,
        headers=HeaderMultimap(entries),
        payload=payload
    )


class TestCanonicalString:
    """Test canonical string layout"""

    def test_reference_request(self):
        """GET with one custom header"""
        request = make_request(headers=[("x-emc-meta", "foo=bar")])

        assert build_string_to_sign(request) == (
            "GET\n"
            "\n"
            "\n"
            f"{DATE}\n"
            "/rest/objects/123\n"
            "x-emc-meta:foo=bar"
        )

    def test_no_custom_headers_has_no_trailing_newline(self):
        """Without x-emc headers the path is the last line"""
        canonical = build_string_to_sign(make_request())

        assert canonical == f"GET\n\n\n{DATE}\n/rest/objects/123"
        assert not canonical.endswith("\n")

    def test_payload_content_type(self):
        request = make_request(
            method=HttpMethod.POST,
            endpoint="/rest/objects",
            payload=Payload(content_type="application/octet-stream")
        )

        lines = build_string_to_sign(request).split("\n")

        assert lines[0] == "POST"
        assert lines[1] == "application/octet-stream"

    def test_payload_without_content_type(self):
        request = make_request(method=HttpMethod.PUT, payload=Payload())

        assert build_string_to_sign(request).split("\n")[1] == ""

    def test_range_value_lower_cased(self):
        """Range is echoed by value only, lower-cased"""
        request = make_request(headers=[("Range", "Bytes=0-1023")])

        lines = build_string_to_sign(request).split("\n")

        assert lines[2] == "bytes=0-1023"
        assert "Range" not in build_string_to_sign(request)

    def test_first_range_value_wins(self):
        request = make_request(headers=[("Range", "bytes=0-1"), ("range", "bytes=5-9")])

        assert build_string_to_sign(request).split("\n")[2] == "bytes=0-1"

    def test_date_verbatim(self):
        request = AtmosRequest(
            method=HttpMethod.GET,
            endpoint="/rest/objects",
            headers=HeaderMultimap([("date", "Mon, 05 Feb 2029 10:11:12 GMT")])
        )

        assert build_string_to_sign(request).split("\n")[3] == "Mon, 05 Feb 2029 10:11:12 GMT"

    def test_path_lower_cased_without_query(self):
        """Only the path of a full URL is used, lower-cased"""
        request = make_request(endpoint="https://Atmos.Example.com/rest/Objects/ABC?uploadToken=XYZ")

        assert build_string_to_sign(request).split("\n")[4] == "/rest/objects/abc"

    def test_encoded_path_kept_raw(self):
        request = make_request(endpoint="/rest/namespace/My%20Dir/File.TXT")

        assert build_string_to_sign(request).split("\n")[4] == "/rest/namespace/my%20dir/file.txt"

    def test_custom_headers_sorted_after_path(self):
        request = make_request(headers=[
            ("x-emc-uid", "user"),
            ("X-Emc-Meta", "b=2"),
            ("x-emc-listable-meta", "tag  one"),
        ])

        lines = build_string_to_sign(request).split("\n")

        assert lines[5:] == [
            "x-emc-listable-meta:tag one",
            "x-emc-meta:b=2",
            "x-emc-uid:user",
        ]

    def test_header_order_independence(self):
        first = make_request(headers=[("x-emc-a", "1"), ("x-emc-b", "2")])
        second = make_request(headers=[("x-emc-b", "2"), ("x-emc-a", "1")])

        assert build_string_to_sign(first) == build_string_to_sign(second)

    def test_deterministic(self):
        request = make_request(headers=[("x-emc-meta", "foo=bar"), ("Range", "bytes=1-2")])

        assert build_string_to_sign(request) == build_string_to_sign(request)


class TestMissingDate:
    """Test the Date header requirement"""

    def test_missing_date_raises(self):
        request = AtmosRequest(method=HttpMethod.GET, endpoint="/rest/objects")

        with pytest.raises(MissingHeaderError) as exc_info:
            build_string_to_sign(request)

        assert exc_info.value.code == SigningErrorCodes.MISSING_REQUIRED_HEADER
        assert exc_info.value.details["header"] == "Date"

    def test_empty_date_raises(self):
        request = AtmosRequest(
            method=HttpMethod.GET,
            endpoint="/rest/objects",
            headers=HeaderMultimap([("Date", "")])
        )

        with pytest.raises(MissingHeaderError):
            build_string_to_sign(request)


class TestCanonicalStringWire:
    """Test diagnostic output of the canonical string"""

    def test_enabled_wire_receives_canonical_string(self):
        wire = SignatureWire(enabled=True)
        request = make_request(headers=[("x-emc-meta", "foo=bar")])

        canonical = CanonicalStringBuilder(request, wire).build()
        entries = wire.drain()

        assert len(entries) == 1
        assert entries[0].direction == WireDirection.OUTPUT
        assert entries[0].text == canonical

    def test_disabled_wire_receives_nothing(self):
        wire = SignatureWire(enabled=False)

        build_string_to_sign(make_request(), wire)

        assert wire.drain() == []

    def test_wire_logs_to_signature_logger(self, caplog):
        caplog.set_level(logging.DEBUG, logger="atmos_sdk.signature")
        wire = SignatureWire(enabled=True)

        build_string_to_sign(make_request(), wire)

        assert "/rest/objects/123" in caplog.text
