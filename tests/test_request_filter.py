"""
Tests for the request signing filter
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest
from cryptography.exceptions import UnsupportedAlgorithm

from atmos_sdk.signing import (
    AtmosHeaders,
    AtmosRequest,
    HeaderMultimap,
    HttpMethod,
    SignRequest,
    SignatureWire,
    SigningFailure,
    WireDirection,
    build_string_to_sign,
    create_signing_config,
    sign_request,
)

ENCODED_KEY = "LJLuryj6zs8ste6Y3jTGQp71xq0="
UID = "6039ac182f194e15b9261d73ce044939/user1"
DATE = "Tue, 01 Jan 2030 00:00:00 GMT"
EXPECTED_SIGNATURE = "MIsY3sR766DebhbAXgdGqgKlPes="


def without_signature(request):
    headers = request.headers.copy()
    headers.remove_all(AtmosHeaders.SIGNATURE)
    return AtmosRequest(request.method, request.endpoint, headers, request.payload)


class TestSignRequest:
    """Test the end-to-end signing flow"""

    def setup_method(self):
        """Set up test fixtures"""
        self.config = (create_signing_config()
                       .uid(UID)
                       .encoded_key(ENCODED_KEY)
                       .timestamp_provider(lambda: DATE)
                       .build())
        self.filter = SignRequest(self.config)
        self.request = AtmosRequest(
            method=HttpMethod.GET,
            endpoint="https://accesspoint.example.com/rest/objects/123",
            headers=HeaderMultimap([("x-emc-meta", "foo=bar")])
        )

    def test_signed_headers(self):
        """uid, Date and signature are each set exactly once"""
        signed = self.filter.filter(self.request)

        assert signed.headers.get_all(AtmosHeaders.UID) == [UID]
        assert signed.headers.get_all(AtmosHeaders.DATE) == [DATE]
        assert signed.headers.get_all(AtmosHeaders.SIGNATURE) == [EXPECTED_SIGNATURE]
        assert signed.headers.get_all("x-emc-meta") == ["foo=bar"]

    def test_string_to_sign_includes_uid(self):
        """The uid header is itself an x-emc header and is signed"""
        signed = self.filter.filter(self.request)

        assert self.filter.create_string_to_sign(without_signature(signed)) == (
            f"GET\n\n\n{DATE}\n/rest/objects/123\n"
            f"x-emc-meta:foo=bar\nx-emc-uid:{UID}"
        )

    def test_original_request_untouched(self):
        """Signing returns a new request and leaves the input alone"""
        before = self.request.headers.items()

        signed = self.filter.filter(self.request)

        assert signed is not self.request
        assert self.request.headers.items() == before
        assert AtmosHeaders.SIGNATURE not in self.request.headers

    def test_method_path_payload_preserved(self):
        signed = self.filter.filter(self.request)

        assert signed.method == self.request.method
        assert signed.endpoint == self.request.endpoint
        assert signed.payload == self.request.payload

    def test_stale_signature_replaced(self):
        """Pre-existing signature, uid and date values are discarded"""
        request = AtmosRequest(
            method=HttpMethod.GET,
            endpoint="/rest/objects/123",
            headers=HeaderMultimap([
                ("x-emc-meta", "foo=bar"),
                ("X-Emc-Signature", "stale"),
                ("x-emc-signature", "staler"),
                ("X-Emc-Uid", "someone-else"),
                ("Date", "Mon, 01 Jan 2001 00:00:00 GMT"),
                ("date", "Tue, 02 Jan 2001 00:00:00 GMT"),
            ])
        )

        signed = self.filter.filter(request)

        assert signed.headers.get_all(AtmosHeaders.SIGNATURE) == [EXPECTED_SIGNATURE]
        assert signed.headers.get_all(AtmosHeaders.UID) == [UID]
        assert signed.headers.get_all(AtmosHeaders.DATE) == [DATE]

    def test_idempotent_resigning(self):
        """Signing a signed request again yields one identical signature"""
        once = self.filter.filter(self.request)
        twice = self.filter.filter(once)

        assert twice.headers.get_all(AtmosHeaders.SIGNATURE) == once.headers.get_all(AtmosHeaders.SIGNATURE)
        assert len(twice.headers.get_all(AtmosHeaders.SIGNATURE)) == 1

    def test_resigning_uses_new_date(self):
        dates = iter(["Tue, 01 Jan 2030 00:00:00 GMT", "Tue, 01 Jan 2030 00:00:01 GMT"])
        config = (create_signing_config()
                  .uid(UID)
                  .encoded_key(ENCODED_KEY)
                  .timestamp_provider(lambda: next(dates))
                  .build())
        request_filter = SignRequest(config)

        first = request_filter.filter(self.request)
        second = request_filter.filter(first)

        assert second.headers.get_all(AtmosHeaders.DATE) == ["Tue, 01 Jan 2030 00:00:01 GMT"]
        expected = request_filter.sign_string(build_string_to_sign(without_signature(second)))
        assert second.headers.get_first(AtmosHeaders.SIGNATURE) == expected
        assert expected != first.headers.get_first(AtmosHeaders.SIGNATURE)

    def test_default_timestamp_provider(self):
        """Without an explicit provider the Date header is an RFC 1123 GMT date"""
        config = create_signing_config().uid(UID).encoded_key(ENCODED_KEY).build()

        signed = SignRequest(config).filter(self.request)

        assert signed.headers.get_first(AtmosHeaders.DATE).endswith(" GMT")

    def test_signing_failure_propagates(self):
        """A failed HMAC aborts signing and produces no signed request"""
        request = AtmosRequest(
            method=HttpMethod.GET,
            endpoint="/rest/objects/123",
            headers=HeaderMultimap([("x-emc-signature", "stale")])
        )

        with patch("atmos_sdk.signing.signer.hmac") as mock_hmac:
            mock_hmac.HMAC.side_effect = UnsupportedAlgorithm("sha1 disabled")

            with pytest.raises(SigningFailure):
                self.filter.filter(request)

        assert request.headers.get_all(AtmosHeaders.SIGNATURE) == ["stale"]
        assert AtmosHeaders.DATE not in request.headers

    def test_sign_request_helper(self):
        signed = sign_request(self.request, self.config)

        assert signed.headers.get_first(AtmosHeaders.SIGNATURE) == EXPECTED_SIGNATURE

    def test_concurrent_signing(self):
        """One filter instance serves many threads"""
        def sign_once(_):
            return self.filter.filter(self.request).headers.get_first(AtmosHeaders.SIGNATURE)

        with ThreadPoolExecutor(max_workers=8) as executor:
            signatures = list(executor.map(sign_once, range(200)))

        assert set(signatures) == {EXPECTED_SIGNATURE}


class TestSignRequestDiagnostics:
    """Test wire and log output of the filter"""

    def test_wire_records_string_and_signature(self):
        wire = SignatureWire(enabled=True)
        config = (create_signing_config()
                  .uid(UID)
                  .encoded_key(ENCODED_KEY)
                  .timestamp_provider(lambda: DATE)
                  .signature_wire(wire)
                  .build())
        request = AtmosRequest(
            method=HttpMethod.GET,
            endpoint="/rest/objects/123",
            headers={"x-emc-meta": "foo=bar"}
        )

        signed = SignRequest(config).filter(request)
        entries = wire.drain()

        assert [entry.direction for entry in entries] == [WireDirection.OUTPUT, WireDirection.INPUT]
        assert entries[0].text.endswith(f"x-emc-uid:{UID}")
        assert entries[1].text == signed.headers.get_first(AtmosHeaders.SIGNATURE)

    def test_signature_log(self, caplog):
        """The request is logged before and after signing"""
        caplog.set_level(logging.DEBUG, logger="atmos_sdk.signature")
        config = (create_signing_config()
                  .uid(UID)
                  .encoded_key(ENCODED_KEY)
                  .timestamp_provider(lambda: DATE)
                  .build())
        request = AtmosRequest(method=HttpMethod.DELETE, endpoint="/rest/objects/123")

        SignRequest(config).filter(request)

        assert ">> DELETE /rest/objects/123 HTTP/1.1" in caplog.text
        assert "<< DELETE /rest/objects/123 HTTP/1.1" in caplog.text
        assert "<< x-emc-signature:" in caplog.text
