"""Tests for LMv1 request signing."""

import time

import pytest
from fixtures import ACCESS_ID, BASE_URL
from lmaccess._core._models import RequestDescriptor, encode_query
from lmaccess.auth import Credential, compute_signature, epoch_millis, sign
from lmaccess.fetch import FilterByField

# base64(hex(hmac_sha256("testkey", "GET0/device/devices")))
GET_REFERENCE = (
    "Mjg4NzEzZDAxYmNhM2I3OWJlMTU3YmM5ZDU5NDk4YWQ2"
    "ZjQyOGM2OWQzODk0MGE0ZTM4ZTYwMjNiNDc5MWJjZg=="
)
# base64(hex(hmac_sha256("testkey", 'POST1700000000000{"name":"web01"}/device/devices')))
POST_REFERENCE = (
    "NDBjOTI4ZGJkNmZjMzFjN2UwNDQyNjk2Njk2NTM4YWYy"
    "YTIzM2RlZWZhOGVhYzU4YTE0NzRmNWY4ZmFjYWM3Ng=="
)


@pytest.fixture
def credential():
    return Credential(access_id=ACCESS_ID, access_key="testkey")


class TestComputeSignature:
    def test_matches_reference_value(self):
        assert compute_signature("testkey", "GET", 0, b"", "/device/devices") == GET_REFERENCE

    def test_is_deterministic(self):
        first = compute_signature("testkey", "GET", 0, b"", "/device/devices")
        second = compute_signature("testkey", "GET", 0, b"", "/device/devices")
        assert first == second

    def test_body_is_part_of_the_signature(self):
        signature = compute_signature(
            "testkey", "POST", 1700000000000, b'{"name":"web01"}', "/device/devices"
        )
        assert signature == POST_REFERENCE

    def test_method_case_does_not_matter(self):
        assert compute_signature("testkey", "get", 0, b"", "/device/devices") == GET_REFERENCE

    @pytest.mark.parametrize(
        "changed",
        [
            ("otherkey", "GET", 0, b"", "/device/devices"),
            ("testkey", "DELETE", 0, b"", "/device/devices"),
            ("testkey", "GET", 1, b"", "/device/devices"),
            ("testkey", "GET", 0, b"", "/device/groups"),
        ],
    )
    def test_any_input_changes_the_signature(self, changed):
        assert compute_signature(*changed) != GET_REFERENCE


class TestSign:
    def test_authorization_header(self, credential):
        descriptor = RequestDescriptor.build("GET", "/device/devices")
        signed = sign(descriptor, credential, BASE_URL, clock=lambda: 0)

        assert signed.headers["Authorization"] == f"LMv1 {ACCESS_ID}:{GET_REFERENCE}:0"
        assert signed.headers["Content-Type"] == "application/json"
        assert "X-Version" not in signed.headers
        assert signed.epoch_millis == 0

    def test_query_parameters_are_not_signed(self, credential):
        descriptor = RequestDescriptor.build(
            "GET", "/device/devices", query=[("offset", 0), ("size", 1000)]
        )
        signed = sign(descriptor, credential, BASE_URL, clock=lambda: 0)

        assert signed.headers["Authorization"].split(":")[1] == GET_REFERENCE

    def test_json_body_is_serialized_compactly_and_signed(self, credential):
        descriptor = RequestDescriptor.build(
            "POST", "/device/devices", body={"name": "web01"}
        )
        signed = sign(descriptor, credential, BASE_URL, clock=lambda: 1700000000000)

        assert signed.body == b'{"name":"web01"}'
        assert signed.headers["Authorization"] == (
            f"LMv1 {ACCESS_ID}:{POST_REFERENCE}:1700000000000"
        )

    def test_api_version_header(self, credential):
        descriptor = RequestDescriptor.build("GET", "/device/devices", api_version=2)
        signed = sign(descriptor, credential, BASE_URL, clock=lambda: 0)

        assert signed.headers["X-Version"] == "2"

    def test_url_keeps_query_order(self, credential):
        descriptor = RequestDescriptor.build(
            "GET", "/device/devices", query=[("size", 50), ("offset", 0), ("sort", "id")]
        )
        signed = sign(descriptor, credential, BASE_URL, clock=lambda: 0)

        assert signed.url == f"{BASE_URL}/device/devices?size=50&offset=0&sort=id"

    def test_url_without_query(self, credential):
        descriptor = RequestDescriptor.build("DELETE", "/device/devices/42")
        signed = sign(descriptor, credential, BASE_URL + "/", clock=lambda: 0)

        assert signed.url == f"{BASE_URL}/device/devices/42"

    def test_ampersand_in_filter_value_is_percent_encoded(self, credential):
        applies_to = 'isWindows()&&hasCategory("collector")'
        descriptor = RequestDescriptor.build(
            "GET",
            "/device/groups",
            query=[
                ("offset", 0),
                ("size", 1000),
                ("filter", FilterByField("appliesTo", applies_to).render()),
            ],
        )
        signed = sign(descriptor, credential, BASE_URL, clock=lambda: 0)

        assert signed.url == (
            f"{BASE_URL}/device/groups?offset=0&size=1000"
            "&filter=appliesTo:isWindows()%26%26hasCategory(%22collector%22)"
        )

    def test_each_signature_uses_a_fresh_timestamp(self, credential):
        ticks = iter([1000, 2000])
        descriptor = RequestDescriptor.build("GET", "/device/devices")

        first = sign(descriptor, credential, BASE_URL, clock=lambda: next(ticks))
        second = sign(descriptor, credential, BASE_URL, clock=lambda: next(ticks))

        assert first.headers["Authorization"] != second.headers["Authorization"]
        assert first.headers["Authorization"].endswith(":1000")
        assert second.headers["Authorization"].endswith(":2000")


def test_epoch_millis_follows_the_system_clock():
    before = int(time.time() * 1000)
    now = epoch_millis()
    after = int(time.time() * 1000)

    assert before - 1 <= now <= after + 1


class TestRequestDescriptor:
    def test_method_is_normalized(self):
        assert RequestDescriptor.build("patch", "/device/devices/1").method == "PATCH"

    def test_unknown_method_is_rejected(self):
        with pytest.raises(ValueError, match="Unsupported HTTP method"):
            RequestDescriptor.build("TRACE", "/device/devices")

    def test_relative_path_is_rejected(self):
        with pytest.raises(ValueError, match="must start with '/'"):
            RequestDescriptor.build("GET", "device/devices")

    def test_descriptor_is_immutable(self):
        descriptor = RequestDescriptor.build("GET", "/device/devices")
        with pytest.raises(AttributeError):
            descriptor.method = "POST"  # type: ignore[misc]


@pytest.mark.parametrize(
    "value, encoded",
    [
        ("50% a&b", "50%25%20a%26b"),
        ("rack#4", "rack%234"),
        ("c++host", "c%2B%2Bhost"),
        ("system.hostname:10.0.0.1", "system.hostname:10.0.0.1"),
    ],
)
def test_encode_query_escapes_reserved_characters(value, encoded):
    assert encode_query([("filter", value), ("size", 50)]) == f"filter={encoded}&size=50"
