"""Tests for the REST API endpoints."""

import hashlib

import pytest
from fastapi.testclient import TestClient

from librarytag.main import app

UB_HEX = "19E9F87100000000075BCD1500000001"


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


class TestFormatsEndpoint:
    def test_lists_formats(self, client: TestClient):
        response = client.get("/api/formats")
        assert response.status_code == 200
        formats = {f["key"]: f for f in response.json()}
        assert set(formats) == {"ub-dortmund", "bookwaves"}
        assert formats["bookwaves"]["password_bytes"] == 14
        assert formats["bookwaves"]["subfields"]["status"]["start"] == 14


class TestCode40Endpoints:
    def test_encode(self, client: TestClient):
        response = client.post("/api/code40/encode", json={"text": "AB"})
        assert response.status_code == 200
        assert response.json() == {"text": "AB", "hex": "0690"}

    def test_encode_invalid_character(self, client: TestClient):
        response = client.post("/api/code40/encode", json={"text": "ab"})
        assert response.status_code == 400

    def test_decode(self, client: TestClient):
        response = client.post("/api/code40/decode", json={"hex": "19 e3 ce 36"})
        assert response.status_code == 200
        assert response.json() == {"hex": "19E3CE36", "text": "DE-290"}

    @pytest.mark.parametrize("hex_data", ["FFFF", "069", "0693 00", "not hex"])
    def test_decode_invalid(self, client: TestClient, hex_data):
        response = client.post("/api/code40/decode", json={"hex": hex_data})
        assert response.status_code == 400


class TestTagEndpoints:
    def test_describe_default(self, client: TestClient):
        response = client.post("/api/tags/describe", json={})
        assert response.status_code == 200
        body = response.json()
        assert body["format"] == "ub-dortmund"
        assert body["identifier"] == "DE390A"
        assert body["number"] == 123456789
        assert body["result"] == "0" * 16

    def test_describe_unknown_format(self, client: TestClient):
        response = client.post("/api/tags/describe", json={"format": "nope"})
        assert response.status_code == 404

    def test_describe_wrong_length(self, client: TestClient):
        response = client.post("/api/tags/describe", json={"data_hex": "19E9"})
        assert response.status_code == 400

    def test_set_byte_hex_value(self, client: TestClient):
        response = client.post(
            "/api/tags/set-byte",
            json={"format": "ub-dortmund", "data_hex": UB_HEX, "index": 15, "value": "1f"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status_hex"] == "0000001F"
        assert body["secured"] is True

    def test_set_byte_int_value(self, client: TestClient):
        response = client.post(
            "/api/tags/set-byte",
            json={"data_hex": UB_HEX, "index": 15, "value": 0},
        )
        assert response.status_code == 200
        assert response.json()["secured"] is False

    @pytest.mark.parametrize("index,value", [(3, 256), (3, -1), (3, "zz"), (16, 0)])
    def test_set_byte_rejected(self, client: TestClient, index, value):
        response = client.post(
            "/api/tags/set-byte",
            json={"data_hex": UB_HEX, "index": index, "value": value},
        )
        assert response.status_code == 400

    def test_set_byte_bool_value_rejected(self, client: TestClient):
        response = client.post(
            "/api/tags/set-byte",
            json={"data_hex": UB_HEX, "index": 0, "value": True},
        )
        assert response.status_code == 400
        assert "integer" in response.json()["detail"]
        describe = client.post("/api/tags/describe", json={"data_hex": UB_HEX})
        assert describe.json()["blocks"][2]["hex"] == UB_HEX

    def test_passwords(self, client: TestClient):
        response = client.post(
            "/api/tags/passwords",
            json={"data_hex": UB_HEX, "kill_key": "kill1"},
        )
        assert response.status_code == 200
        expected = hashlib.sha512(bytes.fromhex(UB_HEX)[:12] + b"kill1").digest()[:4]
        assert response.json() == {"kill": expected.hex().upper(), "access": "00000000"}

    def test_passwords_bookwaves_prefix(self, client: TestClient):
        response = client.post(
            "/api/tags/passwords",
            json={"format": "bookwaves", "data_hex": UB_HEX, "access_key": "a"},
        )
        expected = hashlib.sha512(bytes.fromhex(UB_HEX)[:14] + b"a").digest()[:4]
        assert response.json()["access"] == expected.hex().upper()
