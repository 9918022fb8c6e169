# =============================================================================
# tests/test_body_parsing.py - Body Parsing Tests
# =============================================================================
# Unit tests for the JSON and URL-encoded parsers, and integration tests
# showing that rejected bodies never reach a route handler.
#
# Run with: poetry run pytest tests/test_body_parsing.py -v
# =============================================================================

import logging

import pytest

from backend.middleware import parse_form_body, parse_json_body
from backend.middleware.body_parsing import BodyParseError

JSON = {"Content-Type": "application/json"}


# =============================================================================
# JSON Parser Tests
# =============================================================================

class TestParseJsonBody:
    """Tests for parse_json_body()."""

    def test_object(self):
        assert parse_json_body(b'{"a": [1, 2]}') == {"a": [1, 2]}

    def test_array(self):
        assert parse_json_body(b"[1, 2]") == [1, 2]

    def test_empty_body_is_empty_object(self):
        assert parse_json_body(b"") == {}
        assert parse_json_body(b"  \n") == {}

    @pytest.mark.parametrize("body", [b"{bad", b'{"a": }', b"[1, 2"])
    def test_malformed(self, body):
        with pytest.raises(BodyParseError) as exc_info:
            parse_json_body(body)

        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("body", [b"1", b'"text"', b"true", b"null"])
    def test_scalars_rejected(self, body):
        with pytest.raises(BodyParseError) as exc_info:
            parse_json_body(body)

        assert exc_info.value.status_code == 400

    def test_deep_nesting_rejected(self):
        with pytest.raises(BodyParseError) as exc_info:
            parse_json_body(b"[" * 50000)

        assert exc_info.value.status_code == 400

    def test_nan_rejected(self):
        with pytest.raises(BodyParseError):
            parse_json_body(b'{"a": NaN}')

    def test_utf16(self):
        assert parse_json_body('{"a": "é"}'.encode("utf-16"), "utf-16") == {"a": "é"}

    def test_unsupported_charset(self):
        with pytest.raises(BodyParseError) as exc_info:
            parse_json_body(b"{}", "latin1")

        assert exc_info.value.status_code == 415

    def test_invalid_utf8(self):
        with pytest.raises(BodyParseError) as exc_info:
            parse_json_body(b'{"a": "\xff"}')

        assert exc_info.value.status_code == 400


# =============================================================================
# URL-encoded Parser Tests
# =============================================================================

class TestParseFormBody:
    """Tests for parse_form_body() in extended mode."""

    def test_flat(self):
        assert parse_form_body(b"name=ada&lang=python") == {"name": "ada", "lang": "python"}

    def test_nested_object(self):
        assert parse_form_body(b"user[name]=ada&user[role]=admin") == {
            "user": {"name": "ada", "role": "admin"}
        }

    def test_deeply_nested(self):
        assert parse_form_body(b"a[b][c]=1") == {"a": {"b": {"c": "1"}}}

    def test_bracket_list(self):
        assert parse_form_body(b"tags[]=x&tags[]=y") == {"tags": ["x", "y"]}

    def test_repeated_key_list(self):
        assert parse_form_body(b"a=1&a=2&a=3") == {"a": ["1", "2", "3"]}

    def test_indexed_list(self):
        assert parse_form_body(b"a[1]=second&a[0]=first") == {"a": ["first", "second"]}

    def test_list_of_objects(self):
        assert parse_form_body(b"items[0][id]=1&items[1][id]=2") == {
            "items": [{"id": "1"}, {"id": "2"}]
        }

    def test_percent_decoding(self):
        assert parse_form_body(b"q=hello+world&x=%26") == {"q": "hello world", "x": "&"}

    def test_blank_values_kept(self):
        assert parse_form_body(b"a=&b") == {"a": "", "b": ""}

    def test_empty_body(self):
        assert parse_form_body(b"") == {}

    def test_depth_limit(self):
        parsed = parse_form_body(b"a[b][c][d][e][f][g][h]=1")

        assert parsed == {"a": {"b": {"c": {"d": {"e": {"f": {"[g][h]": "1"}}}}}}}

    def test_unbalanced_brackets_literal(self):
        assert parse_form_body(b"a[b=1") == {"a[b": "1"}

    def test_non_ascii_digit_keys_are_not_indices(self):
        assert parse_form_body("a[²]=1&b[¹]=x&b[0]=y".encode()) == {
            "a": {"²": "1"},
            "b": {"¹": "x", "0": "y"},
        }

    def test_parameter_limit(self):
        body = "&".join(f"k{i}=v" for i in range(11)).encode()

        with pytest.raises(BodyParseError) as exc_info:
            parse_form_body(body, parameter_limit=10)

        assert exc_info.value.status_code == 413

    def test_unsupported_charset(self):
        with pytest.raises(BodyParseError) as exc_info:
            parse_form_body(b"a=1", "latin1")

        assert exc_info.value.status_code == 415


# =============================================================================
# Middleware Integration Tests
# =============================================================================

class TestBodyParsingMiddleware:
    """Tests for bodies sent through the application."""

    def test_json_reaches_handler(self, client):
        response = client.post("/api/echo/json", json={"name": "ada", "tags": ["x"]})

        assert response.status_code == 200
        assert response.json() == {"body": {"name": "ada", "tags": ["x"]}}

    def test_vendor_json_type(self, client):
        response = client.post(
            "/api/echo/json",
            content=b'{"a": 1}',
            headers={"Content-Type": "application/vnd.api+json; charset=utf-8"},
        )

        assert response.json() == {"body": {"a": 1}}

    def test_form_reaches_handler(self, client):
        response = client.post(
            "/api/echo/form",
            content=b"user[name]=ada&tags[]=x&tags[]=y",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        assert response.status_code == 200
        assert response.json() == {"body": {"user": {"name": "ada"}, "tags": ["x", "y"]}}

    def test_malformed_json_never_reaches_handler(self, client, handler_calls):
        response = client.post("/api/echo/json", content=b"{not json", headers=JSON)

        assert response.status_code == 400
        assert "error" not in response.json()
        assert handler_calls == []

    def test_malformed_json_on_unknown_path(self, client):
        response = client.post("/api/nothing-here", content=b"{not json", headers=JSON)

        assert response.status_code == 400

    def test_scalar_json_rejected(self, client, handler_calls):
        response = client.post("/api/echo/json", content=b"42", headers=JSON)

        assert response.status_code == 400
        assert handler_calls == []

    def test_body_too_large(self, make_client, handler_calls):
        client = make_client(MAX_BODY_SIZE_KB=1)

        response = client.post("/api/echo/json", json={"blob": "x" * 2048})

        assert response.status_code == 413
        assert handler_calls == []

    def test_other_content_types_untouched(self, client):
        response = client.post(
            "/api/echo/json",
            content=b"{not json",
            headers={"Content-Type": "text/plain"},
        )

        assert response.status_code == 200
        assert response.json() == {"body": None}

    def test_deeply_nested_json_rejected(self, client, handler_calls):
        response = client.post("/api/echo/json", content=b"[" * 50000, headers=JSON)

        assert response.status_code == 400
        assert handler_calls == []

    def test_non_ascii_digit_form_key(self, client):
        response = client.post(
            "/api/echo/form",
            content="a[²]=1".encode(),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        assert response.status_code == 200
        assert response.json() == {"body": {"a": {"²": "1"}}}

    def test_rejection_logged_outside_test_mode(self, make_client, caplog):
        client = make_client("development")

        with caplog.at_level(logging.ERROR, logger="backend.middleware.body_parsing"):
            response = client.post("/api/echo/json", content=b"{bad", headers=JSON)

        assert response.status_code == 400
        records = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(records) == 1
        assert "/api/echo/json" in records[0].getMessage()
        assert "400" in records[0].getMessage()

    def test_rejection_not_logged_in_test_mode(self, client, caplog):
        with caplog.at_level(logging.ERROR, logger="backend.middleware.body_parsing"):
            client.post("/api/echo/json", content=b"{bad", headers=JSON)

        assert [r for r in caplog.records if r.levelno == logging.ERROR] == []
