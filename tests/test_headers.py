"""Tests for outbound header sanitization."""

from core.headers import HeaderSanitizer


def test_hop_by_hop_headers_are_stripped_case_insensitively():
    headers = {
        "HOST": "proxy.internal",
        "Authorization": "Bearer caller-secret",
        "connection": "keep-alive",
        "Content-LENGTH": "999",
        "Accept": "application/json",
        "X-Idempotency-Key": "abc-123",
    }

    result = HeaderSanitizer().sanitize(headers)

    assert result == {"Accept": "application/json", "X-Idempotency-Key": "abc-123"}


def test_content_length_is_recomputed_in_bytes():
    body = '{"nome": "João"}'

    result = HeaderSanitizer().sanitize({"Content-Length": "3"}, body)

    assert result == {"content-length": str(len(body.encode("utf-8")))}
    assert result["content-length"] != str(len(body))


def test_no_content_length_without_body():
    assert HeaderSanitizer().sanitize({"content-length": "10"}, None) == {}
    assert HeaderSanitizer().sanitize({"content-length": "10"}, "") == {}


def test_values_are_stringified():
    result = HeaderSanitizer().sanitize({"X-Page": 2, "X-Ratio": 1.5})

    assert result == {"X-Page": "2", "X-Ratio": "1.5"}


def test_input_is_not_mutated():
    headers = {"Host": "a", "Accept": "*/*"}

    HeaderSanitizer().sanitize(headers, "body")

    assert headers == {"Host": "a", "Accept": "*/*"}
