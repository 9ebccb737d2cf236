"""Tests for the remote service boundary."""

import base64

import pytest

from pdf_workbench.exceptions import RemoteServiceError, ServiceUnavailableError
from pdf_workbench.remote import (
    BACKGROUND_REMOVAL_PROMPT,
    NO_TEXT_MESSAGE,
    OCR_PROMPT,
    extract_text,
    remove_background,
)


def test_extract_text_sends_base64_and_prompt():
    calls = []

    def service(image_b64, prompt):
        calls.append((image_b64, prompt))
        return "Hello"

    assert extract_text(b"\xff\xd8jpeg", service) == "Hello"
    assert calls == [(base64.b64encode(b"\xff\xd8jpeg").decode(), OCR_PROMPT)]


def test_extract_text_empty_reply():
    assert extract_text(b"img", lambda image, prompt: "") == NO_TEXT_MESSAGE


def test_remove_background_decodes_reply():
    def service(image_b64, prompt):
        assert prompt == BACKGROUND_REMOVAL_PROMPT
        return base64.b64encode(b"edited").decode()

    assert remove_background(b"img", service) == b"edited"


def test_remove_background_without_image():
    with pytest.raises(RemoteServiceError, match="No image generated"):
        remove_background(b"img", lambda image, prompt: "")


def test_remove_background_invalid_reply():
    with pytest.raises(RemoteServiceError):
        remove_background(b"img", lambda image, prompt: "not base64!!")


def test_missing_service():
    with pytest.raises(ServiceUnavailableError):
        extract_text(b"img", None)


def test_service_errors_propagate_unchanged():
    class Boom(Exception):
        pass

    def service(image_b64, prompt):
        raise Boom("quota exceeded")

    with pytest.raises(Boom):
        extract_text(b"img", service)
