import pytest

from notebook_relay.utils.urls import is_valid_url


@pytest.mark.parametrize(
    "value",
    [
        "https://example.com/path",
        "http://localhost:5678/webhook/abc",
        "https://hooks.example.com/process?token=1",
        "mailto:ops@example.com",
    ],
)
def test_well_formed_urls(value: str) -> None:
    assert is_valid_url(value) is True


@pytest.mark.parametrize(
    "value",
    [
        "not a url",
        "http//missing-colon",
        "",
        "https://",
        "example.com/path",
        "https://exa mple.com",
        "/relative/path",
    ],
)
def test_malformed_urls(value: str) -> None:
    assert is_valid_url(value) is False


def test_non_string_is_invalid() -> None:
    assert is_valid_url(None) is False  # type: ignore[arg-type]
