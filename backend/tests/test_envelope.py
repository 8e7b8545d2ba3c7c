import pytest

from convertkit.utils.envelope import decode_data_url, encode


def test_encode_builds_data_url_and_merges_metadata():
    envelope = encode(b"%PDF-1.7", "application/pdf", "report.pdf", pages=3)
    body = envelope.model_dump()

    assert body["fileName"] == "report.pdf"
    assert body["mimeType"] == "application/pdf"
    assert body["dataUrl"].startswith("data:application/pdf;base64,")
    assert body["pages"] == 3


def test_decode_returns_the_encoded_bytes():
    payload = bytes(range(256)) * 4
    envelope = encode(payload, "audio/mpeg", "song.mp3")

    mime_type, data = decode_data_url(envelope.dataUrl)

    assert mime_type == "audio/mpeg"
    assert data == payload


def test_encode_handles_empty_payload():
    envelope = encode(b"", "image/png", "empty.png")
    assert envelope.dataUrl == "data:image/png;base64,"


def test_decode_rejects_non_data_url():
    with pytest.raises(ValueError):
        decode_data_url("https://example.com/file.png")
