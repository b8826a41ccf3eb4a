import httpx
import pytest

from cloudlat.providers import get_provider
from cloudlat.ranges import InvalidDocumentError, fetch_document, load_document


def test_load_document(write_json, aws_doc):
    assert load_document(write_json(aws_doc)) == aws_doc


def test_malformed_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text('{"prefixes": [')

    with pytest.raises(InvalidDocumentError):
        load_document(str(path))


def test_top_level_must_be_object(write_json):
    with pytest.raises(InvalidDocumentError):
        load_document(write_json([1, 2, 3]))


def test_missing_file(tmp_path):
    with pytest.raises(InvalidDocumentError):
        load_document(str(tmp_path / "nope.json"))


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_fetch_document(google_doc):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=google_doc)

    with _client(handler) as client:
        doc = fetch_document(get_provider("google"), client=client)

    assert doc == google_doc
    assert str(seen[0].url) == "https://www.gstatic.com/ipranges/cloud.json"
    assert seen[0].headers["User-Agent"].startswith("cloudlat/")


def test_fetch_http_error():
    with _client(lambda request: httpx.Response(503)) as client:
        with pytest.raises(InvalidDocumentError):
            fetch_document(get_provider("aws"), client=client)


def test_fetch_bad_json():
    with _client(lambda request: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(InvalidDocumentError):
            fetch_document(get_provider("aws"), client=client)


def test_azure_cannot_be_fetched():
    with pytest.raises(InvalidDocumentError):
        fetch_document(get_provider("azure"))
