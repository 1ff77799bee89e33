"""
Tests for the Cloudinary client, using httpx's mock transport.
"""

import hashlib
import httpx
import pytest

from backend.app.core.config import Settings
from backend.app.core.exceptions import ImageHostError
from backend.app.services.image_host import CloudinaryImageHost, make_public_id, sign_params

CONFIGURED = Settings(
    cloudinary_cloud_name="demo",
    cloudinary_api_key="key-123",
    cloudinary_api_secret="shh",
)


def _host(handler, config=CONFIGURED):
    return CloudinaryImageHost(config, transport=httpx.MockTransport(handler))


def test_sign_params_sorts_and_skips_empty():
    expected = hashlib.sha1(b"folder=carsawa&public_id=abc&timestamp=1700000000shh").hexdigest()
    assert sign_params({"timestamp": 1700000000, "public_id": "abc", "folder": "carsawa", "eager": ""}, "shh") == expected


def test_make_public_id_keeps_basename():
    first = make_public_id("/tmp/front bumper.png")
    second = make_public_id("/tmp/front bumper.png")
    assert first.endswith("front bumper")
    assert first != second


@pytest.mark.asyncio
async def test_upload_posts_signed_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = request.read()
        return httpx.Response(200, json={
            "public_id": "carsawa/123-front",
            "url": "http://res.cloudinary.com/demo/image/upload/carsawa/123-front.png",
            "secure_url": "https://res.cloudinary.com/demo/image/upload/carsawa/123-front.png",
            "bytes": 2048,
        })

    stored = await _host(handler).upload(b"pngdata", "front.png", "image/png")

    assert seen["url"] == "https://api.cloudinary.com/v1_1/demo/image/upload"
    assert b'name="signature"' in seen["body"]
    assert b'name="api_key"' in seen["body"]
    assert b"c_limit,w_1200" in seen["body"]
    assert b"pngdata" in seen["body"]
    assert stored.public_id == "carsawa/123-front"
    assert stored.secure_url.startswith("https://")
    assert stored.size == 2048


@pytest.mark.asyncio
async def test_upload_error_response():
    def handler(request):
        return httpx.Response(401, json={"error": {"message": "Invalid Signature"}})

    with pytest.raises(ImageHostError) as exc_info:
        await _host(handler).upload(b"x", "a.png", "image/png")
    assert "Invalid Signature" in exc_info.value.message


@pytest.mark.asyncio
async def test_unreachable_host():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ImageHostError):
        await _host(handler).upload(b"x", "a.png", "image/png")


@pytest.mark.asyncio
async def test_unconfigured_host_never_sends():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    host = _host(handler, config=Settings(cloudinary_cloud_name="", cloudinary_api_key="", cloudinary_api_secret=""))
    with pytest.raises(ImageHostError):
        await host.destroy("carsawa/abc")
    assert calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("result, expected", [("ok", True), ("not found", False)])
async def test_destroy(result, expected):
    def handler(request):
        assert request.url.path.endswith("/image/destroy")
        return httpx.Response(200, json={"result": result})

    assert await _host(handler).destroy("carsawa/abc") is expected


@pytest.mark.asyncio
async def test_destroy_unexpected_result():
    def handler(request):
        return httpx.Response(200, json={"result": "error"})

    with pytest.raises(ImageHostError):
        await _host(handler).destroy("carsawa/abc")
