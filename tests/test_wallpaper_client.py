from unittest.mock import Mock

import pytest
import requests

from wallpaper_client import (
    GenerationFailed,
    GenerationResult,
    WallpaperClient,
    WallpaperRequestError,
)


def make_response(payload=None, status_code=200, content=b""):
    response = Mock()
    response.status_code = status_code
    response.content = content
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    else:
        response.raise_for_status.return_value = None
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    return WallpaperClient("http://localhost:8000/", session=session)


def test_generate_posts_prompt_and_aspect_ratio(client, session):
    prompt = "Vibrant galaxy and stars in deep space"
    session.post.return_value = make_response({
        "success": True,
        "image_url": "https://cdn.example/x.jpg",
        "prompt": prompt,
    })

    result = client.generate(prompt)

    session.post.assert_called_once_with(
        "http://localhost:8000/api/generate-wallpaper",
        json={"prompt": prompt, "aspect_ratio": "16:9"},
        timeout=None,
    )
    assert result == GenerationResult(image_url="https://cdn.example/x.jpg", prompt=prompt)


def test_generate_trims_prompt_before_sending(client, session):
    session.post.return_value = make_response({
        "success": True,
        "image_url": "https://cdn.example/x.jpg",
        "prompt": "ocean",
    })

    client.generate("   ocean \n")

    assert session.post.call_args.kwargs["json"]["prompt"] == "ocean"


def test_generate_uses_echoed_prompt(client, session):
    session.post.return_value = make_response({
        "success": True,
        "image_url": "https://cdn.example/x.jpg",
        "prompt": "ocean, enhanced by the backend",
    })

    result = client.generate("ocean")

    assert result.prompt == "ocean, enhanced by the backend"


def test_generate_falls_back_to_sent_prompt_when_not_echoed(client, session):
    session.post.return_value = make_response({
        "success": True,
        "image_url": "https://cdn.example/x.jpg",
    })

    assert client.generate(" forest ").prompt == "forest"


def test_generate_passes_configured_timeout_and_ratio(session):
    client = WallpaperClient("https://api.example", aspect_ratio="21:9", timeout=30, session=session)
    session.post.return_value = make_response({
        "success": True,
        "image_url": "https://cdn.example/x.jpg",
        "prompt": "x",
    })

    client.generate("x")

    session.post.assert_called_once_with(
        "https://api.example/api/generate-wallpaper",
        json={"prompt": "x", "aspect_ratio": "21:9"},
        timeout=30,
    )


def test_backend_failure_carries_error(client, session):
    session.post.return_value = make_response({"success": False, "error": "Model overloaded"})

    with pytest.raises(GenerationFailed) as excinfo:
        client.generate("ocean")

    assert excinfo.value.error == "Model overloaded"


def test_backend_failure_without_error_message(client, session):
    session.post.return_value = make_response({"success": False})

    with pytest.raises(GenerationFailed) as excinfo:
        client.generate("ocean")

    assert excinfo.value.error is None


@pytest.mark.parametrize("image_url", [None, "", "not a url", "ftp://cdn.example/x.jpg", 42])
def test_success_with_unusable_image_url_is_a_failure(client, session, image_url):
    session.post.return_value = make_response({"success": True, "image_url": image_url, "prompt": "x"})

    with pytest.raises(GenerationFailed) as excinfo:
        client.generate("x")

    assert excinfo.value.error == "The server returned an invalid image URL"


def test_http_error_is_wrapped(client, session):
    session.post.return_value = make_response({"detail": "boom"}, status_code=500)

    with pytest.raises(WallpaperRequestError) as excinfo:
        client.generate("ocean")

    assert not isinstance(excinfo.value, GenerationFailed)
    assert isinstance(excinfo.value.__cause__, requests.HTTPError)


def test_connection_error_is_wrapped(client, session):
    session.post.side_effect = requests.ConnectionError("refused")

    with pytest.raises(WallpaperRequestError):
        client.generate("ocean")


def test_invalid_json_is_wrapped(client, session):
    session.post.return_value = make_response(ValueError("Expecting value"))

    with pytest.raises(WallpaperRequestError):
        client.generate("ocean")


def test_non_object_json_is_rejected(client, session):
    session.post.return_value = make_response(["unexpected"])

    with pytest.raises(WallpaperRequestError):
        client.generate("ocean")


def test_fetch_image_returns_bytes(client, session):
    session.get.return_value = make_response(content=b"\xff\xd8jpeg")

    assert client.fetch_image("https://cdn.example/x.jpg") == b"\xff\xd8jpeg"
    session.get.assert_called_once_with("https://cdn.example/x.jpg", timeout=None)


def test_fetch_image_failure_is_wrapped(client, session):
    session.get.return_value = make_response(status_code=404)

    with pytest.raises(WallpaperRequestError):
        client.fetch_image("https://cdn.example/missing.jpg")
