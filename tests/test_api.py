"""Тесты HTTP API."""
import pytest
from fastapi.testclient import TestClient
from helpers.assertions import open_image
from helpers.mocks import FailingRenderer
from letteravatar.config.settings import get_settings
from letteravatar.domain.avatars import BackgroundShape, OutputFormat
from letteravatar.presentation.api.dependencies.avatar import get_avatar_cache, get_avatar_renderer
from letteravatar.presentation.api.main import app


def make_client(cache, renderer):
    app.dependency_overrides[get_avatar_cache] = lambda: cache
    app.dependency_overrides[get_avatar_renderer] = lambda: renderer
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_overrides():
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client(cache, renderer):
    return make_client(cache, renderer)


@pytest.fixture
def fake_client(cache, fake_renderer):
    return make_client(cache, fake_renderer)


def test_get_avatar_png(client):
    response = client.get("/avatar", params={"n": "Ada Lovelace"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.headers["cache-control"] == f"public, max-age={get_settings().avatar_http_max_age}"
    image = open_image(response.content)
    assert image.format == "PNG"
    assert image.size == (get_settings().avatar_default_size,) * 2


def test_get_avatar_all_parameters(client):
    response = client.get(
        "/avatar",
        params={"n": "Gérald Barré", "s": 128, "bg": "000000", "fg": "#ff0000", "o": "jpeg", "f": "circle"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"
    image = open_image(response.content)
    assert image.format == "JPEG"
    assert image.size == (128, 128)


def test_get_avatar_by_path(client):
    response = client.get("/avatar/John Doe.jpg", params={"s": 32})

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"
    assert open_image(response.content).size == (32, 32)


def test_path_name_may_contain_dots(fake_client, fake_renderer):
    response = fake_client.get("/avatar/J.R.R Tolkien.gif", params={"f": "circle"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/gif"
    options = fake_renderer.calls[0]
    assert options.text == "JT"
    assert options.image_format is OutputFormat.gif
    assert options.background_shape is BackgroundShape.circle


def test_unknown_format_and_shape_fall_back(fake_client, fake_renderer):
    response = fake_client.get("/avatar", params={"n": "Ada", "o": "webp", "f": "hexagon"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert fake_renderer.calls[0].background_shape is BackgroundShape.square


@pytest.mark.parametrize(
    "params",
    [
        {},
        {"n": ""},
        {"n": "Ada", "s": 8},
        {"n": "Ada", "s": 4096},
        {"n": "Ada", "s": "big"},
    ],
)
def test_validation_errors(fake_client, fake_renderer, params):
    response = fake_client.get("/avatar", params=params)

    assert response.status_code == 422
    assert fake_renderer.calls == []


def test_identical_requests_hit_cache(fake_client, fake_renderer, cache):
    first = fake_client.get("/avatar", params={"n": "Ada Lovelace", "s": 64})
    second = fake_client.get("/avatar", params={"n": "Ada Lovelace", "s": 64})

    assert first.content == second.content
    assert len(fake_renderer.calls) == 1
    assert len(cache) == 1


def test_different_sizes_are_cached_separately(fake_client, fake_renderer, cache):
    small = fake_client.get("/avatar", params={"n": "Ada Lovelace", "s": 64})
    large = fake_client.get("/avatar", params={"n": "Ada Lovelace", "s": 65})

    assert small.content != large.content
    assert len(fake_renderer.calls) == 2
    assert len(cache) == 2


def test_render_failure_returns_500(cache):
    client = make_client(cache, FailingRenderer())

    response = client.get("/avatar", params={"n": "Ada"})

    assert response.status_code == 500
    assert "detail" in response.json()
    assert len(cache) == 0


def test_health_ok(client, cache):
    cache.set("k", b"v")

    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["renderer"] is True
    assert data["cache"]["entries"] == 1


def test_health_degraded(cache):
    client = make_client(cache, FailingRenderer())

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "degraded"


def test_security_headers(fake_client):
    response = fake_client.get("/avatar", params={"n": "Ada"})

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["referrer-policy"] == "strict-origin-when-cross-origin"
    assert "x-process-time" in response.headers


def test_run_starts_uvicorn_with_settings(monkeypatch):
    from letteravatar.presentation.api import main

    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))

    main.run()

    assert len(calls) == 1
    args, kwargs = calls[0]
    assert args == (main.app,)
    assert kwargs["host"] == main.settings.host
    assert kwargs["port"] == main.settings.port
