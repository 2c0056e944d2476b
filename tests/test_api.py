import pytest
from fastapi.testclient import TestClient

from backend.app.api import routes
from backend.app.core.config import get_settings
from backend.app.main import app
from conftest import DummyResp


@pytest.fixture
def client(cfg):
    app.dependency_overrides[get_settings] = lambda: cfg
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def stub_stability(monkeypatch):
    def fake_post(url, headers=None, files=None, data=None, timeout=None):
        if url.endswith("/image-to-video"):
            return DummyResp(200, data={"id": "job-1"}, text='{"id": "job-1"}')
        return DummyResp(200, content=b"IMG")

    monkeypatch.setattr("requests.post", fake_post)
    monkeypatch.setattr("requests.get", lambda url, headers=None, timeout=None: DummyResp(200, content=b"MP4"))


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_generate_image(client, stub_stability, cfg):
    resp = client.post("/api/generate-image", json={"prompts": ["a", "b"]})

    assert resp.status_code == 200
    assert resp.json() == {"folderName": "/tunmi", "images": ["/tunmi/tunmi1.png", "/tunmi/tunmi2.png"]}
    assert (cfg.public_root / "tunmi" / "tunmi1.png").read_bytes() == b"IMG"


def test_generate_image_uses_next_free_suffix(client, stub_stability, cfg):
    (cfg.public_root / "tunmi").mkdir()

    resp = client.post("/api/generate-image", json={"prompts": ["a", "b"]})
    assert resp.json() == {"folderName": "/tunmi2", "images": ["/tunmi2/tunmi1.png", "/tunmi2/tunmi2.png"]}


def test_generate_image_omits_failed_prompt(client, monkeypatch):
    statuses = iter([200, 403])
    monkeypatch.setattr("requests.post", lambda url, **kw: DummyResp(next(statuses), content=b"IMG"))

    resp = client.post("/api/generate-image", json={"prompts": ["a", "b"]})
    assert resp.status_code == 200
    assert resp.json()["images"] == ["/tunmi/tunmi1.png"]


@pytest.mark.parametrize("body", [{}, {"prompts": None}])
def test_generate_image_requires_prompts(client, body):
    resp = client.post("/api/generate-image", json=body)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Prompts are required and must be an array."}


def test_generate_image_rejects_non_array(client):
    resp = client.post("/api/generate-image", json={"prompts": "a"})
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_generate_image_only_accepts_post(client):
    resp = client.get("/api/generate-image")
    assert resp.status_code == 405
    assert "POST" in resp.headers["allow"]
    assert "error" in resp.json()


def test_generate_image_internal_error(client, monkeypatch):
    def boom(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(routes, "generate_images", boom)

    resp = client.post("/api/generate-image", json={"prompts": ["a"]})
    assert resp.status_code == 500
    assert resp.json() == {"error": "disk full"}


def test_process_images(client, stub_stability, cfg):
    import cv2
    import numpy as np

    image_dir = cfg.public_root / "tunmi"
    image_dir.mkdir()
    cv2.imwrite(str(image_dir / "tunmi1.png"), np.zeros((1000, 2000, 3), dtype=np.uint8))

    resp = client.post("/api/process-images", json={"directory": "/tunmi"})

    assert resp.status_code == 200
    assert resp.json() == {"message": "Images processed successfully.", "videoDirectory": "/tunmi/videos"}
    assert (image_dir / "videos" / "tunmi1.mp4").read_bytes() == b"MP4"
    assert (image_dir / "resized" / "tunmi1.png").exists()


def test_process_images_accepts_image_directory_name(client, stub_stability, cfg):
    (cfg.public_root / "tunmi2").mkdir()

    resp = client.post("/api/process-images", json={"imageDirectoryName": "tunmi2"})
    assert resp.status_code == 200
    assert resp.json()["videoDirectory"] == "/tunmi2/videos"


def test_process_images_requires_directory(client):
    resp = client.post("/api/process-images", json={})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Directory path is required."}


@pytest.mark.parametrize("directory", ["/missing", "../../etc"])
def test_process_images_rejects_bad_directory(client, directory):
    resp = client.post("/api/process-images", json={"directory": directory})
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_process_images_only_accepts_post(client):
    assert client.put("/api/process-images", json={}).status_code == 405


def test_app_public_dir_is_session_managed():
    import os

    import conftest
    from backend.app.core.config import settings

    # 세션 종료 시 pytest_unconfigure가 지우는 디렉토리를 앱이 쓰고 있어야 함
    if conftest._session_public_dir is None:
        pytest.skip("PUBLIC_DIR was provided by the environment")
    assert settings.PUBLIC_DIR == conftest._session_public_dir == os.environ["PUBLIC_DIR"]
    assert os.path.isdir(settings.PUBLIC_DIR)
