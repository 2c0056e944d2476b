import os
import shutil
import tempfile

import pytest

_session_public_dir = None


def pytest_configure(config):
    # main.py가 import 시점에 PUBLIC_DIR을 만들고 마운트하므로 작업 디렉토리 오염 방지
    # (테스트 모듈 수집 전에 실행됨)
    global _session_public_dir
    if "PUBLIC_DIR" not in os.environ:
        _session_public_dir = tempfile.mkdtemp(prefix="story_public_")
        os.environ["PUBLIC_DIR"] = _session_public_dir


def pytest_unconfigure(config):
    if _session_public_dir:
        shutil.rmtree(_session_public_dir, ignore_errors=True)
        os.environ.pop("PUBLIC_DIR", None)


class DummyResp:
    def __init__(self, status_code=200, content=b"", data=None, text=None):
        self.status_code = status_code
        self.content = content
        self._data = data
        self.text = text if text is not None else content.decode("utf-8", "replace")

    def json(self):
        return self._data


@pytest.fixture
def cfg(tmp_path):
    from backend.app.core.config import Settings

    root = tmp_path / "public"
    root.mkdir()
    return Settings(
        PUBLIC_DIR=str(root),
        STABILITY_API_KEY="fake_key",
        STABILITY_API_BASE="https://stability.test",
        VIDEO_INITIAL_WAIT_SEC=0,
        VIDEO_POLL_INTERVAL_SEC=0,
    )
