from pathlib import Path

import pytest

from backend.app.services.storage import (
    allocate_folder,
    list_image_files,
    resolve_public_dir,
    to_public_path,
)


def test_allocate_first_candidate(tmp_path):
    folder = allocate_folder(tmp_path / "public" / "tunmi")
    assert folder == tmp_path / "public" / "tunmi"
    assert folder.is_dir()


def test_allocate_skips_existing_numbered_folders(tmp_path):
    for name in ("tunmi", "tunmi2", "tunmi3"):
        (tmp_path / name).mkdir()

    folder = allocate_folder(tmp_path / "tunmi")
    assert folder.name == "tunmi4"
    assert folder.is_dir()


def test_allocate_never_reuses_existing_file_name(tmp_path):
    (tmp_path / "tunmi").write_text("not a folder")
    folder = allocate_folder(tmp_path / "tunmi")
    assert folder.name == "tunmi2"


def test_to_public_path(tmp_path):
    img = tmp_path / "tunmi" / "tunmi1.png"
    assert to_public_path(img, tmp_path) == "/tunmi/tunmi1.png"
    assert to_public_path(tmp_path / "tunmi", tmp_path) == "/tunmi"


def test_resolve_public_dir(tmp_path):
    assert resolve_public_dir("/tunmi", tmp_path) == (tmp_path / "tunmi").resolve()
    assert resolve_public_dir("tunmi2", tmp_path) == (tmp_path / "tunmi2").resolve()
    with pytest.raises(ValueError):
        resolve_public_dir("../outside", tmp_path)


def test_list_image_files_filters_and_sorts(tmp_path):
    for name in ("b.PNG", "a.jpg", "c.jpeg", "d.bmp", "notes.txt", "e.gif"):
        (tmp_path / name).write_bytes(b"x")
    (tmp_path / "videos").mkdir()

    names = [p.name for p in list_image_files(tmp_path)]
    assert names == ["a.jpg", "b.PNG", "c.jpeg", "d.bmp"]


def test_allocate_moves_on_when_folder_appears_concurrently(tmp_path, monkeypatch):
    # exists() 확인 직후 다른 요청이 "tunmi"를 먼저 만든 상황
    real_mkdir = Path.mkdir
    raced = []

    def racing_mkdir(self, *args, **kwargs):
        if self.name == "tunmi" and not raced:
            raced.append(self)
            real_mkdir(self)
            raise FileExistsError(str(self))
        return real_mkdir(self, *args, **kwargs)

    monkeypatch.setattr(Path, "mkdir", racing_mkdir)

    folder = allocate_folder(tmp_path / "tunmi")
    assert raced == [tmp_path / "tunmi"]
    assert folder.name == "tunmi2"
    assert folder.is_dir()
