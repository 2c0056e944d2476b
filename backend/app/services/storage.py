"""
스토리지 유틸

결과물은 전부 public 루트 아래 로컬 디스크에 저장한다.
폴더 이름 결정/상대경로 변환/이미지 목록 같은 파일시스템 규칙은 여기 한 곳에 모아둔다.
"""

from __future__ import annotations

from pathlib import Path

from backend.app.core.logger import get_logger

logger = get_logger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp"}


def allocate_folder(base: Path) -> Path:
    """
    base, base2, base3 ... 순서로 비어 있는 이름을 찾아 생성 후 반환

    - 상한 없음 (후보 하나당 존재 확인 1번)
    - 확인과 생성 사이에 누가 먼저 만들면 다음 후보로 넘어감
    """
    base = Path(base)
    index = 1
    while True:
        candidate = base if index == 1 else base.with_name(f"{base.name}{index}")
        index += 1
        if candidate.exists():
            continue
        candidate.parent.mkdir(parents=True, exist_ok=True)
        try:
            candidate.mkdir()
        except FileExistsError:
            continue
        logger.info("폴더 생성: %s", candidate)
        return candidate


def to_public_path(path: Path, root: Path) -> str:
    # "/tunmi/tunmi1.png" 형태 (OS 상관없이 슬래시)
    rel = Path(path).resolve().relative_to(Path(root).resolve())
    return "/" + rel.as_posix()


def resolve_public_dir(name: str, root: Path) -> Path:
    """
    요청으로 받은 디렉토리 이름("/tunmi", "tunmi", "tunmi/sub")을 public 루트 기준 경로로 변환.
    루트 밖으로 나가는 경로는 ValueError.
    """
    root = Path(root).resolve()
    target = (root / str(name).strip().lstrip("/\\")).resolve()
    if target != root and root not in target.parents:
        raise ValueError(f"Directory must be inside the public root: {name}")
    return target


def list_image_files(directory: Path) -> list[Path]:
    # 이름순, 일반 파일만, 확장자 대소문자 무시
    return [
        p for p in sorted(Path(directory).iterdir())
        if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
    ]
