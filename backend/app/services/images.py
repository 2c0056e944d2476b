"""
이미지 생성 / 리사이즈

- generate_images: 프롬프트마다 Stability 이미지 API를 1번씩 호출해서 PNG로 저장
  (한 프롬프트가 실패해도 전체는 계속 진행, 실패한 건 결과 목록에서 빠짐)
- resize_image: 영상 API에 넣기 전 768x768 안쪽으로 축소 (확대는 안 함)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

import cv2

from backend.app.core.config import Settings
from backend.app.core.logger import get_logger
from backend.app.services.batch import BatchResult
from backend.app.services.stability import StabilityAPIError, StabilityClient
from backend.app.services.storage import allocate_folder, to_public_path

logger = get_logger(__name__)


@dataclass
class ImageBatch:
    folder: Path                 # 실제 생성된 폴더
    folder_name: str             # public 기준 상대경로 ("/tunmi")
    images: List[str] = field(default_factory=list)  # 성공한 이미지 상대경로 (프롬프트 순서)
    result: BatchResult = field(default_factory=BatchResult)


def build_prompt(context: str, prompt: str) -> str:
    # 고정 문맥 + 빈 줄 + 개별 프롬프트
    return f"{context}\n\n{prompt}"


def generate_images(prompts: Sequence[str], client: StabilityClient, cfg: Settings) -> ImageBatch:
    root = cfg.public_root
    folder = allocate_folder(root / cfg.FOLDER_BASE_NAME)
    batch = ImageBatch(folder=folder, folder_name=to_public_path(folder, root))

    for i, prompt in enumerate(prompts):
        try:
            resp = client.generate_image(
                build_prompt(cfg.IMAGE_CONTEXT_PROMPT, prompt),
                width=cfg.IMAGE_WIDTH,
                height=cfg.IMAGE_HEIGHT,
                output_format=cfg.IMAGE_OUTPUT_FORMAT,
                style_preset=cfg.IMAGE_STYLE_PRESET,
            )
            if resp.status_code != 200:
                raise StabilityAPIError(resp.status_code, resp.text)

            out = folder / f"{cfg.IMAGE_FILE_PREFIX}{i + 1}.{cfg.IMAGE_OUTPUT_FORMAT}"
            out.write_bytes(resp.content)
            rel = to_public_path(out, root)
            batch.images.append(rel)
            batch.result.add_success(prompt, rel)
            logger.info("이미지 생성 완료 [%d/%d]: %s", i + 1, len(prompts), rel)
        except Exception as e:
            # 프롬프트 하나 실패 -> 로그 남기고 다음으로
            logger.error("이미지 생성 실패 [%d/%d] prompt=%r: %s", i + 1, len(prompts), prompt, e)
            batch.result.add_failure(prompt, e)

    if batch.result.failed:
        logger.warning("이미지 %d개 중 %d개 실패", len(prompts), len(batch.result.failed))
    return batch


def fit_within(width: int, height: int, max_size: int) -> tuple:
    """비율 유지 + max_size 안쪽 + 확대 금지"""
    scale = min(max_size / width, max_size / height, 1.0)
    if scale >= 1.0:
        return width, height
    return max(1, round(width * scale)), max(1, round(height * scale))


def resize_image(src: Path, dest_dir: Path, max_size: int = 768) -> Path:
    """
    src를 dest_dir/같은파일명 으로 축소 저장 (있으면 덮어씀)
    읽기 실패/저장 실패는 그대로 예외
    """
    src = Path(src)
    dest_dir = Path(dest_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)

    # 알파 채널 유지
    img = cv2.imread(str(src), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ValueError(f"이미지를 읽을 수 없습니다: {src}")

    h, w = img.shape[:2]
    new_w, new_h = fit_within(w, h, max_size)
    if (new_w, new_h) != (w, h):
        img = cv2.resize(img, (new_w, new_h), interpolation=cv2.INTER_AREA)

    out = dest_dir / src.name
    if not cv2.imwrite(str(out), img):
        raise RuntimeError(f"리사이즈 결과 저장 실패: {out}")

    logger.info("리사이즈: %s (%dx%d -> %dx%d)", src.name, w, h, new_w, new_h)
    return out
