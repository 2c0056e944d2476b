"""
이미지 -> 영상 (Stability image-to-video)

흐름 (이미지 1장당)
1) resized/ 에 768 이하로 축소본 저장
2) 축소본으로 작업 제출 -> 작업 id
3) 첫 조회 전 고정 대기(기본 5분)
4) 최대 N회(기본 5) 결과 조회
   - 202: 아직 진행중 -> 간격(기본 1분) 쉬고 재시도
   - 200: videos/<원본이름>.mp4 저장 후 종료
   - 그 외: 즉시 실패 (남은 시도 안 씀)
5) 시도 다 쓰면 실패

디렉토리 단위 처리에서 한 장 실패해도 나머지는 계속 진행.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from backend.app.core.config import Settings
from backend.app.core.logger import get_logger
from backend.app.services.batch import BatchResult
from backend.app.services.images import resize_image
from backend.app.services.stability import StabilityAPIError, StabilityClient
from backend.app.services.storage import list_image_files

logger = get_logger(__name__)

Sleep = Callable[[float], None]


class VideoPollExhausted(RuntimeError):
    def __init__(self, job_id: str, attempts: int):
        self.job_id = job_id
        self.attempts = attempts
        super().__init__("Failed to retrieve the video after multiple attempts.")


@dataclass(frozen=True)
class PollPolicy:
    initial_wait: float = 300.0
    interval: float = 60.0
    max_attempts: int = 5
    backoff: float = 1.0          # 1.0 = 고정 간격
    max_interval: float = 600.0

    @classmethod
    def from_settings(cls, cfg: Settings) -> "PollPolicy":
        return cls(
            initial_wait=cfg.VIDEO_INITIAL_WAIT_SEC,
            interval=cfg.VIDEO_POLL_INTERVAL_SEC,
            max_attempts=cfg.VIDEO_MAX_ATTEMPTS,
            backoff=cfg.VIDEO_POLL_BACKOFF,
            max_interval=cfg.VIDEO_POLL_MAX_INTERVAL_SEC,
        )

    def delay_for(self, attempt: int) -> float:
        # attempt는 1부터
        return min(self.interval * (self.backoff ** (attempt - 1)), self.max_interval)


@dataclass
class VideoBatch:
    video_dir: Path
    resized_dir: Path
    result: BatchResult = field(default_factory=BatchResult)


def poll_video(
    client: StabilityClient,
    job_id: str,
    out_path: Path,
    policy: PollPolicy,
    sleep: Sleep = time.sleep,
) -> Path:
    out_path = Path(out_path)

    logger.info("작업 %s: 첫 조회 전 %.0f초 대기", job_id, policy.initial_wait)
    sleep(policy.initial_wait)

    for attempt in range(1, policy.max_attempts + 1):
        resp = client.fetch_video_result(job_id)

        if resp.status_code == 202:
            delay = policy.delay_for(attempt)
            logger.info(
                "작업 %s 진행중 (%d/%d). %.0f초 후 재시도",
                job_id, attempt, policy.max_attempts, delay,
            )
            sleep(delay)
            continue

        if resp.status_code == 200:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_bytes(resp.content)
            logger.info("작업 %s 완료 -> %s", job_id, out_path)
            return out_path

        raise StabilityAPIError(resp.status_code, resp.text)

    raise VideoPollExhausted(job_id, policy.max_attempts)


def image_to_video(
    image_path: Path,
    video_dir: Path,
    client: StabilityClient,
    policy: PollPolicy,
    cfg: Settings,
    sleep: Sleep = time.sleep,
) -> Path:
    """이미 리사이즈된 이미지 1장을 영상으로. 제출 실패는 그대로 예외"""
    image_path = Path(image_path)
    job_id = client.submit_video(
        image_path,
        seed=cfg.VIDEO_SEED,
        cfg_scale=cfg.VIDEO_CFG_SCALE,
        motion_bucket_id=cfg.VIDEO_MOTION_BUCKET_ID,
    )
    return poll_video(client, job_id, Path(video_dir) / f"{image_path.stem}.mp4", policy, sleep=sleep)


def process_directory(
    image_dir: Path,
    client: StabilityClient,
    policy: PollPolicy,
    cfg: Settings,
    sleep: Sleep = time.sleep,
) -> VideoBatch:
    image_dir = Path(image_dir)
    batch = VideoBatch(video_dir=image_dir / "videos", resized_dir=image_dir / "resized")
    batch.video_dir.mkdir(parents=True, exist_ok=True)
    batch.resized_dir.mkdir(parents=True, exist_ok=True)

    files = list_image_files(image_dir)
    logger.info("영상 변환 대상 %d개: %s", len(files), image_dir)

    for src in files:
        try:
            resized = resize_image(src, batch.resized_dir, max_size=cfg.RESIZE_MAX_SIZE)
            video = image_to_video(resized, batch.video_dir, client, policy, cfg, sleep=sleep)
            batch.result.add_success(src.name, video)
        except Exception as e:
            logger.error("이미지 처리 실패 %s: %s", src.name, e)
            batch.result.add_failure(src.name, e)

    if batch.result.failed:
        logger.warning("영상 변환 %d개 중 %d개 실패", len(files), len(batch.result.failed))
    return batch
