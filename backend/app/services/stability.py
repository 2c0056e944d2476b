"""
Stability AI REST 클라이언트

NOTE: SDK 없이 requests로 직접 호출
- 이미지 생성: POST /v2beta/stable-image/generate/core (multipart, 응답은 이미지 bytes)
- 영상 제출:   POST /v2beta/image-to-video (multipart, 응답은 {"id": ...})
- 영상 조회:   GET  /v2beta/image-to-video/result/{id} (202=진행중, 200=mp4 bytes)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import requests

from backend.app.core.config import Settings
from backend.app.core.logger import get_logger

logger = get_logger(__name__)


class StabilityAPIError(RuntimeError):
    """200/202 이외의 응답. 상태코드와 본문을 그대로 들고 있음"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Response {status_code}: {body}")


class StabilityClient:
    def __init__(self, api_key: Optional[str], base_url: str = "https://api.stability.ai", timeout: float = 120.0):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls, cfg: Settings) -> "StabilityClient":
        return cls(
            api_key=cfg.STABILITY_API_KEY,
            base_url=cfg.STABILITY_API_BASE,
            timeout=cfg.REQUEST_TIMEOUT_SEC,
        )

    def _headers(self, accept: Optional[str] = None) -> dict:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if accept:
            headers["Accept"] = accept
        return headers

    def generate_image(
        self,
        prompt: str,
        *,
        width: int,
        height: int,
        output_format: str = "png",
        style_preset: Optional[str] = None,
    ) -> requests.Response:
        """상태코드 해석은 호출자 몫 (200이면 content가 이미지)"""
        fields = {
            "prompt": prompt,
            "output_format": output_format,
            "width": width,
            "height": height,
        }
        if style_preset:
            fields["style_preset"] = style_preset

        url = f"{self.base_url}/v2beta/stable-image/generate/core"
        logger.info("이미지 생성 요청: %s (%sx%s)", url, width, height)
        # (None, value) 튜플 -> 파일 없이 multipart 필드로 전송
        return requests.post(
            url,
            headers=self._headers("image/*"),
            files={k: (None, str(v)) for k, v in fields.items()},
            timeout=self.timeout,
        )

    def submit_video(
        self,
        image_path: Path,
        *,
        seed: int = 0,
        cfg_scale: float = 1.8,
        motion_bucket_id: int = 127,
    ) -> str:
        """이미지 -> 영상 작업 제출, 작업 id 반환"""
        image_path = Path(image_path)
        url = f"{self.base_url}/v2beta/image-to-video"
        with open(image_path, "rb") as f:
            resp = requests.post(
                url,
                headers=self._headers(),
                files={"image": (image_path.name, f)},
                data={"seed": seed, "cfg_scale": cfg_scale, "motion_bucket_id": motion_bucket_id},
                timeout=self.timeout,
            )

        if resp.status_code != 200:
            raise StabilityAPIError(resp.status_code, resp.text)

        job_id = (resp.json() or {}).get("id")
        if not job_id:
            raise StabilityAPIError(resp.status_code, f"missing generation id: {resp.text}")

        logger.info("영상 작업 제출 완료: %s -> id=%s", image_path.name, job_id)
        return job_id

    def fetch_video_result(self, job_id: str) -> requests.Response:
        url = f"{self.base_url}/v2beta/image-to-video/result/{job_id}"
        return requests.get(url, headers=self._headers("video/*"), timeout=self.timeout)
