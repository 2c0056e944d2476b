"""
설정 로더

목표
- Python 3.9+에서도 문제 없이 돌아가게(= `str | None` 같은 3.10+ 문법 금지)
- .env가 좀 지저분해도, 깨지지 않게(extra ignore)
- 서비스들은 settings를 직접 읽지 않고 인자로 받는다(테스트에서 가짜 루트/엔드포인트 주입)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CONTEXT_PROMPT = (
    "African Context: Imagine scenes inspired by the rich tapestry of African landscapes, "
    "cultures, and traditions. From the vast savannahs teeming with wildlife to bustling "
    "marketplaces filled with vibrant colors and sounds, capture the essence of Africa's "
    "diversity and beauty."
)


class Settings(BaseSettings):
    # .env 사용 + 알 수 없는 키 무시
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- API Keys ---
    # 검증하지 않음: 없으면 원격에서 인증 실패로 드러남
    STABILITY_API_KEY: Optional[str] = Field(default=None)
    STABILITY_API_BASE: str = "https://api.stability.ai"
    REQUEST_TIMEOUT_SEC: float = 120.0

    # --- Server / Console ---
    API_HOST: str = "127.0.0.1"
    API_PORT: int = 8000
    CONSOLE_PORT_START: int = 8501
    CONSOLE_PORT_END: int = 8510
    LOG_LEVEL: str = "INFO"

    # --- Paths ---
    PUBLIC_DIR: str = "public"
    PUBLIC_URL_PREFIX: str = "/public"
    FOLDER_BASE_NAME: str = "tunmi"
    IMAGE_FILE_PREFIX: str = "tunmi"

    # --- Image generation (고정값) ---
    IMAGE_CONTEXT_PROMPT: str = DEFAULT_CONTEXT_PROMPT
    IMAGE_WIDTH: int = 1024
    IMAGE_HEIGHT: int = 576
    IMAGE_OUTPUT_FORMAT: str = "png"
    IMAGE_STYLE_PRESET: str = "analog-film"

    # --- Resize ---
    RESIZE_MAX_SIZE: int = 768

    # --- Image -> Video ---
    VIDEO_SEED: int = 0
    VIDEO_CFG_SCALE: float = 1.8
    VIDEO_MOTION_BUCKET_ID: int = 127

    # 폴링: 첫 조회 전 5분 대기, 202면 1분 쉬고 재시도, 최대 5회
    VIDEO_INITIAL_WAIT_SEC: float = 300.0
    VIDEO_POLL_INTERVAL_SEC: float = 60.0
    VIDEO_MAX_ATTEMPTS: int = 5
    # 1.0이면 고정 간격. 1보다 크면 시도마다 간격이 늘어남(상한 MAX_INTERVAL)
    VIDEO_POLL_BACKOFF: float = 1.0
    VIDEO_POLL_MAX_INTERVAL_SEC: float = 600.0

    @property
    def public_root(self) -> Path:
        return Path(self.PUBLIC_DIR)

    @property
    def api_base(self) -> str:
        return f"http://{self.API_HOST}:{self.API_PORT}"


settings = Settings()


def get_settings() -> Settings:
    """FastAPI 의존성. 테스트에서는 dependency_overrides로 교체"""
    return settings
