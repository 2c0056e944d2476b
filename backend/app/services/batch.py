"""
배치 결과

프롬프트/이미지를 하나씩 처리하면서 실패한 항목은 건너뛴다.
건너뛴 이유를 로그에만 남기지 않고 여기 모아서 호출자가 확인할 수 있게 함.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class ItemOutcome:
    item: Any                    # 입력(프롬프트 문자열, 이미지 경로 등)
    ok: bool
    value: Any = None            # 성공 시 결과(저장 경로 등)
    error: Optional[str] = None  # 실패 시 사유


@dataclass
class BatchResult:
    items: List[ItemOutcome] = field(default_factory=list)

    def add_success(self, item: Any, value: Any) -> None:
        self.items.append(ItemOutcome(item=item, ok=True, value=value))

    def add_failure(self, item: Any, error: BaseException) -> None:
        self.items.append(ItemOutcome(item=item, ok=False, error=str(error) or type(error).__name__))

    @property
    def succeeded(self) -> List[ItemOutcome]:
        return [o for o in self.items if o.ok]

    @property
    def failed(self) -> List[ItemOutcome]:
        return [o for o in self.items if not o.ok]

    @property
    def values(self) -> list:
        return [o.value for o in self.succeeded]
