"""
庫存檢查流程

Extractor -> Filter -> Aggregator -> Fingerprint -> Detector -> Renderer。
run_check 不寫入任何外部狀態；只有在 NOTIFY 時呼叫端才應保存新指紋。
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .aggregator import PageFetch, build_snapshot
from .detector import Decision, decide
from .fingerprint import compute_fingerprint
from .models import StockSnapshot
from .renderer import render_payload

logger = logging.getLogger(__name__)


@dataclass
class CheckConfig:
    """單次檢查的設定"""
    target_urls: List[str] = field(default_factory=list)
    preferred_store_ids: List[int] = field(default_factory=list)
    previous_fingerprint: str = ""


@dataclass
class CheckResult:
    """
    單次檢查的結果

    payload 只有在 decision 為 NOTIFY 時才不是 None（內容可能是空字串）。
    """
    decision: Decision
    fingerprint: str
    snapshot: StockSnapshot
    payload: Optional[str] = None

    @property
    def should_notify(self) -> bool:
        return self.decision is Decision.NOTIFY


def run_check(
    config: CheckConfig,
    fetch: PageFetch,
    max_workers: int = 1,
    line_break: str = "<br>",
) -> CheckResult:
    """
    執行一次完整的庫存檢查

    Args:
        config: CheckConfig
        fetch: 抓取函式，返回 FetchedPage
        max_workers: 並行抓取數
        line_break: 通知內文的換行字串

    Returns:
        CheckResult
    """
    snapshot = build_snapshot(
        config.target_urls,
        fetch,
        config.preferred_store_ids,
        max_workers=max_workers,
    )

    # 快照完整建立後才計算指紋
    fingerprint = compute_fingerprint(snapshot)
    decision = decide(snapshot.any_in_stock, fingerprint, config.previous_fingerprint)

    if decision is Decision.NO_STOCK:
        logger.info("No stock found")
        return CheckResult(decision, fingerprint, snapshot)

    if decision is Decision.UNCHANGED:
        logger.info("No stock change")
        return CheckResult(decision, fingerprint, snapshot)

    logger.info("Stock changed, new fingerprint %s", fingerprint)
    payload = render_payload(snapshot, line_break=line_break)
    return CheckResult(decision, fingerprint, snapshot, payload=payload)
