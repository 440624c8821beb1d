"""
日誌設定

排程執行時日誌是唯一的除錯線索，因此：
- 終端輸出一律開啟（GitHub Actions 會收集 stdout/stderr）
- 可選的輪替日誌檔供本機長時間執行使用
- requests 與 Playwright 的底層 logger 壓到 WARNING，避免淹沒檢查結果
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

# 第三方套件的 logger 名稱
NOISY_LOGGERS = ("urllib3", "asyncio")


def resolve_level(level: Optional[str]) -> int:
    """將等級名稱轉為 logging 常數，無法辨識時使用 INFO"""
    value = getattr(logging, (level or "INFO").strip().upper(), None)
    return value if isinstance(value, int) else logging.INFO


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    max_bytes: int = 5_000_000,
    backup_count: int = 3,
) -> logging.Logger:
    """
    設定 root logger

    Args:
        level: 日誌等級名稱，未提供時讀取 LOG_LEVEL 環境變數
        log_file: 輪替日誌檔路徑，未提供時讀取 LOG_FILE 環境變數（空值表示不寫檔）
        max_bytes: 單一日誌檔大小上限
        backup_count: 保留的舊日誌檔數量

    Returns:
        設定完成的 root logger
    """
    level = level or os.getenv("LOG_LEVEL")
    log_file = log_file or os.getenv("LOG_FILE")

    root = logging.getLogger()
    # 重複呼叫時避免重複 handler
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    root.setLevel(resolve_level(level))
    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))

    return root
