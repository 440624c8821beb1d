"""
通知服務模組

- write_results_file: 輸出 {"emailBody": ..., "hash": ...} 給工作流程的寄信步驟讀取
- TelegramNotifier: 直接透過 Telegram Bot API 發送庫存通知
"""

import json
import logging
import os
from typing import Optional

import requests

logger = logging.getLogger(__name__)


DEFAULT_RESULTS_FILE = "results.txt"

# Telegram 單則訊息的長度上限
TELEGRAM_MAX_LENGTH = 4096


def write_results_file(
    payload: str,
    path: str = DEFAULT_RESULTS_FILE,
    fingerprint: Optional[str] = None,
) -> str:
    """
    將通知內文寫入結果檔

    Args:
        payload: 通知內文
        path: 輸出檔案路徑
        fingerprint: 新的快照指紋，提供時寫入 "hash" 欄位供後續步驟更新 UPDATE_HASH

    Returns:
        實際寫入的路徑
    """
    result = {"emailBody": payload}
    if fingerprint:
        result["hash"] = fingerprint

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(result, f, ensure_ascii=False)
    logger.info("Wrote notification payload to %s", path)
    return path


class TelegramNotifier:
    """Telegram 通知服務"""

    def __init__(self, bot_token: str = None, chat_id: str = None):
        self.bot_token = bot_token or os.getenv("TELEGRAM_BOT_TOKEN")
        self.chat_id = chat_id or os.getenv("TELEGRAM_CHAT_ID")
        if not self.bot_token or not self.chat_id:
            raise ValueError("TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID must be set")

    def _send_message(self, text: str) -> bool:
        """發送 Telegram 文字訊息"""
        url = f"https://api.telegram.org/bot{self.bot_token}/sendMessage"
        data = {
            "chat_id": self.chat_id,
            "text": text,
            "disable_web_page_preview": True,
        }

        try:
            response = requests.post(url, json=data, timeout=10)
            response.raise_for_status()
            return True
        except requests.RequestException as e:
            logger.error("Failed to send Telegram message: %s", e)
            return False

    def notify_stock(self, payload: str, title: str = "Stock available") -> bool:
        """
        發送庫存通知

        內文過長時會截斷在 Telegram 的長度上限內。

        Args:
            payload: render_payload 產生的內文（建議以 "\\n" 換行）
            title: 訊息第一行

        Returns:
            是否發送成功
        """
        message = f"{title}\n\n{payload}".rstrip()
        if len(message) > TELEGRAM_MAX_LENGTH:
            message = message[: TELEGRAM_MAX_LENGTH - 1] + "…"
        return self._send_message(message)
