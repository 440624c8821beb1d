"""
設定載入模組

依序合併預設值、JSON 設定檔與環境變數，產生 CheckConfig。
環境變數優先於設定檔：
- STOCK_AVAILABILITY_URLS: 以逗號分隔的商品頁面 URL
- PREFERRED_STORE_IDS: 以逗號分隔的門市 ID
- UPDATE_HASH: 上次通知時保存的指紋
"""

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .pipeline import CheckConfig


# 預設值定義
DEFAULT_CONFIG = {
    "target_urls": [],
    "preferred_store_ids": [],
    "previous_fingerprint": "",
}

DEFAULT_CONFIG_PATH = "config/stock.json"

# 環境變數到設定欄位的映射
ENV_TO_CONFIG_KEY = {
    "STOCK_AVAILABILITY_URLS": "target_urls",
    "PREFERRED_STORE_IDS": "preferred_store_ids",
    "UPDATE_HASH": "previous_fingerprint",
}


@dataclass
class StateSettings:
    """GitHub 狀態儲存設定"""
    token: str = ""
    repository: str = ""
    variable_name: str = "UPDATE_HASH"

    @property
    def owner(self) -> str:
        return self.repository.split("/")[0] if "/" in self.repository else ""

    @property
    def repo(self) -> str:
        return self.repository.split("/")[1] if "/" in self.repository else ""


def split_csv(value: str) -> List[str]:
    """以逗號分割並去除空白項目"""
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def parse_store_ids(values: Any) -> List[int]:
    """
    將門市 ID 轉為整數列表

    Args:
        values: 逗號分隔字串或列表

    Returns:
        整數列表（保留順序與重複項目）

    Raises:
        ValueError: 含有無法轉為整數的 ID
    """
    if isinstance(values, str):
        values = split_csv(values)

    store_ids = []
    for value in values or []:
        if isinstance(value, bool):
            raise ValueError(f"Invalid store id: {value!r}")
        try:
            store_ids.append(int(str(value).strip()))
        except ValueError:
            raise ValueError(f"Invalid store id: {value!r}") from None
    return store_ids


def _load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    if not config_path or not os.path.exists(config_path):
        return {}
    with open(config_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {config_path}")
    return data


def load_check_config(
    config_path: Optional[str] = DEFAULT_CONFIG_PATH,
    environ: Optional[Mapping[str, str]] = None,
) -> CheckConfig:
    """
    載入檢查設定

    Args:
        config_path: JSON 設定檔路徑（不存在時略過）
        environ: 環境變數來源，預設為 os.environ

    Returns:
        CheckConfig

    Raises:
        ValueError: 門市 ID 格式錯誤或設定檔格式錯誤
    """
    if environ is None:
        environ = os.environ

    file_config = _load_config_file(config_path)
    merged = {**DEFAULT_CONFIG, **file_config}

    for env_name, key in ENV_TO_CONFIG_KEY.items():
        value = environ.get(env_name)
        if value:
            merged[key] = value

    target_urls = merged["target_urls"]
    if isinstance(target_urls, str):
        target_urls = split_csv(target_urls)

    return CheckConfig(
        target_urls=[url.strip() for url in target_urls if url and url.strip()],
        preferred_store_ids=parse_store_ids(merged["preferred_store_ids"]),
        previous_fingerprint=(merged["previous_fingerprint"] or "").strip(),
    )


def load_state_settings(environ: Optional[Mapping[str, str]] = None) -> StateSettings:
    """從環境變數讀取 GH_TOKEN 與 GITHUB_REPOSITORY"""
    if environ is None:
        environ = os.environ
    return StateSettings(
        token=environ.get("GH_TOKEN", ""),
        repository=environ.get("GITHUB_REPOSITORY", ""),
    )
