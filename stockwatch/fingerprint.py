"""
快照指紋模組

以固定欄位順序的緊湊 JSON 序列化 StockSnapshot，再計算 SHA-256。
欄位名稱與格式沿用先前部署的 UPDATE_HASH，但缺少或非 bool 的庫存旗標
現在一律序列化為 false（先前會保留原值或省略），含這類門市的舊指紋
會不同，升級後第一次執行可能多發一次通知。
"""

import hashlib
import json
from typing import Dict, List

from .models import StockSnapshot


def snapshot_to_records(snapshot: StockSnapshot) -> List[Dict]:
    """轉為序列化用的有序 dict 列表"""
    return [
        {
            "productTitle": product.product_title,
            "storeData": [
                {
                    "id": store.id,
                    "name": store.name,
                    "itemInStock": store.in_stock,
                }
                for store in product.store_data
            ],
        }
        for product in snapshot.products
    ]


def serialize_snapshot(snapshot: StockSnapshot) -> str:
    """緊湊且決定性的 JSON 字串（不含時間戳記或隨機資料）"""
    return json.dumps(
        snapshot_to_records(snapshot),
        ensure_ascii=False,
        separators=(",", ":"),
    )


def compute_fingerprint(snapshot: StockSnapshot) -> str:
    """
    計算快照的 SHA-256 指紋

    Args:
        snapshot: 已完整建立的 StockSnapshot

    Returns:
        64 字元的十六進位字串
    """
    payload = serialize_snapshot(snapshot).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()
