"""偏好門市過濾"""

from typing import Iterable, List, Union

from .models import FilteredStoreEntry, RawStoreEntry


def filter_stores(
    entries: Iterable[Union[RawStoreEntry, FilteredStoreEntry]],
    preferred_store_ids: Iterable[int],
) -> List[FilteredStoreEntry]:
    """
    只保留偏好門市，維持原始相對順序

    庫存旗標只有 True 才算有貨，缺少或非 bool 一律視為 False。
    對已過濾的結果再過濾一次會得到相同結果。

    Args:
        entries: 門市項目
        preferred_store_ids: 偏好門市 ID（可重複、可包含不存在的 ID）

    Returns:
        FilteredStoreEntry 列表
    """
    preferred = set(preferred_store_ids)
    return [
        FilteredStoreEntry(
            id=entry.id,
            name=entry.name,
            in_stock=entry.in_stock is True,
        )
        for entry in entries
        if entry.id in preferred
    ]
