"""
內嵌門市資料擷取模組

分為兩個階段：
1. locate_store_array: 以正規表示式在原始頁面文字中定位
   window.storeFinder([...], 'AU' 呼叫裡的 JSON 陣列
2. decode_store_entries: 嚴格解碼該陣列為 RawStoreEntry 列表

extract_page 結合兩者，任何擷取失敗都只會降級為「沒有門市資料」。
"""

import json
import logging
import re
from typing import List, Optional

from .models import ExtractedPage, RawStoreEntry, UNKNOWN_TITLE

logger = logging.getLogger(__name__)


# 門市資料的內嵌格式：window.storeFinder(<JSON array>, 'AU', ...)
STORE_FINDER_PATTERN = re.compile(
    r"window\.storeFinder\(\s*(\[[\s\S]*?\])\s*,\s*'AU'"
)


class StoreDataDecodeError(ValueError):
    """內嵌門市陣列無法解碼"""
    pass


def locate_store_array(page_content: str) -> Optional[str]:
    """
    在頁面原始碼中找出門市 JSON 陣列的文字

    Args:
        page_content: 頁面原始 HTML

    Returns:
        陣列文字，找不到時返回 None
    """
    if not page_content:
        return None

    match = STORE_FINDER_PATTERN.search(page_content)
    if match and match.group(1):
        return match.group(1)
    return None


def _parse_store_item(item: dict) -> Optional[RawStoreEntry]:
    """將單一 JSON 物件轉為 RawStoreEntry，Id 不是整數時返回 None"""
    store_id = item.get("Id")
    # bool 是 int 的子類別，需排除
    if isinstance(store_id, bool) or not isinstance(store_id, int):
        return None

    name = item.get("Name")
    in_stock = item.get("SearchedProductIsInStock")

    return RawStoreEntry(
        id=store_id,
        name=name if isinstance(name, str) else "",
        in_stock=in_stock if isinstance(in_stock, bool) else None,
    )


def decode_store_entries(array_text: str) -> List[RawStoreEntry]:
    """
    將門市陣列文字解碼為 RawStoreEntry 列表

    非物件的項目與沒有整數 Id 的項目會被略過，未知欄位一律忽略。

    Args:
        array_text: locate_store_array 取得的 JSON 陣列文字

    Returns:
        依原始順序排列的門市項目

    Raises:
        StoreDataDecodeError: JSON 格式錯誤或解碼結果不是陣列
    """
    try:
        data = json.loads(array_text)
    except (TypeError, ValueError) as e:
        raise StoreDataDecodeError(f"Invalid store JSON: {e}") from e

    if not isinstance(data, list):
        raise StoreDataDecodeError(
            f"Expected a JSON array, got {type(data).__name__}"
        )

    entries = []
    for item in data:
        if not isinstance(item, dict):
            continue
        entry = _parse_store_item(item)
        if entry is not None:
            entries.append(entry)
    return entries


def extract_page(
    page_content: str,
    title_text: Optional[str] = None,
    url: str = "",
) -> ExtractedPage:
    """
    從單一頁面擷取商品標題與門市資料

    找不到內嵌資料時不視為錯誤；解碼失敗會記錄錯誤並返回空的門市資料。

    Args:
        page_content: 頁面原始 HTML
        title_text: 標題元素的文字，元素不存在時為 None
        url: 頁面 URL，只用於日誌

    Returns:
        ExtractedPage
    """
    # 標題元素存在但沒有文字時保留空字串，只有元素不存在才使用預設值
    title = UNKNOWN_TITLE if title_text is None else title_text.strip()

    array_text = locate_store_array(page_content)
    if array_text is None:
        logger.info("No store data found in %s", url or "page")
        return ExtractedPage(title=title)

    try:
        entries = decode_store_entries(array_text)
    except StoreDataDecodeError as e:
        logger.error("Error parsing JSON from %s: %s", url or "page", e)
        return ExtractedPage(title=title)

    return ExtractedPage(title=title, entries=entries)
