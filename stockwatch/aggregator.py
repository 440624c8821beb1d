"""
快照彙整模組

依追蹤 URL 的順序為每個目標建立一個 ProductStock，並計算整體是否有任何
偏好門市有貨。單一目標的抓取或擷取失敗只會讓該位置保持預設值，不會中斷
其他目標的處理。
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, List, Sequence

from .extractor import extract_page
from .models import FetchedPage, ProductStock, StockSnapshot
from .store_filter import filter_stores

logger = logging.getLogger(__name__)


PageFetch = Callable[[str], FetchedPage]


def process_target(
    url: str,
    fetch: PageFetch,
    preferred_store_ids: Iterable[int],
) -> ProductStock:
    """
    抓取並擷取單一目標

    Args:
        url: 商品頁面 URL
        fetch: 抓取函式，返回 FetchedPage
        preferred_store_ids: 偏好門市 ID

    Returns:
        該目標的 ProductStock（例外會向上拋出，由呼叫端處理）
    """
    page = fetch(url)
    extracted = extract_page(page.content, page.title_text, url=url)
    return ProductStock(
        product_title=extracted.title,
        store_data=filter_stores(extracted.entries, preferred_store_ids),
    )


def _safe_process(
    url: str,
    fetch: PageFetch,
    preferred_store_ids: Sequence[int],
) -> ProductStock:
    try:
        return process_target(url, fetch, preferred_store_ids)
    except Exception as e:
        logger.error("Error fetching %s: %s", url, e)
        return ProductStock()


def build_snapshot(
    target_urls: Sequence[str],
    fetch: PageFetch,
    preferred_store_ids: Iterable[int],
    max_workers: int = 1,
) -> StockSnapshot:
    """
    建立整次執行的 StockSnapshot

    結果長度永遠等於 target_urls 長度，第 i 個位置只由第 i 個目標填入。
    max_workers > 1 時以執行緒池並行處理，fetch 必須是執行緒安全的。

    Args:
        target_urls: 依序排列的商品頁面 URL
        fetch: 抓取函式
        preferred_store_ids: 偏好門市 ID
        max_workers: 並行數，1 表示依序處理

    Returns:
        StockSnapshot
    """
    preferred = list(preferred_store_ids)
    products: List[ProductStock] = [ProductStock() for _ in target_urls]

    if max_workers <= 1 or len(target_urls) <= 1:
        for index, url in enumerate(target_urls):
            logger.info("Checking [%d/%d] %s", index + 1, len(target_urls), url)
            products[index] = _safe_process(url, fetch, preferred)
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(_safe_process, url, fetch, preferred): index
                for index, url in enumerate(target_urls)
            }
            for future in as_completed(futures):
                products[futures[future]] = future.result()

    any_in_stock = False
    for product in products:
        any_in_stock = any_in_stock or product.has_stock

    return StockSnapshot(products=products, any_in_stock=any_in_stock)
