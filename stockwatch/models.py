"""
資料模型模組

定義庫存檢查流程中各階段共用的資料結構：
- RawStoreEntry: 從頁面內嵌資料解碼出的門市項目
- FilteredStoreEntry: 經偏好門市過濾後的正規化項目
- ProductStock: 單一商品頁的結果
- StockSnapshot: 整次執行的有序結果集合
"""

from dataclasses import dataclass, field
from typing import List, Optional


# 找不到商品標題時使用的預設值
UNKNOWN_TITLE = "Unknown"


@dataclass
class RawStoreEntry:
    """頁面內嵌資料中的單一門市項目（未過濾）"""
    id: int
    name: str
    in_stock: Optional[bool] = None


@dataclass(frozen=True)
class FilteredStoreEntry:
    """偏好門市項目，in_stock 一定是 bool"""
    id: int
    name: str
    in_stock: bool


@dataclass
class ProductStock:
    """單一追蹤頁面的庫存結果"""
    product_title: str = UNKNOWN_TITLE
    store_data: List[FilteredStoreEntry] = field(default_factory=list)

    @property
    def has_stock(self) -> bool:
        return any(store.in_stock for store in self.store_data)


@dataclass
class StockSnapshot:
    """
    整次執行的庫存快照

    products 的順序與長度永遠對應設定的追蹤 URL 列表。
    """
    products: List[ProductStock] = field(default_factory=list)
    any_in_stock: bool = False

    def __len__(self) -> int:
        return len(self.products)


@dataclass
class ExtractedPage:
    """單一頁面的擷取結果"""
    title: str = UNKNOWN_TITLE
    entries: List[RawStoreEntry] = field(default_factory=list)


@dataclass
class FetchedPage:
    """頁面抓取層交給核心的原始資料"""
    url: str
    content: str
    title_text: Optional[str] = None
