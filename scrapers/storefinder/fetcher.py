"""
門市庫存頁面抓取器

繼承 BaseFetcher，以單一瀏覽器頁面依序載入商品頁：
- 只放行 document 請求，其餘資源一律中止
- 取得回應的原始 HTML（門市資料內嵌在 script 中）
- 讀取 .store-product-title 作為商品標題
"""

import logging
from typing import Optional

from playwright.sync_api import Page, Route

from stockwatch.base_fetcher import BaseFetcher
from stockwatch.models import FetchedPage

logger = logging.getLogger(__name__)


class PageFetchError(Exception):
    """頁面載入沒有取得任何回應"""
    pass


class StoreFinderFetcher(BaseFetcher):
    """門市庫存頁面抓取器"""

    TITLE_SELECTOR = ".store-product-title"
    ALLOWED_RESOURCE_TYPES = {"document"}
    DEFAULT_TIMEOUT_MS = 10000

    def __init__(self, headless: bool = True, timeout_ms: int = DEFAULT_TIMEOUT_MS):
        """
        Args:
            headless: 是否以無頭模式運行瀏覽器
            timeout_ms: 每個頁面的載入逾時（毫秒），逾時不重試
        """
        super().__init__(headless=headless)
        self.timeout_ms = timeout_ms

    def _handle_route(self, route: Route) -> None:
        if route.request.resource_type in self.ALLOWED_RESOURCE_TYPES:
            route.continue_()
        else:
            route.abort()

    def _setup_page(self, page: Page) -> None:
        page.route("**/*", self._handle_route)

    def _read_title(self) -> Optional[str]:
        element = self._page.query_selector(self.TITLE_SELECTOR)
        if element is None:
            return None
        return (element.text_content() or "").strip()

    def fetch(self, url: str) -> FetchedPage:
        if self._page is None:
            self._init_browser()

        logger.info("Loading URL: %s", url)
        response = self._page.goto(
            url,
            wait_until="domcontentloaded",
            timeout=self.timeout_ms,
        )
        if response is None:
            raise PageFetchError(f"No response received for {url}")

        content = response.text()
        return FetchedPage(url=url, content=content, title_text=self._read_title())
