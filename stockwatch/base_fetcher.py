"""
頁面抓取基礎類別模組

定義所有頁面抓取器的共用介面和行為，包括：
- 抽象方法定義 (fetch)
- 瀏覽器初始化和關閉邏輯
- User-Agent 輪換
"""

import logging
import random
from abc import ABC, abstractmethod
from typing import List, Optional

from playwright.sync_api import sync_playwright, Page, Browser, BrowserContext, Playwright

from .models import FetchedPage

logger = logging.getLogger(__name__)


class BaseFetcher(ABC):
    """
    頁面抓取基礎類別

    子類別實作 fetch，將單一 URL 轉為 FetchedPage（原始 HTML 與標題文字）。
    瀏覽器在 context manager 進入時啟動，並在多個 URL 之間共用。
    """

    # 預設 User-Agent 列表，用於輪換以避免被封鎖
    DEFAULT_USER_AGENTS = [
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15",
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    ]

    # Chromium 在容器中執行時需要的參數
    DEFAULT_LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

    def __init__(self, headless: bool = True, user_agents: Optional[List[str]] = None):
        """
        初始化抓取器

        Args:
            headless: 是否以無頭模式運行瀏覽器
            user_agents: 自訂 User-Agent 列表，若為 None 則使用預設列表
        """
        self.headless = headless
        self.user_agents = user_agents or self.DEFAULT_USER_AGENTS.copy()

        # 瀏覽器相關實例（延遲初始化）
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

        self._current_user_agent: Optional[str] = None

    @abstractmethod
    def fetch(self, url: str) -> FetchedPage:
        """
        抓取指定 URL

        Args:
            url: 商品頁面 URL

        Returns:
            FetchedPage

        Raises:
            任何抓取錯誤都直接拋出，由彙整層決定如何降級
        """
        pass

    def __call__(self, url: str) -> FetchedPage:
        return self.fetch(url)

    @property
    def page(self) -> Optional[Page]:
        """取得當前頁面實例"""
        return self._page

    def _get_user_agent(self) -> str:
        """隨機選擇一個 User-Agent"""
        self._current_user_agent = random.choice(self.user_agents)
        return self._current_user_agent

    def _setup_page(self, page: Page) -> None:
        """頁面建立後的額外設定，子類別可覆寫"""
        pass

    def _init_browser(self) -> None:
        """
        初始化瀏覽器

        啟動 Playwright 和 Chromium 瀏覽器，建立新的瀏覽器上下文和頁面。
        """
        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(
            headless=self.headless,
            args=self.DEFAULT_LAUNCH_ARGS,
        )
        self._context = self._browser.new_context(
            user_agent=self._get_user_agent()
        )
        self._page = self._context.new_page()
        self._setup_page(self._page)

    def _close_browser(self) -> None:
        """
        關閉瀏覽器

        依序關閉頁面、上下文、瀏覽器和 Playwright 實例，關閉失敗只記錄警告。
        """
        for name in ("_page", "_context", "_browser"):
            resource = getattr(self, name)
            if resource:
                try:
                    resource.close()
                except Exception as e:
                    logger.warning("Error closing %s: %s", name.lstrip("_"), e)
                setattr(self, name, None)

        if self._playwright:
            try:
                self._playwright.stop()
            except Exception as e:
                logger.warning("Error stopping playwright: %s", e)
            self._playwright = None

    def __enter__(self):
        """支援 context manager 用法"""
        self._init_browser()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """支援 context manager 用法"""
        self._close_browser()
        return False
