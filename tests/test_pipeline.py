#!/usr/bin/env python3
"""
測試完整檢查流程、變更判斷與通知內文
"""
import unittest
from unittest.mock import patch

from stockwatch.detector import Decision, decide
from stockwatch.fingerprint import compute_fingerprint
from stockwatch.models import FetchedPage, FilteredStoreEntry, ProductStock, StockSnapshot
from stockwatch.pipeline import CheckConfig, run_check
from stockwatch.renderer import render_payload


def make_fetch(pages):
    def fetch(url):
        content, title = pages[url]
        return FetchedPage(url=url, content=content, title_text=title)
    return fetch


IN_STOCK_PAGE = (
    "<script>window.storeFinder(["
    '{"Id":10,"Name":"Alpha","SearchedProductIsInStock":true},'
    '{"Id":30,"Name":"Beta","SearchedProductIsInStock":true}'
    "], 'AU');</script>"
)

OUT_OF_STOCK_PAGE = (
    "<script>window.storeFinder(["
    '{"Id":10,"Name":"Alpha","SearchedProductIsInStock":false}'
    "], 'AU');</script>"
)


class TestDecide(unittest.TestCase):
    def test_no_stock_short_circuits(self):
        """測試沒有庫存時不論指紋都返回 NO_STOCK"""
        self.assertIs(decide(False, "abc", "def"), Decision.NO_STOCK)
        self.assertIs(decide(False, "abc", "abc"), Decision.NO_STOCK)

    def test_unchanged(self):
        """測試指紋相同"""
        self.assertIs(decide(True, "abc", "abc"), Decision.UNCHANGED)

    def test_notify(self):
        """測試指紋不同或沒有舊指紋"""
        self.assertIs(decide(True, "abc", "def"), Decision.NOTIFY)
        self.assertIs(decide(True, "abc", ""), Decision.NOTIFY)


class TestRenderPayload(unittest.TestCase):
    def test_separator_between_products_only(self):
        """測試分隔線只出現在商品之間"""
        snapshot = StockSnapshot(products=[
            ProductStock("Widget", [
                FilteredStoreEntry(10, "Alpha", True),
                FilteredStoreEntry(20, "Gamma", False),
            ]),
            ProductStock("Gadget", [FilteredStoreEntry(10, "Alpha", False)]),
        ], any_in_stock=True)

        self.assertEqual(
            render_payload(snapshot),
            "Widget<br>- Alpha: In stock<br>- Gamma: Out of stock<br>"
            "<br>---<br><br>"
            "Gadget<br>- Alpha: Out of stock<br>",
        )

    def test_product_without_stores(self):
        """測試沒有門市資料的商品只輸出標題"""
        snapshot = StockSnapshot(products=[ProductStock()])
        self.assertEqual(render_payload(snapshot), "Unknown<br>")

    def test_plain_text_line_break(self):
        """測試自訂換行字串"""
        snapshot = StockSnapshot(products=[
            ProductStock("A", [FilteredStoreEntry(1, "S", True)]),
            ProductStock("B"),
        ])
        self.assertEqual(
            render_payload(snapshot, line_break="\n"),
            "A\n- S: In stock\n\n---\n\nB\n",
        )

    def test_empty_snapshot(self):
        """測試空快照"""
        self.assertEqual(render_payload(StockSnapshot()), "")


class TestRunCheck(unittest.TestCase):
    def test_no_stock(self):
        """測試偏好門市都沒貨：不產生內文"""
        config = CheckConfig(["url1"], [10, 20], "")
        result = run_check(config, make_fetch({"url1": (OUT_OF_STOCK_PAGE, "Widget")}))

        self.assertIs(result.decision, Decision.NO_STOCK)
        self.assertIsNone(result.payload)
        self.assertFalse(result.should_notify)

    def test_unchanged(self):
        """測試指紋與上次相同：不產生內文"""
        fetch = make_fetch({"url1": (IN_STOCK_PAGE, "Widget")})
        first = run_check(CheckConfig(["url1"], [10, 20], ""), fetch)
        second = run_check(CheckConfig(["url1"], [10, 20], first.fingerprint), fetch)

        self.assertIs(second.decision, Decision.UNCHANGED)
        self.assertIsNone(second.payload)
        self.assertFalse(second.should_notify)

    def test_notify(self):
        """測試有庫存且指紋改變：產生內文與新指紋"""
        pages = {
            "url1": (IN_STOCK_PAGE, "Widget"),
            "url2": (OUT_OF_STOCK_PAGE, "Gadget"),
        }
        result = run_check(CheckConfig(["url1", "url2"], [10], "stale"), make_fetch(pages))

        self.assertIs(result.decision, Decision.NOTIFY)
        self.assertTrue(result.should_notify)
        self.assertEqual(len(result.fingerprint), 64)
        self.assertEqual(result.fingerprint, compute_fingerprint(result.snapshot))
        self.assertEqual(
            result.payload,
            "Widget<br>- Alpha: In stock<br><br>---<br><br>Gadget<br>- Alpha: Out of stock<br>",
        )

    def test_empty_configuration(self):
        """測試沒有追蹤 URL 與偏好門市"""
        result = run_check(CheckConfig(), make_fetch({}))
        self.assertIs(result.decision, Decision.NO_STOCK)
        self.assertEqual(len(result.snapshot), 0)

    def test_fingerprint_failure_propagates(self):
        """測試指紋計算錯誤直接拋出"""
        fetch = make_fetch({"url1": (IN_STOCK_PAGE, "Widget")})
        with patch("stockwatch.pipeline.compute_fingerprint", side_effect=TypeError("bad")):
            with self.assertRaises(TypeError):
                run_check(CheckConfig(["url1"], [10], ""), fetch)


if __name__ == "__main__":
    unittest.main()
