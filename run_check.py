#!/usr/bin/env python3
"""
門市庫存檢查執行腳本

供排程系統（例如 GitHub Actions）呼叫。結束代碼：
- 0: 庫存有變化，已產生通知
- 78: 沒有庫存或庫存沒有變化（中性結果，不需後續步驟）
- 1: 發生未預期的錯誤，沒有寫入任何狀態
"""
import argparse
import logging
import sys
from typing import Optional

from dotenv import load_dotenv

from scrapers.storefinder.fetcher import StoreFinderFetcher
from stockwatch.config import DEFAULT_CONFIG_PATH, load_check_config, load_state_settings
from stockwatch.logging_utils import setup_logging
from stockwatch.notifier import DEFAULT_RESULTS_FILE, TelegramNotifier, write_results_file
from stockwatch.pipeline import CheckResult, run_check
from stockwatch.renderer import render_payload
from stockwatch.state import (
    DEFAULT_STATE_FILE,
    EnvFingerprintStore,
    FileFingerprintStore,
    FingerprintStore,
    GitHubVariableStore,
)

# 載入 .env 檔案
load_dotenv()

logger = logging.getLogger("run_check")

EXIT_NOTIFY = 0
EXIT_ERROR = 1
EXIT_NEUTRAL = 78


def get_state_store(kind: str, state_file: str = DEFAULT_STATE_FILE) -> FingerprintStore:
    """
    根據名稱取得指紋儲存實例

    Args:
        kind: env, file 或 github
        state_file: file 模式使用的狀態檔路徑

    Returns:
        FingerprintStore
    """
    if kind == "env":
        return EnvFingerprintStore()
    elif kind == "file":
        return FileFingerprintStore(state_file)
    elif kind == "github":
        settings = load_state_settings()
        return GitHubVariableStore(
            token=settings.token,
            owner=settings.owner,
            repo=settings.repo,
            variable_name=settings.variable_name,
        )
    else:
        raise ValueError(f"Unknown state store: {kind}")


def deliver(
    result: CheckResult,
    results_file: Optional[str],
    telegram: bool,
) -> None:
    """輸出通知：結果檔（email 內文與新指紋）與可選的 Telegram 訊息"""
    if results_file:
        write_results_file(result.payload, results_file, fingerprint=result.fingerprint)

    if telegram:
        notifier = TelegramNotifier()
        text = render_payload(result.snapshot, line_break="\n")
        if not notifier.notify_stock(text):
            logger.warning("Telegram notification was not delivered")


def run(args: argparse.Namespace) -> int:
    """
    執行一次檢查

    Returns:
        結束代碼
    """
    config = load_check_config(args.config)
    store = get_state_store(args.state, args.state_file)

    if args.state != "env":
        config.previous_fingerprint = store.read()

    logger.info("Tracking URLs: %d", len(config.target_urls))
    logger.info("Preferred stores: %s", config.preferred_store_ids)
    if not config.target_urls:
        logger.warning("No tracking URLs configured")

    with StoreFinderFetcher(headless=not args.headed, timeout_ms=args.timeout_ms) as fetcher:
        result = run_check(config, fetcher)

    if not result.should_notify:
        return EXIT_NEUTRAL

    if args.dry_run:
        logger.info("DRY RUN: notification and state update skipped")
        print(result.payload)
        return EXIT_NOTIFY

    deliver(result, args.results_file, args.telegram)
    store.write(result.fingerprint)
    return EXIT_NOTIFY


def main(argv=None) -> int:
    """主程式"""
    parser = argparse.ArgumentParser(
        description="門市庫存檢查",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
範例:
  %(prog)s                          # 使用環境變數設定執行
  %(prog)s --state github           # 以 GitHub repository variable 保存指紋
  %(prog)s --state file --telegram  # 本機狀態檔，並發送 Telegram 通知
  %(prog)s --dry-run                # 測試模式（不通知、不寫入狀態）
        """
    )
    parser.add_argument(
        "--config", "-c",
        default=DEFAULT_CONFIG_PATH,
        help="JSON 設定檔路徑（環境變數優先）"
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="以有頭模式運行瀏覽器（用於除錯）"
    )
    parser.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="測試模式，不發送通知也不寫入指紋"
    )
    parser.add_argument(
        "--state",
        choices=["env", "file", "github"],
        default="env",
        help="指紋儲存方式"
    )
    parser.add_argument(
        "--state-file",
        default=DEFAULT_STATE_FILE,
        help="file 模式的狀態檔路徑"
    )
    parser.add_argument(
        "--results-file",
        default=DEFAULT_RESULTS_FILE,
        help="通知內文輸出檔（給寄信步驟讀取）"
    )
    parser.add_argument(
        "--telegram",
        action="store_true",
        help="同時發送 Telegram 通知"
    )
    parser.add_argument(
        "--timeout-ms",
        type=int,
        default=StoreFinderFetcher.DEFAULT_TIMEOUT_MS,
        help="每個頁面的載入逾時（毫秒）"
    )
    parser.add_argument("--log-level", default=None, help="日誌等級（預設讀取 LOG_LEVEL，否則 INFO）")
    parser.add_argument("--log-file", default=None, help="日誌檔路徑（預設讀取 LOG_FILE）")

    args = parser.parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file)

    try:
        return run(args)
    except Exception:
        logger.exception("Stock check failed")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
