# Stock watch core - shared components for the stock availability check
# Contains: extractor, store_filter, aggregator, fingerprint, detector, renderer, pipeline

from .models import (
    UNKNOWN_TITLE,
    RawStoreEntry,
    FilteredStoreEntry,
    ProductStock,
    StockSnapshot,
    ExtractedPage,
    FetchedPage,
)
from .extractor import extract_page, locate_store_array, decode_store_entries, StoreDataDecodeError
from .store_filter import filter_stores
from .aggregator import build_snapshot
from .fingerprint import compute_fingerprint, serialize_snapshot
from .detector import Decision, decide
from .renderer import render_payload
from .pipeline import CheckConfig, CheckResult, run_check

__all__ = [
    'UNKNOWN_TITLE',
    'RawStoreEntry',
    'FilteredStoreEntry',
    'ProductStock',
    'StockSnapshot',
    'ExtractedPage',
    'FetchedPage',
    'extract_page',
    'locate_store_array',
    'decode_store_entries',
    'StoreDataDecodeError',
    'filter_stores',
    'build_snapshot',
    'compute_fingerprint',
    'serialize_snapshot',
    'Decision',
    'decide',
    'render_payload',
    'CheckConfig',
    'CheckResult',
    'run_check',
]
