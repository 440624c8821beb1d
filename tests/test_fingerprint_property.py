#!/usr/bin/env python3
"""
Property-based tests for snapshot fingerprints

Feature: stock-change-detection
Property 1: Fingerprint determinism
Property 2: Fingerprint sensitivity to order and values

*For any* StockSnapshot S, fingerprint(S) SHALL equal fingerprint(S') for every
structurally equal S', and structurally distinct snapshots SHALL produce
different fingerprints.
"""
import sys
import os
import copy
import unittest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hypothesis import given, strategies as st, settings

from stockwatch.fingerprint import compute_fingerprint, serialize_snapshot
from stockwatch.models import FilteredStoreEntry, ProductStock, RawStoreEntry, StockSnapshot
from stockwatch.store_filter import filter_stores


# Strategies for generating test data
store_strategy = st.builds(
    FilteredStoreEntry,
    id=st.integers(min_value=1, max_value=10_000),
    name=st.text(max_size=30),
    in_stock=st.booleans(),
)

product_strategy = st.builds(
    ProductStock,
    product_title=st.text(max_size=50),
    store_data=st.lists(store_strategy, max_size=5),
)


stocked_product_strategy = st.builds(
    ProductStock,
    product_title=st.text(max_size=50),
    store_data=st.lists(store_strategy, min_size=1, max_size=5),
)


@st.composite
def snapshot_strategy(draw, min_size=0, with_stores=False):
    strategy = stocked_product_strategy if with_stores else product_strategy
    products = draw(st.lists(strategy, min_size=min_size, max_size=6))
    any_in_stock = any(p.has_stock for p in products)
    return StockSnapshot(products=products, any_in_stock=any_in_stock)


@settings(max_examples=100)
@given(snapshot=snapshot_strategy())
def test_fingerprint_is_deterministic(snapshot):
    """
    Feature: stock-change-detection
    Property 1: Fingerprint determinism

    A structurally equal copy hashes to the same 64-character hex digest.
    """
    clone = copy.deepcopy(snapshot)

    first = compute_fingerprint(snapshot)
    second = compute_fingerprint(clone)

    assert first == second
    assert len(first) == 64
    assert all(c in "0123456789abcdef" for c in first)


@settings(max_examples=100)
@given(products=st.lists(product_strategy, min_size=2, max_size=6, unique_by=repr))
def test_fingerprint_depends_on_product_order(products):
    """
    Feature: stock-change-detection
    Property 2: Fingerprint sensitivity (order)
    """
    any_in_stock = any(p.has_stock for p in products)
    snapshot = StockSnapshot(products=products, any_in_stock=any_in_stock)
    reordered = StockSnapshot(products=list(reversed(products)), any_in_stock=any_in_stock)

    assert compute_fingerprint(reordered) != compute_fingerprint(snapshot)


@settings(max_examples=100)
@given(snapshot=snapshot_strategy(min_size=1, with_stores=True), data=st.data())
def test_fingerprint_depends_on_stock_values(snapshot, data):
    """
    Feature: stock-change-detection
    Property 2: Fingerprint sensitivity (values)

    Flipping a single store's stock flag changes the fingerprint.
    """
    candidates = [
        (i, j)
        for i, product in enumerate(snapshot.products)
        for j in range(len(product.store_data))
    ]
    i, j = data.draw(st.sampled_from(candidates))

    changed = copy.deepcopy(snapshot)
    store = changed.products[i].store_data[j]
    changed.products[i].store_data[j] = FilteredStoreEntry(store.id, store.name, not store.in_stock)

    assert compute_fingerprint(changed) != compute_fingerprint(snapshot)


class TestSerializationFormat(unittest.TestCase):
    """固定序列化格式，bool 庫存旗標的指紋與已儲存的 UPDATE_HASH 相同"""

    def test_compact_field_order(self):
        snapshot = StockSnapshot(products=[
            ProductStock("Widget", [FilteredStoreEntry(10, "A", True)]),
        ], any_in_stock=True)
        self.assertEqual(
            serialize_snapshot(snapshot),
            '[{"productTitle":"Widget","storeData":[{"id":10,"name":"A","itemInStock":true}]}]',
        )
        self.assertEqual(
            compute_fingerprint(snapshot),
            "4ee3b64f546a6682d4fec3706900c7cad1eb89beac36232524b557e45daecad0",
        )

    def test_missing_flag_serialized_as_false(self):
        """缺少庫存旗標的門市以 false 序列化，不會省略欄位"""
        entries = filter_stores([RawStoreEntry(10, "A", None), RawStoreEntry(20, "B", True)], [10, 20])
        snapshot = StockSnapshot(products=[ProductStock("Widget", entries)], any_in_stock=True)
        self.assertEqual(
            serialize_snapshot(snapshot),
            '[{"productTitle":"Widget","storeData":['
            '{"id":10,"name":"A","itemInStock":false},'
            '{"id":20,"name":"B","itemInStock":true}]}]',
        )

    def test_empty_snapshot(self):
        self.assertEqual(
            compute_fingerprint(StockSnapshot()),
            "4f53cda18c2baa0c0354bb5f9a3ecbe5ed12ab4d8e11ba873c2f11161202b945",
        )

    def test_non_ascii_not_escaped(self):
        snapshot = StockSnapshot(products=[ProductStock("Café ☕")])
        self.assertIn("Café ☕", serialize_snapshot(snapshot))


if __name__ == "__main__":
    import pytest
    pytest.main([__file__, "-v"])
