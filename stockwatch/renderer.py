"""
通知內容產生模組
"""

from .models import StockSnapshot

IN_STOCK_LABEL = "In stock"
OUT_OF_STOCK_LABEL = "Out of stock"


def render_payload(snapshot: StockSnapshot, line_break: str = "<br>") -> str:
    """
    將快照轉為通知內文

    每個商品先列出標題，再逐行列出門市庫存狀態；商品之間插入分隔線，
    最後一個商品之後不加分隔線。

    Args:
        snapshot: StockSnapshot
        line_break: 換行字串，email 使用 "<br>"，Telegram 使用 "\\n"

    Returns:
        通知內文
    """
    separator = f"{line_break}---{line_break}{line_break}"
    sections = []
    for product in snapshot.products:
        lines = [f"{product.product_title}{line_break}"]
        for store in product.store_data:
            label = IN_STOCK_LABEL if store.in_stock else OUT_OF_STOCK_LABEL
            lines.append(f"- {store.name}: {label}{line_break}")
        sections.append("".join(lines))
    return separator.join(sections)
