"""變更判斷"""

from enum import Enum


class Decision(Enum):
    NO_STOCK = "no_stock"
    UNCHANGED = "unchanged"
    NOTIFY = "notify"


def decide(any_in_stock: bool, fingerprint: str, previous_fingerprint: str) -> Decision:
    """
    決定是否需要通知

    沒有任何偏好門市有貨時一律返回 NO_STOCK，不論指紋是否改變。
    previous_fingerprint 為空字串（從未記錄）時必定與新指紋不同。
    """
    if not any_in_stock:
        return Decision.NO_STOCK
    if fingerprint == previous_fingerprint:
        return Decision.UNCHANGED
    return Decision.NOTIFY
