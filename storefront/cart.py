"""
购物车模块。
- add_to_cart: 将商品与已选规格打包成购物车条目，派发给注入的购物车存储并发出成功通知。
- CartStore: 内存购物车存储，行为与前端购物车 reducer 一致 (同款累加数量、减到 1 时移除)。
"""
import copy
import logging
import threading
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Any, Callable, Dict, List, Optional, Protocol

from storefront.config import CART_SUCCESS_MESSAGE
from storefront.exceptions import OutOfStockError
from storefront.models import Product, Variant
from storefront.pricing.resolver import is_out_of_stock

logger = logging.getLogger(__name__)

CartEntry = Dict[str, Any]
Notifier = Callable[[str], None]


class CartDispatcher(Protocol):
    def dispatch(self, entry: CartEntry) -> None:
        ...


def build_cart_entry(product: Product, selection: Optional[Variant]) -> CartEntry:
    """购物车条目 = 商品记录浅合并 variant 字段 (未选中规格时为 None)。"""
    entry = product.to_dict()
    entry["variant"] = selection.to_dict() if selection is not None else None
    return entry


def add_to_cart(
    product: Product,
    selection: Optional[Variant],
    store: CartDispatcher,
    notify: Optional[Notifier] = None,
) -> CartEntry:
    """
    加入购物车。

    参数:
    - product: 商品记录
    - selection: 当前选中的规格 (可为 None)
    - store: 购物车存储，需提供 dispatch(entry)
    - notify: 成功通知回调，接收提示文案

    有效库存为 0 时抛出 OutOfStockError，不会派发也不会通知。
    """
    if is_out_of_stock(product, selection):
        raise OutOfStockError(product.id, selection.id if selection else None)

    entry = build_cart_entry(product, selection)
    store.dispatch(entry)
    logger.info("Added product %s (variant=%s) to cart", product.id, selection.id if selection else None)

    if notify is not None:
        notify(CART_SUCCESS_MESSAGE)
    return entry


def line_key(entry: CartEntry) -> str:
    """购物车行标识："<商品ID>" 或 "<商品ID>:<规格ID>"。"""
    variant = entry.get("variant")
    if variant:
        return f"{entry['id']}:{variant['id']}"
    return str(entry["id"])


def unit_price(entry: CartEntry) -> float:
    variant = entry.get("variant") or {}
    price = variant.get("price")
    if price is not None and price > 0:
        return price
    return entry["price"]


class CartStore:
    """
    内存购物车存储。
    每一行是购物车条目的深拷贝，额外带 qty 数量字段；对外返回的也都是拷贝。
    接口层会在线程池中并发调用，读写都在锁内完成。
    """

    def __init__(self):
        self._lines: List[CartEntry] = []
        self._lock = threading.Lock()

    def dispatch(self, entry: CartEntry) -> None:
        self.add(entry)

    def add(self, entry: CartEntry) -> CartEntry:
        key = line_key(entry)
        with self._lock:
            for line in self._lines:
                if line_key(line) == key:
                    line["qty"] += 1
                    return copy.deepcopy(line)

            line = copy.deepcopy(entry)
            line["qty"] = 1
            self._lines.append(line)
            return copy.deepcopy(line)

    def remove(self, key: str) -> Optional[CartEntry]:
        """
        数量减一，数量为 1 时整行移除。
        返回剩余的行 (已移除则为 None)；key 不存在时抛出 KeyError。
        """
        with self._lock:
            for index, line in enumerate(self._lines):
                if line_key(line) != key:
                    continue
                if line["qty"] <= 1:
                    del self._lines[index]
                    return None
                line["qty"] -= 1
                return copy.deepcopy(line)
        raise KeyError(key)

    def items(self) -> List[CartEntry]:
        with self._lock:
            return copy.deepcopy(self._lines)

    def count(self) -> int:
        with self._lock:
            return sum(line["qty"] for line in self._lines)

    def total(self) -> float:
        """购物车总价，保留两位小数 (银行家舍入)。"""
        with self._lock:
            amount = sum(
                (Decimal(str(unit_price(line))) * line["qty"] for line in self._lines),
                Decimal("0"),
            )
        return float(amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_EVEN))

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)
