"""
价格与库存解析模块。
根据商品记录和 (可选的) 已选规格，计算有效售价、有效库存、折扣百分比以及是否缺货。
所有函数均为纯函数，不依赖任何渲染环境。
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import NamedTuple, Optional

from storefront.config import LOW_STOCK_THRESHOLD
from storefront.models import Product, Variant


class Resolution(NamedTuple):
    """单个商品/规格组合的解析结果。"""

    price: float
    stock: int
    discount_percentage: int
    out_of_stock: bool
    show_reference_price: bool
    low_stock: Optional[int]


def resolve_price(product: Product, variant: Optional[Variant] = None) -> float:
    """
    有效售价：规格价存在且为正数时使用规格价，否则使用商品价。
    """
    if variant is not None and variant.price is not None and variant.price > 0:
        return variant.price
    return product.price


def resolve_stock(product: Product, variant: Optional[Variant] = None) -> int:
    """
    有效库存：规格库存存在 (包括 0) 时使用规格库存，否则使用商品库存。
    负数按 0 处理。
    """
    if variant is not None and variant.stock is not None:
        stock = variant.stock
    else:
        stock = product.stock
    return max(0, int(stock))


def is_out_of_stock(product: Product, variant: Optional[Variant] = None) -> bool:
    return resolve_stock(product, variant) == 0


def discount_percentage(product: Product) -> int:
    """
    折扣百分比，始终基于商品基础价计算 (与所选规格无关)。

    公式: round(100 * (划线价 - 售价) / 划线价)，四舍五入 (ROUND_HALF_UP)。
    划线价缺失或不高于售价时返回 0；否则结果落在 [1, 99]。

    示例:
    - price=100, cuttedPrice=150 -> 33
    - price=199.99, cuttedPrice=249.99 -> 20
    - price=50, cuttedPrice=None -> 0
    """
    cutted = product.cutted_price
    if cutted is None or cutted <= product.price:
        return 0

    cutted_dec = Decimal(str(cutted))
    ratio = (cutted_dec - Decimal(str(product.price))) / cutted_dec * 100
    percentage = int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    # 极小差价会舍入为 0，免费商品会舍入为 100
    return min(max(percentage, 1), 99)


def show_reference_price(product: Product, variant: Optional[Variant] = None) -> bool:
    """划线价高于有效售价时才展示。"""
    return product.cutted_price is not None and product.cutted_price > resolve_price(product, variant)


def low_stock_count(product: Product, variant: Optional[Variant] = None) -> Optional[int]:
    """
    库存紧张提示 ("Only N left in stock!")：0 < 有效库存 <= 阈值 时返回库存数，否则 None。
    """
    stock = resolve_stock(product, variant)
    if 0 < stock <= LOW_STOCK_THRESHOLD:
        return stock
    return None


def resolve(product: Product, variant: Optional[Variant] = None) -> Resolution:
    return Resolution(
        price=resolve_price(product, variant),
        stock=resolve_stock(product, variant),
        discount_percentage=discount_percentage(product),
        out_of_stock=is_out_of_stock(product, variant),
        show_reference_price=show_reference_price(product, variant),
        low_stock=low_stock_count(product, variant),
    )
