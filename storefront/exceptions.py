"""
异常定义模块。
"""
from typing import Optional


class StorefrontError(Exception):
    """所有业务异常的基类。"""


class CatalogError(StorefrontError):
    """目录记录格式错误 (缺少字段、数值无法解析等)。"""


class ProductNotFoundError(StorefrontError):
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class VariantNotFoundError(StorefrontError):
    def __init__(self, product_id, variant_id):
        self.product_id = product_id
        self.variant_id = variant_id
        super().__init__(f"Variant {variant_id!r} not found for product {product_id}")


class OutOfStockError(StorefrontError):
    """
    加购时所选商品/规格组合的有效库存为 0。
    """
    def __init__(self, product_id, variant_id: Optional[str] = None):
        self.product_id = product_id
        self.variant_id = variant_id
        target = f"{product_id}:{variant_id}" if variant_id else f"{product_id}"
        super().__init__(f"Out of stock: {target}")
