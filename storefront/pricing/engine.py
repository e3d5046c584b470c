"""
批量解析引擎模块。
把整个目录展开为扁平的行数据 (每个商品/规格组合一行)，供导出和报表使用。
"""
import logging
from typing import Any, Dict, List, Optional

from storefront.models import Product, Variant
from storefront.pricing.resolver import resolve

logger = logging.getLogger(__name__)


def resolve_row(product: Product, variant: Optional[Variant] = None) -> Dict[str, Any]:
    res = resolve(product, variant)
    return {
        "product_id": product.id,
        "product_name": product.name,
        "category": product.category,
        "variant_id": variant.id if variant else None,
        "variant_name": variant.name if variant else None,
        "base_price": product.price,
        "cutted_price": product.cutted_price,
        "price": res.price,
        "stock": res.stock,
        "discount_percentage": res.discount_percentage,
        "out_of_stock": res.out_of_stock,
        "low_stock": res.low_stock,
    }


def batch_resolve(products: List[Product]) -> List[Dict[str, Any]]:
    """
    批量解析。
    有规格的商品每个规格一行，无规格的商品一行。
    单条记录出错时写入 error 字段，不中断整批处理。
    """
    rows = []

    for product in products:
        combos = product.variants or [None]
        for variant in combos:
            try:
                rows.append(resolve_row(product, variant))
            except Exception as e:
                logger.warning("Failed to resolve product %s variant %s: %s",
                               product.id, variant.id if variant else None, e)
                rows.append({
                    "product_id": product.id,
                    "product_name": product.name,
                    "variant_id": variant.id if variant else None,
                    "error": str(e),
                })

    return rows
