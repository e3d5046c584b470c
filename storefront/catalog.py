"""
目录数据源模块。
负责把接口返回的商品记录 (dict) 解析为 Product / Variant 模型，
并提供从 JSON 文件加载和内置示例数据两种来源。
"""
import json
import logging
import math
import random
from typing import Any, Dict, List, Optional

from storefront.exceptions import CatalogError
from storefront.models import Product, Variant

logger = logging.getLogger(__name__)


def parse_product(record: Dict[str, Any]) -> Product:
    """
    解析单个商品记录。
    兼容接口中的几种写法: id/_id、name/title、images/image、ratings/rating.rate、
    numOfReviews/rating.count。
    """
    if not isinstance(record, dict):
        raise CatalogError(f"Product record must be an object, got {type(record).__name__}")

    product_id = record.get("id", record.get("_id"))
    if product_id is None or product_id == "":
        raise CatalogError("Product record is missing 'id'")

    price = _to_float(record.get("price"), "price", product_id)
    if price is None:
        raise CatalogError(f"Product {product_id} is missing 'price'")

    rating = record.get("rating") if isinstance(record.get("rating"), dict) else {}
    ratings = record.get("ratings")
    if ratings is None:
        ratings = rating.get("rate")
    reviews = record.get("numOfReviews")
    if reviews is None:
        reviews = rating.get("count")

    variants = [_parse_variant(v, product_id) for v in record.get("variants") or []]

    return Product(
        id=product_id,
        name=str(record.get("name") or record.get("title") or ""),
        price=price,
        stock=_to_int(record.get("stock"), "stock", product_id) or 0,
        cutted_price=_to_float(record.get("cuttedPrice"), "cuttedPrice", product_id),
        ratings=_to_float(ratings, "ratings", product_id),
        num_of_reviews=_to_int(reviews, "numOfReviews", product_id) or 0,
        images=_parse_images(record),
        category=str(record.get("category") or ""),
        variants=variants,
    )


def parse_catalog(payload: Any) -> List[Product]:
    """解析商品列表，也接受 {"products": [...]} 形式的接口响应。"""
    if isinstance(payload, dict):
        payload = payload.get("products", [])
    if not isinstance(payload, list):
        raise CatalogError("Catalog payload must be a list of products")
    return [parse_product(record) for record in payload]


def load_catalog(path: str) -> List[Product]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogError(f"Invalid catalog JSON in {path}: {e}") from e
    products = parse_catalog(payload)
    logger.info("Loaded %d products from %s", len(products), path)
    return products


# ==========================================
# 内置示例数据 (商品展示页)
# ==========================================

SAMPLE_PRODUCTS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "Premium Wireless Headphones - High Quality Audio with Noise Cancellation",
        "image": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=300&h=300&fit=crop",
        "price": 199.99,
        "cuttedPrice": 249.99,
        "stock": 15,
        "ratings": 4.5,
        "numOfReviews": 128,
        "category": "electronics",
    },
    {
        "id": 2,
        "name": "Vintage Leather Jacket",
        "image": "https://images.unsplash.com/photo-1551028719-00167b16eac5?w=300&h=300&fit=crop",
        "price": 159.99,
        "cuttedPrice": 199.99,
        "stock": 3,
        "ratings": 4.8,
        "numOfReviews": 89,
        "category": "men's clothing",
    },
    {
        "id": 3,
        "name": "Out of Stock Item - Sold Out Product",
        "image": "https://images.unsplash.com/photo-1441986300917-64674bd600d8?w=300&h=300&fit=crop",
        "price": 89.99,
        "stock": 0,
        "ratings": 4.2,
        "numOfReviews": 45,
        "category": "electronics",
    },
    {
        "id": 4,
        "name": "Elegant Summer Dress",
        "image": "https://images.unsplash.com/photo-1515372039744-b8f02a3ae446?w=300&h=300&fit=crop",
        "price": 79.99,
        "stock": 25,
        "ratings": 4.7,
        "numOfReviews": 67,
        "category": "women's clothing",
    },
    {
        "id": 5,
        "name": "No Reviews Product",
        "image": "https://images.unsplash.com/photo-1542291026-7eec264c27ff?w=300&h=300&fit=crop",
        "price": 129.99,
        "stock": 10,
        "ratings": 0,
        "numOfReviews": 0,
        "category": "footwear",
    },
    {
        "id": 6,
        "name": "Regular Price Item Without Discount",
        "image": "https://images.unsplash.com/photo-1523275335684-37898b6baf30?w=300&h=300&fit=crop",
        "price": 49.99,
        "stock": 50,
        "ratings": 3.8,
        "numOfReviews": 23,
        "category": "accessories",
    },
]

# 类目 -> [(规格ID, 规格名, 最大库存)]
CATEGORY_VARIANTS = {
    "clothing": [("xs", "Extra Small", 5), ("s", "Small", 8), ("m", "Medium", 10),
                 ("l", "Large", 7), ("xl", "Extra Large", 3)],
    "electronics": [("black", "Black", 15), ("white", "White", 10), ("silver", "Silver", 5)],
    "footwear": [("us-7", "US 7", 5), ("us-8", "US 8", 8), ("us-9", "US 9", 10),
                 ("us-10", "US 10", 7), ("us-11", "US 11", 3)],
}


def sample_variants(category: str, rng: random.Random) -> List[Dict[str, Any]]:
    """
    按类目生成示例规格，库存随机 (1 ~ 最大库存)。
    约 30% 的概率额外追加一个缺货的 "Special Edition"。
    """
    if "clothing" in category:
        choices = CATEGORY_VARIANTS["clothing"]
    else:
        choices = CATEGORY_VARIANTS.get(category, [])

    variants = [
        {"id": vid, "name": name, "stock": rng.randint(1, max_stock)}
        for vid, name, max_stock in choices
    ]
    if variants and rng.random() > 0.7:
        variants.append({"id": "out-of-stock", "name": "Special Edition", "stock": 0})
    return variants


def sample_catalog(seed: Optional[int] = None) -> List[Product]:
    rng = random.Random(seed)
    records = []
    for record in SAMPLE_PRODUCTS:
        record = dict(record)
        record["variants"] = sample_variants(record["category"], rng)
        records.append(record)
    return parse_catalog(records)


# ==========================================
# 内部辅助函数
# ==========================================

def _parse_variant(record: Any, product_id) -> Variant:
    if not isinstance(record, dict) or record.get("id") in (None, ""):
        raise CatalogError(f"Product {product_id} has a variant without 'id'")
    return Variant(
        id=str(record["id"]),
        name=str(record.get("name") or record["id"]),
        price=_to_float(record.get("price"), "variant price", product_id),
        stock=_to_int(record.get("stock"), "variant stock", product_id),
    )


def _parse_images(record: Dict[str, Any]) -> List[str]:
    """images 可能是字符串列表或 {"url": ...} 列表；缺失时退回单个 image 字段。"""
    images = []
    for image in record.get("images") or []:
        url = image.get("url") if isinstance(image, dict) else image
        if isinstance(url, str) and url.strip():
            images.append(url.strip())
    single = record.get("image")
    if not images and isinstance(single, str) and single.strip():
        images.append(single.strip())
    return images


def _to_float(val: Any, field_name: str, product_id) -> Optional[float]:
    if val is None or val == "":
        return None
    try:
        number = float(val)
    except (ValueError, TypeError, OverflowError):
        raise CatalogError(f"Product {product_id}: invalid {field_name} {val!r}")
    # nan / inf 无法参与价格与库存计算
    if not math.isfinite(number):
        raise CatalogError(f"Product {product_id}: invalid {field_name} {val!r}")
    return number


def _to_int(val: Any, field_name: str, product_id) -> Optional[int]:
    number = _to_float(val, field_name, product_id)
    if number is None:
        return None
    return int(number)
