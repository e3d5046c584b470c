"""
数据导入模块。
负责解析上传的 Excel 商品目录，将其转换为内部的 Product 和 Variant 模型。
支持智能列名识别和按商品分组：每行一个规格，规格ID为空的行只描述商品本身。
"""
import logging
from io import BytesIO
from typing import Any, Dict, List, Optional

import pandas as pd

from storefront.catalog import parse_product
from storefront.exceptions import CatalogError
from storefront.models import Product

logger = logging.getLogger(__name__)

# 列名映射字典 (目标字段 -> 可能的 Excel 列名列表)
COLUMN_MAPPING = {
    "id": ["商品ID", "商品编号", "id", "_id", "product_id"],
    "name": ["商品名称", "商品标题", "标题", "name", "title", "product_name"],
    "price": ["售价", "价格", "价格(元)", "price"],
    "cuttedPrice": ["划线价", "原价", "cuttedprice", "cutted_price", "reference_price"],
    "stock": ["库存", "库存(件数)", "stock", "quantity"],
    "category": ["类目", "分类", "category"],
    "image": ["图片", "图片链接", "image", "image_url"],
    "ratings": ["评分", "ratings", "rating"],
    "numOfReviews": ["评论数", "numofreviews", "reviews", "review_count"],
    "variant_id": ["规格ID", "variant_id", "sku_id"],
    "variant_name": ["规格名称", "规格", "variant_name", "variant"],
    "variant_price": ["规格价", "规格价格", "variant_price"],
    "variant_stock": ["规格库存", "variant_stock"],
}

PRODUCT_FIELDS = ["name", "price", "cuttedPrice", "stock", "category", "image", "ratings", "numOfReviews"]


def parse_excel_to_products(file_content: bytes) -> List[Product]:
    """
    解析 Excel 文件内容为 Product 对象列表。
    支持自动探测表头行（不一定在第一行）。
    单个商品记录解析失败时记录日志并跳过。
    """
    try:
        # 先读取为非 header 模式，以便探测
        df_raw = pd.read_excel(BytesIO(file_content), header=None)
    except Exception as e:
        logger.warning("Unable to read Excel catalog: %s", e)
        return []

    if df_raw.empty:
        return []

    # 1. 探测表头行
    header_row_index = _detect_header_row(df_raw)
    if header_row_index is None:
        header_row_index = 0

    df = df_raw.iloc[header_row_index + 1:].copy()
    df.columns = df_raw.iloc[header_row_index].astype(str).tolist()
    df.reset_index(drop=True, inplace=True)

    # 2. 建立列名映射
    col_map = _build_column_map(df.columns)

    # 必须包含商品名称和价格才认为是商品目录表
    if "name" not in col_map or "price" not in col_map:
        logger.warning("Excel catalog has no name/price columns: %s", list(df.columns))
        return []

    # 3. 按商品分组，合并规格
    records: Dict[Any, Dict[str, Any]] = {}
    for index, row in df.iterrows():
        name = _clean(row.get(col_map["name"]))
        product_id = _normalize_id(_clean(row.get(col_map.get("id"))))
        if product_id is None:
            product_id = name if name else f"TEMP_PROD_{index}"

        if product_id not in records:
            record: Dict[str, Any] = {"id": product_id, "variants": []}
            for key in PRODUCT_FIELDS:
                record[key] = _clean(row.get(col_map.get(key)))
            records[product_id] = record
        else:
            record = records[product_id]

        variant_id = _normalize_id(_clean(row.get(col_map.get("variant_id"))))
        if variant_id is not None:
            record["variants"].append({
                "id": str(variant_id),
                "name": _clean(row.get(col_map.get("variant_name"))),
                "price": _clean(row.get(col_map.get("variant_price"))),
                "stock": _clean(row.get(col_map.get("variant_stock"))),
            })

    products = []
    for record in records.values():
        try:
            products.append(parse_product(record))
        except CatalogError as e:
            logger.warning("Skipping product row: %s", e)
    return products


def _detect_header_row(df: pd.DataFrame, max_scan_rows: int = 20) -> Optional[int]:
    """
    探测哪一行是表头。
    返回行索引，如果没找到返回 None。
    """
    keywords = set()
    for keys in COLUMN_MAPPING.values():
        for k in keys:
            keywords.add(k.lower())

    best_row_idx = None
    max_matches = 0

    scan_limit = min(len(df), max_scan_rows)
    for i in range(scan_limit):
        row_values = [str(v).lower().strip() for v in df.iloc[i] if pd.notna(v)]
        matches = sum(1 for v in row_values if v in keywords)

        # "价格" / "price" 是强特征词，权重增加
        for v in row_values:
            if "价格" in v or "price" in v:
                matches += 1

        if matches > max_matches:
            max_matches = matches
            best_row_idx = i

    if max_matches >= 2:
        return best_row_idx

    return None


def _build_column_map(columns: List[str]) -> Dict[str, str]:
    """
    根据预定义的映射表，找到 DataFrame 中对应的实际列名。
    返回: { "internal_key": "Actual Column Name" }
    """
    result = {}
    cols_lower = {str(c).lower().strip(): c for c in columns}

    for key, candidates in COLUMN_MAPPING.items():
        for cand in candidates:
            cand_lower = cand.lower()
            if cand_lower in cols_lower:
                result[key] = cols_lower[cand_lower]
                break
    return result


def _clean(val: Any) -> Any:
    """空单元格 (NaN / 空字符串) 统一为 None。"""
    if val is None:
        return None
    if isinstance(val, str):
        val = val.strip()
        return val or None
    if pd.isna(val):
        return None
    # numpy 标量转为 Python 原生类型
    if hasattr(val, "item"):
        return val.item()
    return val


def _normalize_id(val: Any) -> Any:
    """Excel 中的数字 ID 会被读成 1.0，这里还原为整数。"""
    if isinstance(val, float) and val.is_integer():
        return int(val)
    return val
