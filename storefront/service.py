"""
业务服务层，遵循单一职责原则拆分为独立服务。
"""
import logging
from io import BytesIO
from typing import Any, Dict, List, Optional, Tuple

from storefront.card import ProductCard
from storefront.cart import CartEntry, CartStore, Notifier, add_to_cart
from storefront.catalog import load_catalog, sample_catalog
from storefront.exceptions import ProductNotFoundError
from storefront.exporter import export_to_excel, generate_excel_bytes, quick_check
from storefront.importer import parse_excel_to_products
from storefront.models import Product, ProductId
from storefront.pricing.engine import batch_resolve
from storefront.selection import find_variant

logger = logging.getLogger(__name__)


class CatalogService:
    """
    目录服务：持有内存中的商品快照，按 ID 查询并生成卡片视图。
    """
    def __init__(self, products: Optional[List[Product]] = None):
        self._products: Dict[str, Product] = {}
        self.replace(products or [])

    @classmethod
    def from_source(cls, path: str = "", seed: Optional[int] = None) -> "CatalogService":
        """path 为空时使用内置示例数据。"""
        if path:
            return cls(load_catalog(path))
        return cls(sample_catalog(seed))

    def replace(self, products: List[Product]) -> None:
        self._products = {str(p.id): p for p in products}
        logger.info("Catalog now holds %d products", len(self._products))

    def list_products(self) -> List[Product]:
        return list(self._products.values())

    def get_product(self, product_id: ProductId) -> Product:
        try:
            return self._products[str(product_id)]
        except KeyError:
            raise ProductNotFoundError(product_id) from None

    def card(self, product_id: ProductId, variant_id: Optional[str] = None) -> ProductCard:
        """生成卡片视图；variant_id 不存在时保持默认选择。"""
        card = ProductCard(self.get_product(product_id))
        if variant_id is not None:
            card.select_variant(variant_id)
        return card


class CartService:
    """
    购物车服务：把目录、购物车存储和通知回调组装在一起。
    """
    def __init__(self, catalog: CatalogService, store: Optional[CartStore] = None, notify: Optional[Notifier] = None):
        self.catalog = catalog
        self.store = store if store is not None else CartStore()
        self.notify = notify

    def add(self, product_id: ProductId, variant_id: Optional[str] = None) -> CartEntry:
        """
        按 ID 加购。
        variant_id 为 None 时使用默认规格 (第一个)；指定了不存在的规格时抛出 VariantNotFoundError。
        """
        product = self.catalog.get_product(product_id)
        if variant_id is None:
            selection = product.variants[0] if product.variants else None
        else:
            selection = find_variant(product.variants, variant_id, product.id)
        return add_to_cart(product, selection, self.store, self.notify)

    def remove(self, key: str) -> Optional[CartEntry]:
        return self.store.remove(key)

    def summary(self) -> Dict[str, Any]:
        return {
            "items": self.store.items(),
            "count": self.store.count(),
            "total": self.store.total(),
        }


class ResolutionService:
    """
    解析服务：批量解析目录并生成核对报告。纯内存操作。
    """
    def resolve_catalog(self, products: List[Product]) -> List[Dict[str, Any]]:
        return batch_resolve(products)

    def get_quick_report(self, rows: List[Dict[str, Any]]) -> Dict[str, int]:
        return quick_check(rows)


class ImportService:
    """
    导入服务：专门负责将外部数据导入为内部模型。
    """
    def import_from_excel(self, file_content: bytes) -> List[Product]:
        """从 Excel 字节流导入商品数据"""
        return parse_excel_to_products(file_content)


class ExportService:
    """
    导出服务：专门负责将数据导出为文件或字节流。
    """
    def export_data(self, rows: List[Dict[str, Any]], output_path: str = "output.xlsx", base_name: str = "") -> str:
        """导出到本地文件"""
        return export_to_excel(rows, output_path, base_name)

    def get_excel_bytes(self, rows: List[Dict[str, Any]], base_name: str = "") -> Tuple[BytesIO, str]:
        """
        生成 Excel 文件字节流，用于 Web 下载。
        返回: (excel_bytes, suggested_filename)
        """
        return generate_excel_bytes(rows, base_name)
