"""
规格选择模块。
每个商品卡片实例持有一个独立的 VariantSelector。
"""
import logging
from typing import Iterable, List, NamedTuple, Optional, Tuple

from storefront.config import OUT_OF_STOCK_LABEL
from storefront.exceptions import VariantNotFoundError
from storefront.models import Variant

logger = logging.getLogger(__name__)


class VariantOption(NamedTuple):
    """下拉框中的一个选项。"""

    id: str
    label: str
    disabled: bool


def find_variant(variants: Iterable[Variant], variant_id: str, product_id=None) -> Variant:
    """
    严格查找：找不到时抛出 VariantNotFoundError。
    供接口层使用，选择器本身不抛异常。
    """
    for variant in variants:
        if variant.id == variant_id:
            return variant
    raise VariantNotFoundError(product_id, variant_id)


class VariantSelector:
    """
    规格选择状态：默认选中列表中的第一个规格，列表为空时不选中任何规格。
    """

    def __init__(self, variants: Optional[Iterable[Variant]] = None):
        self._variants: Tuple[Variant, ...] = tuple(variants or ())
        self._selected: Optional[Variant] = self._variants[0] if self._variants else None

    @property
    def variants(self) -> Tuple[Variant, ...]:
        return self._variants

    @property
    def selected(self) -> Optional[Variant]:
        return self._selected

    def select_variant(self, variant_id: str) -> Optional[Variant]:
        """
        按 ID 切换选中的规格。
        ID 不在列表中时保持当前选择不变，不抛异常。
        """
        for variant in self._variants:
            if variant.id == variant_id:
                self._selected = variant
                return variant

        logger.debug("Ignoring unknown variant id %r", variant_id)
        return self._selected

    def options(self) -> List[VariantOption]:
        """生成下拉选项，缺货规格带 (Out of Stock) 标记并禁用。"""
        options = []
        for variant in self._variants:
            sold_out = variant.stock == 0
            label = f"{variant.name} ({OUT_OF_STOCK_LABEL})" if sold_out else variant.name
            options.append(VariantOption(variant.id, label, sold_out))
        return options
