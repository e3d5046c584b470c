"""
商品卡片视图模型。
把卡片上的所有展示数据 (图片、标题、评分、价格、库存提示、规格下拉) 从渲染层剥离出来，
由 Streamlit 页面和 HTTP 接口共用。
"""
import math
from typing import Any, Dict, List, Optional

from storefront.cart import CartDispatcher, CartEntry, Notifier, add_to_cart
from storefront.config import MAX_RATING, PLACEHOLDER_IMAGE, TITLE_MAX_LENGTH
from storefront.models import Product, Variant
from storefront.pricing.resolver import Resolution, resolve
from storefront.selection import VariantSelector


def truncate_title(title: str, max_length: int = TITLE_MAX_LENGTH) -> str:
    if len(title) > max_length:
        return f"{title[:max_length]}..."
    return title


class ProductCard:
    """
    单个商品卡片的状态：规格选择 + 图片加载标记。
    不同卡片之间不共享任何可变状态。
    """

    def __init__(self, product: Product, variants: Optional[List[Variant]] = None):
        self.product = product
        self.selector = VariantSelector(product.variants if variants is None else variants)
        self.is_image_loading = True
        self._image_failed = False

    # --- 图片 ---

    @property
    def image_url(self) -> str:
        if self._image_failed:
            return PLACEHOLDER_IMAGE
        for url in self.product.images:
            if url:
                return url
        return PLACEHOLDER_IMAGE

    def on_image_load(self) -> None:
        self.is_image_loading = False

    def on_image_error(self) -> None:
        self._image_failed = True
        self.is_image_loading = False

    # --- 文案 ---

    @property
    def title(self) -> str:
        return truncate_title(self.product.name)

    @property
    def detail_path(self) -> str:
        return f"/product/{self.product.id}"

    @property
    def show_rating(self) -> bool:
        return bool(self.product.ratings and self.product.ratings > 0)

    def rating_stars(self) -> List[bool]:
        filled = math.floor(self.product.ratings or 0)
        return [i < filled for i in range(MAX_RATING)]

    @property
    def review_count(self) -> int:
        return self.product.num_of_reviews or 0

    # --- 规格与价格 ---

    @property
    def selected_variant(self) -> Optional[Variant]:
        return self.selector.selected

    def select_variant(self, variant_id: str) -> Optional[Variant]:
        return self.selector.select_variant(variant_id)

    def resolution(self) -> Resolution:
        return resolve(self.product, self.selector.selected)

    def add_to_cart(self, store: CartDispatcher, notify: Optional[Notifier] = None) -> CartEntry:
        return add_to_cart(self.product, self.selector.selected, store, notify)

    def to_dict(self) -> Dict[str, Any]:
        """卡片快照，供接口返回和页面渲染。"""
        res = self.resolution()
        selected = self.selector.selected
        return {
            "id": self.product.id,
            "title": self.title,
            "name": self.product.name,
            "image": self.image_url,
            "category": self.product.category,
            "detail_path": self.detail_path,
            "rating": {
                "show": self.show_rating,
                "stars": self.rating_stars(),
                "reviews": self.review_count,
            },
            "price": res.price,
            "cuttedPrice": self.product.cutted_price if res.show_reference_price else None,
            "discount_percentage": res.discount_percentage,
            "stock": res.stock,
            "out_of_stock": res.out_of_stock,
            "low_stock": res.low_stock,
            "selected_variant": selected.id if selected else None,
            "variants": [option._asdict() for option in self.selector.options()],
        }
