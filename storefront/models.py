"""
数据模型定义模块。
定义了店铺前台使用的核心数据结构：Product 和 Variant。
两者都是来自目录数据源的只读快照，解析逻辑见 storefront.catalog。
"""
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Union

ProductId = Union[str, int]


@dataclass(frozen=True)
class Variant:
    """
    代表商品下的一个可选规格 (尺码、颜色等)。
    price / stock 为 None 表示不覆盖商品本身的值。
    """
    id: str
    name: str = ""
    price: Optional[float] = None  # 规格价，存在且为正数时覆盖商品价
    stock: Optional[int] = None    # 规格库存，存在时 (包括 0) 覆盖商品库存

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "name": self.name}
        if self.price is not None:
            data["price"] = self.price
        if self.stock is not None:
            data["stock"] = self.stock
        return data


@dataclass(frozen=True)
class Product:
    """
    代表目录中的一个商品。
    cutted_price 为划线价 (折前参考价)，对应接口字段 cuttedPrice。
    """
    id: ProductId
    name: str
    price: float
    stock: int = 0
    cutted_price: Optional[float] = None
    ratings: Optional[float] = None    # 0 - 5
    num_of_reviews: int = 0
    images: List[str] = field(default_factory=list)
    category: str = ""
    variants: List[Variant] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """
        还原为接口形态的商品记录 (驼峰字段)，不含 variants。
        购物车条目即在此基础上浅合并 variant 字段。
        """
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "cuttedPrice": self.cutted_price,
            "stock": self.stock,
            "ratings": self.ratings,
            "numOfReviews": self.num_of_reviews,
            "images": list(self.images),
            "category": self.category,
        }
