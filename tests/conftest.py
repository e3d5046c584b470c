import pytest

from storefront.models import Product, Variant


@pytest.fixture
def sold_out_product():
    return Product(id="p1", name="Sold Out", price=100, cutted_price=150, stock=0)


@pytest.fixture
def variants():
    return [
        Variant(id="a", name="Alpha", stock=0, price=55),
        Variant(id="b", name="Beta", stock=5),
    ]


@pytest.fixture
def variant_product(variants):
    return Product(id="p2", name="With Variants", price=50, stock=10, variants=variants)
