import json

import pytest

from storefront.catalog import load_catalog, parse_catalog, parse_product, sample_catalog
from storefront.exceptions import CatalogError


def test_parse_product_with_aliases():
    product = parse_product({
        "_id": "abc",
        "title": "Fjallraven Backpack",
        "price": "109.95",
        "cuttedPrice": 129.95,
        "stock": 4,
        "rating": {"rate": 3.9, "count": 120},
        "images": [{"url": "https://img/a.jpg"}, {"url": ""}, "https://img/b.jpg"],
        "category": "bags",
        "variants": [{"id": "blue", "name": "Blue", "stock": 0}, {"id": 2, "price": 99}],
    })
    assert product.id == "abc"
    assert product.name == "Fjallraven Backpack"
    assert product.price == 109.95
    assert product.ratings == 3.9
    assert product.num_of_reviews == 120
    assert product.images == ["https://img/a.jpg", "https://img/b.jpg"]
    assert [v.id for v in product.variants] == ["blue", "2"]
    assert product.variants[0].stock == 0
    assert product.variants[1].name == "2"
    assert product.variants[1].stock is None


def test_single_image_field_is_used_when_images_missing():
    product = parse_product({"id": 1, "name": "P", "price": 1, "image": "https://img/x.jpg"})
    assert product.images == ["https://img/x.jpg"]


def test_defaults_for_optional_fields():
    product = parse_product({"id": 1, "name": "P", "price": 1})
    assert product.stock == 0
    assert product.cutted_price is None
    assert product.num_of_reviews == 0
    assert product.variants == []


@pytest.mark.parametrize("record", [
    {"name": "no id", "price": 1},
    {"id": 1, "name": "no price"},
    {"id": 1, "name": "bad price", "price": "abc"},
    {"id": 1, "name": "bad variant", "price": 1, "variants": [{"name": "no id"}]},
    "not a dict",
    {"id": 1, "name": "inf stock", "price": 1, "stock": "inf"},
    {"id": 1, "name": "nan price", "price": "nan"},
    {"id": 1, "name": "inf price", "price": float("inf")},
    {"id": 1, "name": "nan reference", "price": 10, "cuttedPrice": "nan"},
    {"id": 1, "name": "huge reviews", "price": 1, "numOfReviews": 10 ** 400},
    {"id": 1, "name": "inf variant stock", "price": 1, "variants": [{"id": "a", "stock": "-inf"}]},
])
def test_malformed_records_raise(record):
    with pytest.raises(CatalogError):
        parse_product(record)


def test_parse_catalog_accepts_wrapped_payload():
    products = parse_catalog({"products": [{"id": 1, "name": "P", "price": 1}]})
    assert len(products) == 1
    with pytest.raises(CatalogError):
        parse_catalog("nope")


def test_load_catalog(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([{"id": 1, "name": "P", "price": 2.5, "stock": 3}]), encoding="utf-8")
    products = load_catalog(str(path))
    assert products[0].price == 2.5

    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(str(bad))


def test_sample_catalog_is_seeded():
    first, second = sample_catalog(3), sample_catalog(3)
    assert [[(v.id, v.stock) for v in p.variants] for p in first] == \
        [[(v.id, v.stock) for v in p.variants] for p in second]


def test_sample_catalog_variants_follow_category():
    products = {p.id: p for p in sample_catalog(0)}
    assert len(products) == 6

    jacket_sizes = [v.id for v in products[2].variants]
    assert jacket_sizes[:5] == ["xs", "s", "m", "l", "xl"]
    assert [v.id for v in products[1].variants][:3] == ["black", "white", "silver"]
    assert products[6].variants == []

    for product in products.values():
        for variant in product.variants:
            if variant.id == "out-of-stock":
                assert variant.stock == 0
            else:
                assert variant.stock >= 1
