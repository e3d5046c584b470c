from storefront.card import ProductCard, truncate_title
from storefront.cart import CartStore
from storefront.config import PLACEHOLDER_IMAGE
from storefront.models import Product


def test_card_walkthrough(variant_product):
    card = ProductCard(variant_product)
    res = card.resolution()
    assert card.selected_variant.id == "a"
    assert res.out_of_stock is True
    assert res.price == 55

    card.select_variant("b")
    res = card.resolution()
    assert res.out_of_stock is False
    assert res.price == 50
    assert res.stock == 5

    card.select_variant("nonexistent")
    assert card.selected_variant.id == "b"


def test_cards_do_not_share_selection(variant_product):
    first, second = ProductCard(variant_product), ProductCard(variant_product)
    first.select_variant("b")
    assert second.selected_variant.id == "a"


def test_explicit_variant_list_overrides_product_variants(variant_product):
    assert ProductCard(variant_product, variants=[]).selected_variant is None


def test_image_falls_back_to_placeholder():
    card = ProductCard(Product(id=1, name="P", price=1, images=[]))
    assert card.image_url == PLACEHOLDER_IMAGE


def test_image_events_toggle_loading_flag():
    card = ProductCard(Product(id=1, name="P", price=1, images=["https://img/1.jpg"]))
    assert card.is_image_loading is True
    assert card.image_url == "https://img/1.jpg"

    card.on_image_load()
    assert card.is_image_loading is False

    card.on_image_error()
    assert card.image_url == PLACEHOLDER_IMAGE
    assert card.is_image_loading is False


def test_title_truncation():
    long_name = "x" * 61
    assert truncate_title(long_name) == "x" * 60 + "..."
    assert truncate_title("x" * 60) == "x" * 60


def test_rating_block():
    card = ProductCard(Product(id=9, name="P", price=1, ratings=4.5, num_of_reviews=128))
    assert card.show_rating is True
    assert card.rating_stars() == [True, True, True, True, False]
    assert card.review_count == 128
    assert card.detail_path == "/product/9"

    unrated = ProductCard(Product(id=10, name="P", price=1, ratings=0))
    assert unrated.show_rating is False
    assert unrated.rating_stars() == [False] * 5


def test_card_add_to_cart_uses_current_selection(variant_product):
    card = ProductCard(variant_product)
    card.select_variant("b")
    store = CartStore()
    entry = card.add_to_cart(store)
    assert entry["variant"]["id"] == "b"
    assert store.count() == 1


def test_to_dict_snapshot(variant_product):
    data = ProductCard(variant_product).to_dict()
    assert data["selected_variant"] == "a"
    assert data["out_of_stock"] is True
    assert data["price"] == 55
    assert data["cuttedPrice"] is None
    assert data["low_stock"] is None
    assert data["variants"][0] == {"id": "a", "label": "Alpha (Out of Stock)", "disabled": True}
