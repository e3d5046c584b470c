import pytest

from storefront.exceptions import VariantNotFoundError
from storefront.selection import VariantSelector, find_variant


def test_defaults_to_first_variant(variants):
    assert VariantSelector(variants).selected.id == "a"


def test_empty_list_selects_nothing():
    assert VariantSelector([]).selected is None
    assert VariantSelector().selected is None


def test_select_known_variant(variants):
    selector = VariantSelector(variants)
    assert selector.select_variant("b").id == "b"
    assert selector.selected.id == "b"


def test_unknown_variant_leaves_selection_unchanged(variants):
    selector = VariantSelector(variants)
    selector.select_variant("b")
    selector.select_variant("nonexistent")
    assert selector.selected.id == "b"


def test_unknown_variant_on_empty_selector():
    selector = VariantSelector([])
    assert selector.select_variant("a") is None
    assert selector.selected is None


def test_selection_is_read_only(variants):
    selector = VariantSelector(variants)
    with pytest.raises(AttributeError):
        selector.selected = variants[1]


def test_options_mark_sold_out_variants(variants):
    options = VariantSelector(variants).options()
    assert [(o.id, o.label, o.disabled) for o in options] == [
        ("a", "Alpha (Out of Stock)", True),
        ("b", "Beta", False),
    ]


def test_find_variant_is_strict(variants):
    assert find_variant(variants, "b").name == "Beta"
    with pytest.raises(VariantNotFoundError):
        find_variant(variants, "zzz", "p2")
