from io import BytesIO

from openpyxl import Workbook, load_workbook

from storefront.exporter import EXPORT_COLUMNS, export_to_excel, generate_excel_bytes, quick_check
from storefront.importer import parse_excel_to_products
from storefront.models import Product, Variant
from storefront.pricing.engine import batch_resolve


def _workbook_bytes(rows):
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def test_import_detects_header_and_groups_variants():
    content = _workbook_bytes([
        ["商品目录导出"],
        ["商品ID", "商品名称", "售价", "划线价", "库存", "类目", "规格ID", "规格名称", "规格价", "规格库存"],
        [1, "Tee", 20, 25, 10, "clothing", "s", "Small", None, 3],
        [1, "Tee", 20, 25, 10, "clothing", "m", "Medium", 22, 0],
        [2, "Mug", 8, None, 4, "kitchen", None, None, None, None],
    ])

    products = parse_excel_to_products(content)
    assert [p.id for p in products] == [1, 2]

    tee, mug = products
    assert tee.name == "Tee"
    assert tee.cutted_price == 25
    assert [(v.id, v.price, v.stock) for v in tee.variants] == [("s", None, 3), ("m", 22, 0)]
    assert mug.variants == []
    assert mug.cutted_price is None
    assert mug.stock == 4


def test_import_with_english_headers():
    content = _workbook_bytes([
        ["id", "name", "price", "stock"],
        ["sku-1", "Lamp", 30.5, 2],
    ])
    products = parse_excel_to_products(content)
    assert products[0].id == "sku-1"
    assert products[0].price == 30.5


def test_import_rejects_unrelated_sheet():
    content = _workbook_bytes([["foo", "bar"], [1, 2]])
    assert parse_excel_to_products(content) == []
    assert parse_excel_to_products(b"not an excel file") == []


def _catalog():
    return [
        Product(id=1, name="Tee", price=20, cutted_price=25, stock=10,
                variants=[Variant(id="s", name="Small", stock=3), Variant(id="m", name="Medium", price=22, stock=0)]),
        Product(id=2, name="Mug", price=8, stock=40),
    ]


def test_batch_resolve_flattens_variants():
    rows = batch_resolve(_catalog())
    assert [(r["product_id"], r["variant_id"]) for r in rows] == [(1, "s"), (1, "m"), (2, None)]
    assert rows[0]["low_stock"] == 3
    assert rows[1]["out_of_stock"] is True
    assert rows[1]["price"] == 22
    assert rows[2]["discount_percentage"] == 0

    report = quick_check(rows)
    assert report == {"总行数": 3, "缺货行数": 1, "库存紧张行数": 1, "有折扣行数": 2, "错误行数": 0}


def test_generate_excel_bytes():
    rows = batch_resolve(_catalog())
    output, file_name = generate_excel_bytes(rows)
    assert file_name.startswith("Tee_")
    assert file_name.endswith(".xlsx")

    ws = load_workbook(output).active
    assert [cell.value for cell in ws[1]] == [header for header, _ in EXPORT_COLUMNS]
    assert ws.max_row == 4
    assert ws["K3"].value == "是"
    assert ws["A3"].fill.fgColor.rgb.endswith("F8CBAD")
    assert ws.freeze_panes == "A2"


def test_export_to_excel_file(tmp_path):
    target = tmp_path / "catalog.xlsx"
    path = export_to_excel(batch_resolve(_catalog()), str(target))
    assert path == str(target)
    assert load_workbook(path).active["B2"].value == "Tee"


def test_export_uses_import_name(tmp_path):
    path = export_to_excel(batch_resolve(_catalog()), str(tmp_path) + "/", base_name="spring.xlsx")
    assert "spring_解析结果_" in path


def test_import_skips_rows_with_non_finite_numbers():
    content = _workbook_bytes([
        ["商品ID", "商品名称", "售价", "库存"],
        [1, "Infinite Price", "inf", 3],
        [2, "Infinite Stock", 8, "inf"],
        [3, "Mug", 8, 4],
    ])
    products = parse_excel_to_products(content)
    assert [p.id for p in products] == [3]


def test_batch_resolve_keeps_going_after_a_failing_row():
    broken = Product(id=1, name="Broken", price=10, cutted_price=float("nan"), stock=3)
    rows = batch_resolve([broken] + _catalog())

    assert rows[0]["product_id"] == 1
    assert "error" in rows[0]
    assert [(r["product_id"], r["variant_id"]) for r in rows[1:]] == [(1, "s"), (1, "m"), (2, None)]
    assert quick_check(rows)["错误行数"] == 1
