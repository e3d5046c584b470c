"""
导出与快速核对模块。
负责将解析后的目录数据导出为 Excel 文件（支持本地文件和内存流），并生成简要的数据核对报告。
"""
import os
import re
from datetime import datetime
from io import BytesIO
from typing import Dict, List, Tuple, Union, Any

import pandas as pd
from openpyxl import load_workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

SHEET_NAME = "商品目录"

# 导出列 (表头 -> 行字段)
EXPORT_COLUMNS = [
    ("商品ID", "product_id"),
    ("商品名称", "product_name"),
    ("类目", "category"),
    ("规格ID", "variant_id"),
    ("规格名称", "variant_name"),
    ("基础售价", "base_price"),
    ("划线价", "cutted_price"),
    ("有效售价", "price"),
    ("有效库存", "stock"),
    ("折扣(%)", "discount_percentage"),
    ("是否缺货", "out_of_stock"),
    ("库存紧张", "low_stock"),
    ("错误", "error"),
]

# 需要高亮的行背景色
OUT_OF_STOCK_FILL = PatternFill(start_color="F8CBAD", end_color="F8CBAD", fill_type="solid")


def generate_excel_bytes(items: List[Dict[str, Any]], base_name: str = "") -> Tuple[BytesIO, str]:
    """
    生成 Excel 文件的内存流和建议文件名。
    """
    file_name = _generate_filename(items, base_name)
    output = BytesIO()

    _write_excel_data(items, output)

    # 指针回到开头
    output.seek(0)

    return output, file_name


def export_to_excel(items: List[Dict[str, Any]], path: str = "output.xlsx", base_name: str = "") -> str:
    """
    将 items 导出为本地 Excel 文件。
    path 为默认值或目录时自动生成文件名。
    """
    if path == "output.xlsx" or path.endswith("/") or path.endswith("\\"):
        file_name = _generate_filename(items, base_name)
        if path.endswith("/") or path.endswith("\\"):
            path = os.path.join(path, file_name)
        else:
            path = file_name

    _write_excel_data(items, path)
    return path


def quick_check(items: List[Dict[str, Any]]) -> Dict[str, int]:
    """
    生成快速核对报告，统计关键指标。
    """
    return {
        "总行数": len(items),
        "缺货行数": sum(1 for item in items if item.get("out_of_stock")),
        "库存紧张行数": sum(1 for item in items if item.get("low_stock")),
        "有折扣行数": sum(1 for item in items if item.get("discount_percentage")),
        "错误行数": sum(1 for item in items if item.get("error")),
    }


# ==========================================
# 内部辅助函数
# ==========================================

def _generate_filename(items: List[Dict[str, Any]], base_name: str = "") -> str:
    """根据导入文件名或首个商品名称生成文件名。"""
    file_name = None

    # 1. 如果提供了基础文件名 (来自导入)，则优先使用
    if base_name:
        file_name = f"{os.path.splitext(base_name)[0]}_解析结果"

    # 2. 否则尝试使用商品名称
    elif items and items[0].get("product_name"):
        file_name = str(items[0]["product_name"]).strip()

    # 3. 默认文件名
    if not file_name:
        file_name = "商品目录"

    # 清理非法字符
    safe_filename = re.sub(r'[\\/:*?"<>|]', '_', file_name)
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')

    return f"{safe_filename}_{timestamp}.xlsx"


def _write_excel_data(items: List[Dict[str, Any]], target: Union[str, BytesIO]):
    """核心导出逻辑：写入数据并调用格式化。"""
    rows = []
    for item in items:
        row = {}
        for header, key in EXPORT_COLUMNS:
            value = item.get(key)
            if key == "out_of_stock":
                value = "是" if value else "否"
            row[header] = "" if value is None else value
        rows.append(row)

    df = pd.DataFrame(rows, columns=[header for header, _ in EXPORT_COLUMNS])
    df.to_excel(target, index=False, sheet_name=SHEET_NAME)

    if isinstance(target, BytesIO):
        target.seek(0)
    _format_excel(target, [bool(item.get("out_of_stock")) for item in items])


def _format_excel(target: Union[str, BytesIO], out_of_stock_rows: List[bool]):
    """对 Excel 文件进行美化格式化，缺货行整行标红。"""
    wb = load_workbook(target)
    ws = wb.active

    # 样式定义
    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF", size=11)
    border = Border(
        left=Side(style='thin'), right=Side(style='thin'),
        top=Side(style='thin'), bottom=Side(style='thin')
    )
    center_align = Alignment(horizontal="center", vertical="center", wrap_text=True)
    left_align = Alignment(horizontal="left", vertical="center", wrap_text=True)

    # 格式化表头
    for cell in ws[1]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = center_align
        cell.border = border

    # 格式化数据行
    for offset, row in enumerate(ws.iter_rows(min_row=2, max_row=ws.max_row)):
        sold_out = offset < len(out_of_stock_rows) and out_of_stock_rows[offset]
        for cell in row:
            cell.border = border
            cell.alignment = left_align
            if sold_out:
                cell.fill = OUT_OF_STOCK_FILL

    # 自动调整列宽
    for column in ws.columns:
        column_letter = column[0].column_letter
        max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
        ws.column_dimensions[column_letter].width = min(max_length + 2, 50)

    ws.freeze_panes = "A2"

    if isinstance(target, BytesIO):
        target.seek(0)
        target.truncate()
    wb.save(target)
