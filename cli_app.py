"""
简单的命令行入口：读取商品目录 (JSON / Excel)，批量解析价格与库存并导出 Excel。
用法示例：
    python cli_app.py --input catalog.json --out result.xlsx
    python cli_app.py --sample --seed 7
"""
import argparse
import os
import time

from storefront.catalog import load_catalog, sample_catalog
from storefront.config import setup_logging
from storefront.exceptions import CatalogError
from storefront.service import ExportService, ImportService, ResolutionService


def read_products(path: str):
    if path.endswith(".xlsx"):
        with open(path, "rb") as f:
            return ImportService().import_from_excel(f.read())
    return load_catalog(path)


def main(argv=None):
    parser = argparse.ArgumentParser(description="商品目录价格/库存解析")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", help="商品目录文件 (.json 或 .xlsx)")
    source.add_argument("--sample", action="store_true", help="使用内置示例目录")
    parser.add_argument("--seed", type=int, default=None, help="[示例目录] 随机库存种子")
    parser.add_argument("--out", default="output.xlsx", help="导出文件名")
    parser.add_argument("--log-level", default="WARNING", help="日志级别")

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    start = time.time()

    # 1. 读取目录
    try:
        products = sample_catalog(args.seed) if args.sample else read_products(args.input)
    except (OSError, CatalogError) as e:
        print(f"读取目录失败: {e}")
        return 1

    if not products:
        print("未找到有效的商品数据。")
        return 1
    print(f"共读取 {len(products)} 个商品")

    # 2. 解析
    resolution_service = ResolutionService()
    rows = resolution_service.resolve_catalog(products)

    # 3. 导出
    base_name = os.path.basename(args.input) if args.input else ""
    out_path = ExportService().export_data(rows, args.out, base_name)
    print(f"结果已导出至: {out_path}")

    # 4. 核对
    report = resolution_service.get_quick_report(rows)
    print("核对报告:", report)

    duration = time.time() - start
    print(f"总耗时: {duration:.2f} 秒")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
