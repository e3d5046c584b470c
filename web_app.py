"""
Streamlit Web 应用程序入口 (商品展示页)。
负责 UI 渲染和用户交互，价格/库存/购物车逻辑全部交给 storefront 包。
"""
from typing import List

import pandas as pd
import streamlit as st

from storefront.card import ProductCard
from storefront.cart import CartStore, line_key
from storefront.catalog import sample_catalog
from storefront.exceptions import OutOfStockError
from storefront.service import ExportService, ImportService, ResolutionService

# ==========================================
# UI 辅助函数
# ==========================================


def init_session_state():
    """初始化 Session State 变量。"""
    if 'cart' not in st.session_state:
        st.session_state.cart = CartStore()
    if 'cards' not in st.session_state:
        st.session_state.cards = _build_cards(sample_catalog())
    if 'import_filename' not in st.session_state:
        st.session_state.import_filename = ""


def _build_cards(products) -> List[ProductCard]:
    # 每个商品一个独立的卡片状态
    return [ProductCard(p) for p in products]


def render_sidebar():
    """渲染侧边栏：购物车与目录来源。"""
    cart: CartStore = st.session_state.cart
    with st.sidebar:
        st.header(f"🛒 购物车 ({cart.count()})")
        if not len(cart):
            st.caption("购物车是空的。")
        for line in cart.items():
            key = line_key(line)
            variant = line.get("variant")
            label = f"{line['name']}" + (f" / {variant['name']}" if variant else "")
            col_name, col_btn = st.columns([4, 1])
            with col_name:
                st.write(f"{label} × {line['qty']}")
            with col_btn:
                if st.button("➖", key=f"remove_{key}"):
                    cart.remove(key)
                    st.rerun()
        st.markdown(f"**合计: ${cart.total():.2f}**")

        st.markdown("---")
        st.header("📂 商品目录")
        uploaded_file = st.file_uploader("上传商品目录 Excel", type=['xlsx'])
        if uploaded_file and st.button("导入", type="primary"):
            products = ImportService().import_from_excel(uploaded_file.getvalue())
            if products:
                st.session_state.cards = _build_cards(products)
                st.session_state.import_filename = uploaded_file.name
                st.success(f"成功导入 {len(products)} 个商品")
            else:
                st.warning("⚠️ 未识别到有效的商品数据。")
        if st.button("🔄 重新生成示例数据"):
            st.session_state.cards = _build_cards(sample_catalog())
            st.session_state.import_filename = ""
            st.rerun()


def render_card(card: ProductCard):
    """渲染单个商品卡片。"""
    res = card.resolution()
    product = card.product

    st.image(card.image_url, use_container_width=True)
    if res.discount_percentage > 0:
        st.markdown(f":red[**-{res.discount_percentage}%**]")
    st.markdown(f"**{card.title}**")

    if card.show_rating:
        stars = "".join("★" if filled else "☆" for filled in card.rating_stars())
        st.caption(f"{stars} ({card.review_count})")

    options = card.selector.options()
    if options:
        labels = {opt.id: opt.label for opt in options}
        current = card.selected_variant.id if card.selected_variant else options[0].id
        chosen = st.selectbox(
            "Variant:",
            [opt.id for opt in options],
            index=[opt.id for opt in options].index(current),
            format_func=lambda vid: labels[vid],
            key=f"variant_{product.id}",
        )
        card.select_variant(chosen)
        res = card.resolution()

    price_text = f"### ${res.price}"
    if res.show_reference_price:
        price_text += f" ~~${product.cutted_price}~~"
    st.markdown(price_text)

    if res.low_stock:
        st.warning(f"Only {res.low_stock} left in stock!")

    if res.out_of_stock:
        st.button("Out of Stock", disabled=True, key=f"add_{product.id}")
    elif st.button("Add to Cart", type="primary", key=f"add_{product.id}"):
        try:
            card.add_to_cart(st.session_state.cart, notify=st.toast)
        except OutOfStockError as e:
            st.error(str(e))
        st.rerun()


def render_showcase():
    st.title("Product Card Showcase")
    st.caption("Variant selection, stock management and cart in one place.")

    cards: List[ProductCard] = st.session_state.cards
    columns = st.columns(3)
    for index, card in enumerate(cards):
        with columns[index % 3]:
            with st.container(border=True):
                render_card(card)


def render_export_area():
    """渲染解析结果与导出区域。"""
    cards: List[ProductCard] = st.session_state.cards
    if not cards:
        return

    st.markdown("---")
    st.subheader("目录解析与导出")

    resolution_service = ResolutionService()
    rows = resolution_service.resolve_catalog([card.product for card in cards])
    report = resolution_service.get_quick_report(rows)

    excel_bytes, file_name = ExportService().get_excel_bytes(rows, base_name=st.session_state.import_filename)
    col_dl, col_info = st.columns([1, 3])
    with col_dl:
        st.download_button(
            label="📥 下载 Excel 报表",
            data=excel_bytes,
            file_name=file_name,
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            use_container_width=True
        )
    with col_info:
        st.caption(f"📊 统计: 总行数 {report['总行数']} | 缺货 {report['缺货行数']} | 库存紧张 {report['库存紧张行数']}")

    st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)


def main():
    st.set_page_config(page_title="Storefront", layout="wide")
    init_session_state()
    render_sidebar()
    render_showcase()
    render_export_area()


if __name__ == "__main__":
    main()
