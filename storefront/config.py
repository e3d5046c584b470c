"""
全局配置模块。
集中定义展示与接口相关的常量，部分可通过环境变量覆盖。
"""
import logging
import os

# ==========================================
# 展示相关常量
# ==========================================

PLACEHOLDER_IMAGE = os.getenv("STOREFRONT_PLACEHOLDER_IMAGE", "/api/placeholder/300/300")
LOW_STOCK_THRESHOLD = int(os.getenv("STOREFRONT_LOW_STOCK_THRESHOLD", "5"))
TITLE_MAX_LENGTH = 60
MAX_RATING = 5
CART_SUCCESS_MESSAGE = "Added to cart"
OUT_OF_STOCK_LABEL = "Out of Stock"

# ==========================================
# 接口与运行配置
# ==========================================

API_PREFIX = "/api/v1"
API_HOST = os.getenv("STOREFRONT_HOST", "0.0.0.0")
API_PORT = int(os.getenv("STOREFRONT_PORT", "8000"))

# 目录 JSON 文件路径，为空时使用内置示例数据
CATALOG_PATH = os.getenv("STOREFRONT_CATALOG", "")
SAMPLE_SEED = int(os.getenv("STOREFRONT_SAMPLE_SEED", "42"))

LOG_LEVEL = os.getenv("STOREFRONT_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = LOG_LEVEL) -> None:
    """配置根日志处理器，入口脚本启动时调用一次。"""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
