"""Stock item kind enum."""
import enum


class StockItemKind(enum.Enum):
    """Which balance table and movement vocabulary a stock item uses."""
    RAW_MATERIAL = "raw_material"
    FINISHED_PRODUCT = "finished_product"
