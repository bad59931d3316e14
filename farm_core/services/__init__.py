from .farm_service import FarmService
from .tx_builder import FarmTxBuilder, assemble_transaction

__all__ = ["FarmService", "FarmTxBuilder", "assemble_transaction"]
