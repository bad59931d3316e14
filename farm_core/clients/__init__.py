from .farm_api_client import FarmApiClient
from .rpc_client import FarmRpcClient

__all__ = ["FarmApiClient", "FarmRpcClient"]
