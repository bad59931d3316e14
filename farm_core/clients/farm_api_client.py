from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests
from solders.pubkey import Pubkey

from ..config import FarmConfig
from ..errors import FarmApiError, FarmNotFoundError
from ..models import FarmMeta


def _apy(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


class FarmApiClient:
    """Client for the off-chain farm directory (farm list with APY/expiry)."""

    def __init__(self, cfg: FarmConfig, session: Optional[requests.Session] = None) -> None:
        self.cfg = cfg
        self.session = session or requests.Session()
        self.timeout = cfg.api_timeout

    def close(self) -> None:
        self.session.close()

    def get_farm_info(self) -> List[Dict[str, Any]]:
        url = f"{self.cfg.api_url}/farm/list"
        resp = self.session.get(url, timeout=self.timeout)
        if resp.status_code >= 400:
            raise FarmApiError(resp.status_code, "Farm list failed", resp.text)
        data = resp.json()
        if not isinstance(data, list):
            raise FarmApiError(resp.status_code, "Unexpected farm list payload", resp.text)
        return data

    def _lookup(self, key: str, address: Pubkey) -> List[FarmMeta]:
        wanted = str(address)
        farms = [row for row in self.get_farm_info() if row.get(key) == wanted]
        if not farms:
            raise FarmNotFoundError(f"No farm found by {key}", wanted)
        return [
            FarmMeta(
                farm_address=Pubkey.from_string(row["farming_pool"]),
                apy=_apy(row.get("farming_apy")),
                expired=bool(row.get("farm_expire")),
            )
            for row in farms
        ]

    def lookup_farms_by_pool(self, pool_address: Pubkey) -> List[FarmMeta]:
        return self._lookup("pool_address", pool_address)

    def lookup_farms_by_asset(self, lp_mint: Pubkey) -> List[FarmMeta]:
        return self._lookup("lp_mint", lp_mint)
