"""Farm Core.

Client-side accounting and transaction assembly for the dual-reward
farming program: reward accrual from stale on-chain snapshots, chunked
account reads and batched deposit/withdraw/claim transactions.

Run the read-only console with ``python -m farm_core``.
"""

__all__ = ["config", "constants", "errors", "models"]
