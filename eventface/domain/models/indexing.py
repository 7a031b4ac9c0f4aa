# Standard library imports
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class AssetState(str, Enum):
    """Lifecycle of one asset inside a batch."""
    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    RETRY_SCHEDULED = "retry_scheduled"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class IndexRequest:
    """An asset to index, with an optional precomputed external identifier."""
    asset_key: str
    external_id: Optional[str] = None


@dataclass(frozen=True)
class FailedAsset:
    asset_key: str
    error: str


@dataclass
class BatchResult:
    """
    Outcome of a batch. Every input asset appears exactly once, either in
    `successful` or in `failed`, in completion order.
    """
    successful: List[str] = field(default_factory=list)
    failed: List[FailedAsset] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.successful) + len(self.failed)

    def merge(self, other: "BatchResult") -> "BatchResult":
        return BatchResult(
            successful=self.successful + other.successful,
            failed=self.failed + other.failed,
        )
