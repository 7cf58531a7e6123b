"""Record types written to the usage report workbook."""

from dataclasses import dataclass, astuple
from datetime import datetime
from typing import ClassVar, Dict, Optional, Tuple, Union

from .config import STORAGE_SHEET_NAME, DATABASE_SHEET_NAME, VM_SHEET_NAME


@dataclass(frozen=True)
class Subscription:
    subscription_id: str
    display_name: str


@dataclass(frozen=True)
class MetricSample:
    """Most recent point of one metric time series for one statistic."""
    resource_id: str
    metric_name: str
    aggregation: str
    value: Optional[float]
    timestamp: Optional[datetime] = None


class _SheetRecord:
    """Mixin for records that map onto one worksheet row."""
    sheet_name: ClassVar[str]
    columns: ClassVar[Tuple[str, ...]]

    def as_row(self) -> Dict[str, object]:
        return dict(zip(self.columns, astuple(self)))


@dataclass(frozen=True)
class StorageAccountRecord(_SheetRecord):
    sheet_name: ClassVar[str] = STORAGE_SHEET_NAME
    columns: ClassVar[Tuple[str, ...]] = (
        "SubscriptionName", "StorageAccountName", "ResourceGroup", "Location", "UsedGB", "Kind"
    )

    subscription_name: str
    account_name: str
    resource_group: str
    location: str
    used_gb: float
    kind: Optional[str]


@dataclass(frozen=True)
class DatabaseRecord(_SheetRecord):
    sheet_name: ClassVar[str] = DATABASE_SHEET_NAME
    columns: ClassVar[Tuple[str, ...]] = (
        "SubscriptionName", "ServerName", "DatabaseName", "ResourceGroup", "Location", "UsedGB", "MaxGB"
    )

    subscription_name: str
    server_name: str
    database_name: str
    resource_group: str
    location: str
    used_gb: float
    max_gb: float


@dataclass(frozen=True)
class VmRecord(_SheetRecord):
    sheet_name: ClassVar[str] = VM_SHEET_NAME
    columns: ClassVar[Tuple[str, ...]] = (
        "SubscriptionName", "VMName", "Size", "PowerState", "Location", "TotalDiskGB"
    )

    subscription_name: str
    vm_name: str
    size: Optional[str]
    power_state: str
    location: str
    total_disk_gb: float


Record = Union[StorageAccountRecord, DatabaseRecord, VmRecord]


@dataclass(frozen=True)
class ItemResult:
    """Outcome of processing one resource: a record, or the reason it was skipped."""
    name: str
    record: Optional[Record] = None
    skip_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.record is None

    @classmethod
    def collected(cls, name: str, record: Record) -> "ItemResult":
        return cls(name=name, record=record)

    @classmethod
    def skip(cls, name: str, reason: str) -> "ItemResult":
        return cls(name=name, skip_reason=reason)
