"""Turns raw SDK objects and metric samples into flat report records."""

import logging
from typing import Optional

from .config import BYTES_PER_GB, DEALLOCATED_MARKER
from .models import (
    Subscription,
    MetricSample,
    StorageAccountRecord,
    DatabaseRecord,
    VmRecord,
)


def bytes_to_gb(value_bytes) -> float:
    """Converts a byte count to GB (2^30) rounded to 2 decimals. None counts as 0."""
    if not value_bytes:
        return 0.0
    return round(value_bytes / BYTES_PER_GB, 2)


def sdk_label(value) -> Optional[str]:
    """Plain text of an SDK enum member (e.g. Kind.STORAGE_V2 -> "StorageV2"); strings pass through."""
    if value is None:
        return None
    return getattr(value, "value", value)


def metric_value_or_zero(sample: Optional[MetricSample]) -> float:
    if sample is None or sample.value is None:
        return 0
    return sample.value


def resource_group_from_id(resource_id: str) -> str:
    """Extracts the resource group segment from an ARM resource ID."""
    try:
        return resource_id.split('/')[4]
    except (AttributeError, IndexError):
        raise ValueError(f"Could not parse resource group from ID '{resource_id}'")


def power_state_from_instance_view(instance_view) -> Optional[str]:
    """Returns the display status of the PowerState/* entry, e.g. 'VM running'."""
    if not instance_view or not instance_view.statuses:
        return None
    for status in instance_view.statuses:
        if status.code and status.code.startswith("PowerState/"):
            return status.display_status or status.code.split('/')[-1]
    return None


def is_deallocated(power_state: Optional[str]) -> bool:
    return bool(power_state) and DEALLOCATED_MARKER in power_state.lower()


def shape_storage_account(subscription: Subscription, account, sample: Optional[MetricSample]) -> StorageAccountRecord:
    return StorageAccountRecord(
        subscription_name=subscription.display_name,
        account_name=account.name,
        resource_group=resource_group_from_id(account.id),
        location=account.location,
        used_gb=bytes_to_gb(metric_value_or_zero(sample)),
        kind=sdk_label(account.kind),
    )


def shape_database(subscription: Subscription, server_name: str, database, sample: Optional[MetricSample]) -> DatabaseRecord:
    # Used and max are rounded independently
    return DatabaseRecord(
        subscription_name=subscription.display_name,
        server_name=server_name,
        database_name=database.name,
        resource_group=resource_group_from_id(database.id),
        location=database.location,
        used_gb=bytes_to_gb(metric_value_or_zero(sample)),
        max_gb=bytes_to_gb(database.max_size_bytes),
    )


def _total_disk_gb(vm) -> int:
    storage_profile = vm.storage_profile
    if not storage_profile:
        return 0
    total = 0
    if storage_profile.os_disk and storage_profile.os_disk.disk_size_gb:
        total += storage_profile.os_disk.disk_size_gb
    for data_disk in storage_profile.data_disks or []:
        total += data_disk.disk_size_gb or 0
    return total


def shape_virtual_machine(subscription: Subscription, vm, power_state: Optional[str]) -> Optional[VmRecord]:
    """Builds a VM row, or returns None for deallocated VMs."""
    if is_deallocated(power_state):
        logging.getLogger().debug(f"VM {vm.name} is deallocated ({power_state}); excluded from report.")
        return None
    return VmRecord(
        subscription_name=subscription.display_name,
        vm_name=vm.name,
        size=sdk_label(vm.hardware_profile.vm_size) if vm.hardware_profile else None,
        power_state=power_state or "Unknown",
        location=vm.location,
        total_disk_gb=_total_disk_gb(vm),
    )
