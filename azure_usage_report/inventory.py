import logging
from typing import Iterator

# Azure SDK clients
from azure.mgmt.storage import StorageManagementClient
from azure.mgmt.sql import SqlManagementClient
from azure.mgmt.compute import ComputeManagementClient
from azure.mgmt.monitor import MonitorManagementClient
from azure.core.exceptions import HttpResponseError

from rich.console import Console
from rich.markup import escape

from .config import (
    STORAGE_USED_METRIC,
    STORAGE_USED_AGGREGATION,
    SQL_STORAGE_METRIC,
    SQL_STORAGE_AGGREGATION,
    SYSTEM_DATABASE_NAME,
)
from .metrics import get_latest_metric
from .models import ItemResult, Subscription
from .shaping import (
    shape_storage_account,
    shape_database,
    shape_virtual_machine,
    resource_group_from_id,
    power_state_from_instance_view,
)

_console = Console()


def _skip(kind: str, name: str, error: Exception, console: Console) -> ItemResult:
    """Logs a per-item failure and returns it as a skipped result."""
    logger = logging.getLogger()
    if isinstance(error, HttpResponseError):
        logger.warning(f"HTTP {error.status_code} while processing {kind} {name}: {error}", exc_info=True)
    else:
        logger.warning(f"Error processing {kind} {name}: {error}", exc_info=True)
    console.print(f"  [yellow]Skipped:[/yellow] {kind} {name}: {escape(str(error))}")
    return ItemResult.skip(name, str(error))


# --- Storage Accounts ---

def collect_storage_accounts(credential, subscription: Subscription, console: Console = _console) -> Iterator[ItemResult]:
    """Yields one result per storage account in the subscription."""
    logger = logging.getLogger()
    logger.info(f"Listing storage accounts in {subscription.display_name}...")
    console.print(f"\n:package: Storage accounts in [cyan]{subscription.display_name}[/]...")
    try:
        storage_client = StorageManagementClient(credential, subscription.subscription_id)
        monitor_client = MonitorManagementClient(credential, subscription.subscription_id)
        accounts = list(storage_client.storage_accounts.list())
    except Exception as e:
        yield _skip("subscription", subscription.display_name, e, console)
        return

    console.print(f"  - Found {len(accounts)} storage account(s).")
    for account in accounts:
        try:
            sample = get_latest_metric(monitor_client, account.id, STORAGE_USED_METRIC, STORAGE_USED_AGGREGATION)
            yield ItemResult.collected(account.name, shape_storage_account(subscription, account, sample))
        except Exception as e:
            yield _skip("storage account", account.name, e, console)


# --- SQL Databases ---

def collect_databases(credential, subscription: Subscription, console: Console = _console) -> Iterator[ItemResult]:
    """Yields one result per user database on every SQL server in the subscription.

    The system database is never reported. A server whose databases cannot be
    listed is skipped as a whole.
    """
    logger = logging.getLogger()
    logger.info(f"Listing SQL servers in {subscription.display_name}...")
    console.print(f"\n:floppy_disk: SQL databases in [cyan]{subscription.display_name}[/]...")
    try:
        sql_client = SqlManagementClient(credential, subscription.subscription_id)
        monitor_client = MonitorManagementClient(credential, subscription.subscription_id)
        servers = list(sql_client.servers.list())
    except Exception as e:
        yield _skip("subscription", subscription.display_name, e, console)
        return

    console.print(f"  - Found {len(servers)} SQL server(s).")
    for server in servers:
        try:
            rg_name = resource_group_from_id(server.id)
            databases = list(sql_client.databases.list_by_server(resource_group_name=rg_name, server_name=server.name))
        except Exception as e:
            yield _skip("SQL server", server.name, e, console)
            continue

        for db in databases:
            if db.name == SYSTEM_DATABASE_NAME:
                continue
            db_label = f"{server.name}/{db.name}"
            try:
                sample = get_latest_metric(monitor_client, db.id, SQL_STORAGE_METRIC, SQL_STORAGE_AGGREGATION)
                yield ItemResult.collected(db_label, shape_database(subscription, server.name, db, sample))
            except Exception as e:
                yield _skip("SQL database", db_label, e, console)


# --- Virtual Machines ---

def collect_virtual_machines(credential, subscription: Subscription, console: Console = _console) -> Iterator[ItemResult]:
    """Yields one result per non-deallocated VM in the subscription.

    Power state comes from a separate instance view call per VM.
    """
    logger = logging.getLogger()
    logger.info(f"Listing virtual machines in {subscription.display_name}...")
    console.print(f"\n:desktop_computer: Virtual machines in [cyan]{subscription.display_name}[/]...")
    try:
        compute_client = ComputeManagementClient(credential, subscription.subscription_id)
        vm_list = list(compute_client.virtual_machines.list_all())
    except Exception as e:
        yield _skip("subscription", subscription.display_name, e, console)
        return

    console.print(f"  - Found {len(vm_list)} VM(s).")
    for vm in vm_list:
        try:
            rg_name = resource_group_from_id(vm.id)
            instance_view = compute_client.virtual_machines.instance_view(
                resource_group_name=rg_name,
                vm_name=vm.name
            )
            record = shape_virtual_machine(subscription, vm, power_state_from_instance_view(instance_view))
        except Exception as e:
            yield _skip("VM", vm.name, e, console)
            continue

        if record is not None:
            yield ItemResult.collected(vm.name, record)
