import logging
from typing import List

from azure.identity import DefaultAzureCredential
from azure.mgmt.resource import SubscriptionClient
from rich.console import Console

from .models import Subscription

_console = Console()


class AuthenticationFailedError(Exception):
    """Raised when no authenticated session or subscription list can be obtained."""


def get_azure_credentials(console: Console = _console):
    """Creates the credential shared by every client in the run."""
    with console.status("[cyan]Authenticating with Azure...[/]"):
        return DefaultAzureCredential()


def list_subscriptions(credential, console: Console = _console) -> List[Subscription]:
    """Lists the subscriptions visible to the credential.

    Any failure here is fatal for the run and is raised as
    AuthenticationFailedError.
    """
    logger = logging.getLogger()
    try:
        subscription_client = SubscriptionClient(credential)
        with console.status("[cyan]Listing accessible subscriptions...[/]"):
            subs = [
                Subscription(subscription_id=sub.subscription_id, display_name=sub.display_name)
                for sub in subscription_client.subscriptions.list()
            ]
    except Exception as e:
        logger.error(f"Authentication or subscription listing failed: {e}", exc_info=True)
        console.print(f"[bold red]Authentication or subscription listing failed:[/] {e}")
        raise AuthenticationFailedError(str(e)) from e

    if not subs:
        logger.error("No Azure subscriptions found for the current credential.")
        raise AuthenticationFailedError("No Azure subscriptions found for the current credential.")

    console.print(f":white_check_mark: [bold green]Authenticated successfully.[/] {len(subs)} subscription(s) to report.")
    logger.info(f"Authenticated successfully. Subscriptions: {[s.display_name for s in subs]}")
    return subs


def close_credentials(credential):
    """Tears down the credential session. Safe to call with None."""
    if credential is None:
        return
    try:
        credential.close()
    except Exception as e:
        logging.getLogger().warning(f"Error closing Azure credential: {e}")
