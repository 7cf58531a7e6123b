import argparse
import logging
import sys

from rich.console import Console

from azure_usage_report import (
    clients,
    config,
    utils,
    export,
    report,
)

# Initialize Rich Console (passed to module functions)
console = Console()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Report Azure storage, SQL database and VM usage across all subscriptions into an Excel workbook.")
    parser.add_argument("--output-file", default=config.DEFAULT_OUTPUT_FILE, help="Path of the Excel workbook to write (replaced if it exists).")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    # --- Setup Logging ---
    log_level = logging.DEBUG if args.debug else logging.INFO
    logger = utils.setup_logger(level=log_level, filename=utils.log_filename_for(args.output_file), console=console)
    logger.info("--- Script Execution Started ---")
    logger.info(f"Arguments: {args}")

    # A stale workbook must not survive a run that fails before collection starts
    if export.reset_output_file(args.output_file):
        console.print(f"[dim]Removed previous report at {args.output_file}[/]")

    credential = None
    try:
        # --- Authentication ---
        credential = clients.get_azure_credentials(console=console)
        try:
            subscriptions = clients.list_subscriptions(credential, console=console)
        except clients.AuthenticationFailedError:
            console.print("[bold red]Failed to authenticate or list subscriptions. Exiting.[/]")
            return 1

        # --- Collect & Export ---
        report.generate_report(credential, subscriptions, args.output_file, console=console)
    finally:
        clients.close_credentials(credential)

    console.print("\n[bold green]Script finished.[/bold green]")
    logger.info("--- Script Execution Finished ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
