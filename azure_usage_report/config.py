# --- Configuration Constants ---

# Output
DEFAULT_OUTPUT_FILE = "AzureUsageReport.xlsx"
STORAGE_SHEET_NAME = "StorageAccounts"
DATABASE_SHEET_NAME = "Databases"
VM_SHEET_NAME = "VMs"
BATCH_SIZE = 50 # Flush buffered rows to the workbook every N records

# Metrics
METRIC_LOOKBACK_HOURS = 24
METRIC_INTERVAL = "PT1H"
STORAGE_USED_METRIC = "UsedCapacity"
STORAGE_USED_AGGREGATION = "Average"
SQL_STORAGE_METRIC = "storage"
SQL_STORAGE_AGGREGATION = "Maximum" # Policy choice; not derived from the metric itself

# Conversions / filters
BYTES_PER_GB = 1024 ** 3
SYSTEM_DATABASE_NAME = "master"
DEALLOCATED_MARKER = "deallocated"

# Settings
LOG_FILENAME = "usage_report_log.txt"
