from enum import Enum

class Strings(str, Enum):
    WELCOME_MSG = "[bold magenta]Welcome to MeshSniff![/bold magenta]\n\nLet's pick what to listen for."

    PROMPT_MONITORING = "Monitor intercepted responses"
    PROMPT_DEEP_SCAN = "Enable deep scan (sniff magic bytes of generic binary responses)"
    PROMPT_NOTIFICATIONS = "Show a desktop notification for each new 3D file"
    PROMPT_FEED_DIR = "Directory the interceptor drops response descriptors into"

    SETUP_COMPLETE = "\n[bold green]Setup Complete![/bold green]"
    SUMMARY_TOGGLES = "  Monitoring: {}  Deep scan: {}  Notifications: {}"
    SUMMARY_FEED = "  Feed: {}"

    PROMPT_SAVE_START = "Save and Start?"
    CONFIG_SAVED = "Configuration saved."
    SETUP_CANCELLED = "Setup cancelled. Exiting."

    # Main App
    STARTING_APP = "Starting {} (deep scan: {}, notifications: {})..."
    STOPPING_APP = "Stopping MeshSniff..."
    FATAL_ERROR = "Fatal error: {}"

    # Feed
    WATCHER_STARTED = "Watching feed directory: {}"
    WATCHER_STOPPED = "Feed watcher stopped."
    DESCRIPTOR_REJECTED = "Rejected malformed descriptor from {}: {}"

    # Catalog
    CATALOG_RESTORED = "Catalog restored: {} files."
    CATALOG_CLEARED = "Catalog cleared."
    CATALOG_EMPTY = "No 3D files detected yet."
    CATALOG_TOTAL = "Total intercepted: {} files"
    PERSIST_FAILED = "Failed to persist catalog snapshot: {}"

    # Pipeline
    FILE_DETECTED = "Detected {} file: {}"
    DEEP_SCAN_FAILED = "Deep scan failed for {}: {}"

    # Notifications
    NOTIF_TITLE = "3D File Detected!"
    NOTIF_MESSAGE = "Found a {} file."

    # Downloads
    SAVED_FILE = "Saved {} -> {}"
