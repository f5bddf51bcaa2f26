from pathlib import Path
from rich.console import Console
from rich.prompt import Prompt, Confirm
from rich.panel import Panel
from meshsniff.config.settings import settings, save_settings
from meshsniff.utils.logger import logger
from meshsniff.i18n.strings import Strings

console = Console()

def run_wizard():
    console.print(Panel.fit(Strings.WELCOME_MSG.value))

    monitoring = Confirm.ask(Strings.PROMPT_MONITORING.value, default=settings.MONITORING_ENABLED)
    deep_scan = Confirm.ask(Strings.PROMPT_DEEP_SCAN.value, default=settings.DEEP_SCAN_ENABLED)
    notifications = Confirm.ask(Strings.PROMPT_NOTIFICATIONS.value, default=settings.NOTIFICATIONS_ENABLED)
    feed_dir = Path(Prompt.ask(Strings.PROMPT_FEED_DIR.value, default=str(settings.FEED_DIRECTORY)).strip())

    console.print(Strings.SETUP_COMPLETE.value)
    console.print(Strings.SUMMARY_TOGGLES.value.format(monitoring, deep_scan, notifications))
    console.print(Strings.SUMMARY_FEED.value.format(feed_dir))

    if Confirm.ask(Strings.PROMPT_SAVE_START.value):
        new_settings = {
            "MONITORING_ENABLED": monitoring,
            "DEEP_SCAN_ENABLED": deep_scan,
            "NOTIFICATIONS_ENABLED": notifications,
            "FEED_DIRECTORY": str(feed_dir),
        }

        settings.MONITORING_ENABLED = monitoring
        settings.DEEP_SCAN_ENABLED = deep_scan
        settings.NOTIFICATIONS_ENABLED = notifications
        settings.FEED_DIRECTORY = feed_dir

        save_settings(new_settings)

        logger.info(Strings.CONFIG_SAVED.value)
        return True
    return False

if __name__ == "__main__":
    run_wizard()
