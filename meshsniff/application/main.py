import sys
import time
from pathlib import Path

from rich.console import Console
from rich.table import Table

from meshsniff.config.settings import settings
from meshsniff.utils.logger import logger
from meshsniff.i18n.strings import Strings
from meshsniff.core.listing import badge, display_name, filter_by_name, newest_first, origin_host
from meshsniff.application.startup import run_wizard
from meshsniff.application.controller import MeshSniffController

console = Console()


def _option(argv, flag):
    """Value following `flag` in argv, or None."""
    if flag in argv:
        index = argv.index(flag)
        if index + 1 < len(argv):
            return argv[index + 1]
    return None


def render_catalog(records, query=None):
    if query:
        records = filter_by_name(records, query)
    if not records:
        console.print(Strings.CATALOG_EMPTY.value)
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Origin")
    table.add_column("Size", justify="right")
    table.add_column("Type")
    table.add_column("Discovered")
    for record in newest_first(records):
        table.add_row(
            display_name(record.url),
            origin_host(record.origin),
            record.size_formatted,
            badge(record.format),
            record.discovered_at.strftime("%Y-%m-%d %H:%M:%S"),
        )
    console.print(table)
    console.print(Strings.CATALOG_TOTAL.value.format(len(records)))


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    try:
        if "--setup" in argv or (not argv and not settings.CONFIG_FILE.exists()):
            if sys.stdin.isatty() and not run_wizard():
                logger.info(Strings.SETUP_CANCELLED.value)
                return

        from meshsniff.utils.logger import setup_logger
        setup_logger(log_file=settings.LOG_FILE, debug=settings.DEBUG)

        controller = MeshSniffController()

        if "--list" in argv:
            controller.restore()
            render_catalog(controller.list_all(), _option(argv, "--filter"))
            return
        if "--clear" in argv:
            controller.restore()
            controller.clear_all()
            controller.stop()
            return
        if _option(argv, "--save"):
            controller.save(_option(argv, "--save"))
            return
        if _option(argv, "--replay"):
            found = controller.replay(Path(_option(argv, "--replay")))
            controller.stop()
            render_catalog(found)
            return

        logger.info(Strings.STARTING_APP.value.format(
            settings.APP_NAME, settings.DEEP_SCAN_ENABLED, settings.NOTIFICATIONS_ENABLED))
        controller.start()
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            logger.info(Strings.STOPPING_APP.value)
            controller.stop()

    except Exception as e:
        logger.critical(Strings.FATAL_ERROR.value.format(e), exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    main()
