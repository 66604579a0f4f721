"""
WP Limit Fixer command line.

Raises PHP upload/post/memory limits in php.ini, sets the WordPress memory
constants in wp-config.php, relaxes or disables mod_evasive, offers an NTP
sync and restarts Apache. Values not given as options are prompted for.

Note: Run this script with root privileges.
"""

import sys
import time
from typing import Optional

import click
from rich.markup import escape

from wp_limit_fixer import APP_NAME, VERSION
from wp_limit_fixer.fixer import EXIT_FAILURE, LimitFixer
from wp_limit_fixer.log import DEFAULT_LOG_FILE, setup_logger
from wp_limit_fixer.settings import CRITICAL_NOTE, DEFAULT_EVASIVE_CONF, collect_settings
from wp_limit_fixer.system import SubprocessSystemManager
from wp_limit_fixer.ui import (
    NordColors,
    console,
    create_header,
    print_error,
    print_section,
    print_warning,
)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--upload-max-filesize", help="PHP upload_max_filesize (e.g. 256M)")
@click.option("--post-max-size", help="PHP post_max_size (critical for uploads)")
@click.option("--memory-limit", help="PHP memory_limit, also used for WP_MEMORY_LIMIT")
@click.option("--max-execution-time", help="PHP max_execution_time in seconds")
@click.option("--max-input-time", help="PHP max_input_time in seconds")
@click.option("--php-ini", type=click.Path(dir_okay=False), help="Path to php.ini")
@click.option("--wp-config", type=click.Path(dir_okay=False), help="Path to wp-config.php")
@click.option(
    "--evasive-conf",
    type=click.Path(dir_okay=False),
    default=DEFAULT_EVASIVE_CONF,
    show_default=True,
    help="mod_evasive configuration file",
)
@click.option("--non-interactive", is_flag=True, help="Run without prompts, using defaults")
@click.option("--skip-restart", is_flag=True, help="Do not restart Apache afterwards")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=DEFAULT_LOG_FILE,
    show_default=True,
    help="Log file location",
)
@click.option("--debug", is_flag=True, help="Show debug logging on the console")
@click.version_option(VERSION, prog_name=APP_NAME)
def main(
    upload_max_filesize: Optional[str],
    post_max_size: Optional[str],
    memory_limit: Optional[str],
    max_execution_time: Optional[str],
    max_input_time: Optional[str],
    php_ini: Optional[str],
    wp_config: Optional[str],
    evasive_conf: str,
    non_interactive: bool,
    skip_restart: bool,
    log_file: str,
    debug: bool,
) -> None:
    """
    Increase the upload limit and PHP size for a WordPress installation.

    Also performs sanity checks and fixes common issues.
    """
    logger = setup_logger(log_file, debug=debug)
    interactive = not non_interactive

    try:
        console.print(create_header())
        console.print(
            f"Started at: [bold {NordColors.SNOW_STORM_1}]{time.strftime('%Y-%m-%d %H:%M:%S')}[/]"
        )
        console.print(
            "This script will help you increase the upload limit and PHP size for your "
            "WordPress installation.\nIt will also perform sanity checks and fix common issues."
        )
        console.print(CRITICAL_NOTE)

        print_section("Limits")
        overrides = {
            "upload_max_filesize": upload_max_filesize,
            "post_max_size": post_max_size,
            "memory_limit": memory_limit,
            "max_execution_time": max_execution_time,
            "max_input_time": max_input_time,
            "php_ini": php_ini,
            "wp_config": wp_config,
        }
        settings = collect_settings(overrides, interactive=interactive)
        logger.debug(f"Collected settings: {settings}")

        fixer = LimitFixer(
            settings,
            SubprocessSystemManager(),
            interactive=interactive,
            restart=not skip_restart,
            evasive_conf=evasive_conf,
        )
        exit_code = fixer.run()
    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user.")
        sys.exit(130)
    except Exception as e:
        print_error(f"Unexpected error: {escape(str(e))}")
        logger.exception("Unexpected error")
        sys.exit(EXIT_FAILURE)

    sys.exit(exit_code)


def run() -> None:
    """Console-script entry point."""
    main(prog_name="wp-limit-fixer")


if __name__ == "__main__":
    run()
