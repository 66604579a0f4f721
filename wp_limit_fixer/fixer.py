"""
Sequential run orchestration.

LimitFixer walks the operator through one run: confirm the collected
settings, patch php.ini, patch wp-config.php, deal with mod_evasive, offer a
clock sync and restart Apache. Host interaction goes through the injected
SystemManager.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.markup import escape

from wp_limit_fixer.directives import EditAction
from wp_limit_fixer.errors import BackupError, MissingFileError, ServiceError
from wp_limit_fixer.settings import (
    APACHE_SERVICE,
    CRITICAL_NOTE,
    DEFAULT_EVASIVE_CONF,
    EVASIVE_MODULE,
    EVASIVE_MODULE_SHORT,
    NTP_PACKAGE,
    NTP_SERVICE,
    WP_CACHE,
    LimitSettings,
    settings_table,
)
from wp_limit_fixer.system import SystemManager
from wp_limit_fixer.tuning import patch_php_ini, patch_wp_config, tune_evasive_conf
from wp_limit_fixer.ui import (
    console,
    get_user_confirmation,
    print_error,
    print_info,
    print_section,
    print_step,
    print_success,
    print_warning,
)

logger = logging.getLogger("wp_limit_fixer")

EXIT_OK = 0
EXIT_FAILURE = 1


class LimitFixer:
    """Apply one set of LimitSettings to the host."""

    def __init__(
        self,
        settings: LimitSettings,
        system: SystemManager,
        interactive: bool = True,
        restart: bool = True,
        evasive_conf: Union[str, Path] = DEFAULT_EVASIVE_CONF,
    ):
        self.settings = settings
        self.system = system
        self.interactive = interactive
        self.restart = restart
        self.evasive_conf = Path(evasive_conf)
        self.failed = False

    def confirm(self, prompt: str) -> bool:
        """Ask a yes/no question; non-interactive runs answer no."""
        if not self.interactive:
            return False
        return get_user_confirmation(prompt, default=False)

    def run(self) -> int:
        """Execute the full run and return the process exit code."""
        console.print(settings_table(self.settings))
        print_info(CRITICAL_NOTE)

        if self.interactive and not get_user_confirmation(
            "Do you want to proceed with these settings?", default=False
        ):
            print_warning("Operation cancelled by user.")
            logger.info("Run cancelled at confirmation prompt")
            return EXIT_OK

        try:
            self.update_php_ini()
            self.update_wp_config()
        except MissingFileError as e:
            print_error(escape(str(e)))
            logger.error(str(e))
            return EXIT_FAILURE
        except BackupError as e:
            print_error(f"{escape(str(e))}. No changes were made to that file.")
            logger.error(str(e))
            return EXIT_FAILURE

        self.handle_mod_evasive()
        self.check_server_time()
        if self.restart:
            self.restart_apache()
        else:
            print_info("Skipping Apache restart.")

        if self.failed:
            print_warning("Finished with errors. See messages above.")
            return EXIT_FAILURE
        print_success("All done. Please check your WordPress site to verify the changes.")
        return EXIT_OK

    # ----------------------------------------------------------------
    # Configuration files
    # ----------------------------------------------------------------
    def update_php_ini(self) -> None:
        print_section("php.ini")
        report = patch_php_ini(self.settings.php_ini, self.settings)
        print_step(f"Backup written to {escape(str(report.backup_path))}")
        for name in report.names_with(EditAction.APPENDED):
            print_info(f"{name} was not set; appended it.")
        print_success(f"Updated php.ini at {escape(str(report.path))}")

    def update_wp_config(self) -> None:
        print_section("wp-config.php")
        report = patch_wp_config(self.settings.wp_config, self.settings)
        print_step(f"Backup written to {escape(str(report.backup_path))}")

        dedup = report.actions[WP_CACHE]
        if dedup.action == EditAction.DEDUPLICATED:
            print_warning(
                f"Duplicate {WP_CACHE} definitions found in wp-config.php. "
                f"Removed {dedup.count} duplicate(s)."
            )
        for name in report.names_with(EditAction.APPENDED):
            print_warning(
                f"Stop-editing marker not found; {name} was appended to the end of "
                f"{escape(str(report.path))}. Check that it sits before wp-settings.php is loaded."
            )
        for define in self.settings.wp_defines():
            if report.actions[define.name].action == EditAction.UNCHANGED:
                print_warning(
                    f"{define.name} is defined over several lines and was not changed. "
                    f"Set it to '{escape(define.value)}' by hand."
                )
        print_success(f"Updated wp-config.php at {escape(str(report.path))}")

    # ----------------------------------------------------------------
    # Host adjustments
    # ----------------------------------------------------------------
    def handle_mod_evasive(self) -> None:
        """Offer to disable mod_evasive, or relax its thresholds if it stays."""
        print_section("mod_evasive")
        if EVASIVE_MODULE not in self.system.query_enabled_modules():
            print_info("mod_evasive is not enabled.")
            return

        print_warning("mod_evasive is currently enabled.")
        if self.confirm("Do you want to disable mod_evasive to prevent upload issues?"):
            try:
                self.system.disable_module(EVASIVE_MODULE_SHORT)
            except ServiceError as e:
                print_error(f"Failed to disable mod_evasive: {escape(str(e))}")
                logger.error(str(e))
                self.failed = True
                return
            print_success("mod_evasive has been disabled.")
            logger.info("mod_evasive disabled")
            return

        print_step("mod_evasive remains enabled. Adjusting configuration...")
        try:
            report = tune_evasive_conf(self.evasive_conf)
        except MissingFileError:
            print_warning(
                f"mod_evasive configuration file not found at {escape(str(self.evasive_conf))}"
            )
            return
        except BackupError as e:
            print_error(f"{escape(str(e))}. mod_evasive settings were left unchanged.")
            logger.error(str(e))
            self.failed = True
            return
        print_success(f"Adjusted mod_evasive settings in {escape(str(report.path))}")

    def check_server_time(self) -> None:
        print_section("Server time")
        if self.system.clock_synchronized():
            print_info("Server date and time are correct.")
            return

        print_warning("Server date and time appear to be incorrect.")
        if not self.confirm("Do you want to synchronize the server time using NTP?"):
            print_info("Server time synchronization skipped.")
            return

        try:
            self.system.ensure_package(NTP_PACKAGE)
            self.system.enable_service(NTP_SERVICE)
        except ServiceError as e:
            print_error(f"Time synchronization failed: {escape(str(e))}")
            logger.error(str(e))
            self.failed = True
            return
        print_success("NTP has been installed and started.")
        logger.info("NTP installed and started")

    def restart_apache(self, service: Optional[str] = None) -> None:
        service = service or APACHE_SERVICE
        print_section("Apache")
        print_step("Restarting Apache...")
        try:
            self.system.restart_service(service)
        except ServiceError as e:
            print_error(f"Failed to restart {service}: {escape(str(e))}")
            logger.error(str(e))
            self.failed = True
            return
        print_success(f"{service} restarted.")
        logger.info(f"{service} restarted")
