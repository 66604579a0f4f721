"""
Run configuration: defaults, the settings value object and the prompts
that populate it.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from wp_limit_fixer.ui import create_settings_table, get_user_input

# ----------------------------------------------------------------
# Configuration
# ----------------------------------------------------------------
DEFAULT_UPLOAD_MAX_FILESIZE: str = "256M"
DEFAULT_POST_MAX_SIZE: str = "256M"
DEFAULT_MEMORY_LIMIT: str = "512M"
DEFAULT_MAX_EXECUTION_TIME: str = "600"
DEFAULT_MAX_INPUT_TIME: str = "600"
DEFAULT_PHP_INI: str = "/etc/php/8.2/apache2/php.ini"
DEFAULT_WP_CONFIG: str = "/var/www/wordpress/wp-config.php"

# Apache / mod_evasive
APACHE_SERVICE: str = "apache2"
EVASIVE_MODULE: str = "evasive20_module"
EVASIVE_MODULE_SHORT: str = "evasive"
DEFAULT_EVASIVE_CONF: str = "/etc/apache2/mods-available/evasive.conf"
EVASIVE_TUNING: Dict[str, str] = {
    "DOSPageCount": "50",
    "DOSSiteCount": "200",
    "DOSBlockingPeriod": "10",
}

# Time synchronization
NTP_PACKAGE: str = "ntp"
NTP_SERVICE: str = "ntp"

# WordPress constants
WP_CACHE: str = "WP_CACHE"
WP_MEMORY_LIMIT: str = "WP_MEMORY_LIMIT"
WP_MAX_MEMORY_LIMIT: str = "WP_MAX_MEMORY_LIMIT"

CRITICAL_NOTE: str = (
    "Options marked with an asterisk (*) are critical for resolving upload issues."
)
CRITICAL_SETTINGS: Tuple[str, ...] = ("post_max_size",)


# ----------------------------------------------------------------
# Data Structures
# ----------------------------------------------------------------
@dataclass
class ConfigDirective:
    """A single name/value pair to upsert into a configuration file."""

    name: str
    value: str


@dataclass
class LimitSettings:
    """Values collected from the operator for one run."""

    upload_max_filesize: str = DEFAULT_UPLOAD_MAX_FILESIZE
    post_max_size: str = DEFAULT_POST_MAX_SIZE
    memory_limit: str = DEFAULT_MEMORY_LIMIT
    max_execution_time: str = DEFAULT_MAX_EXECUTION_TIME
    max_input_time: str = DEFAULT_MAX_INPUT_TIME
    php_ini: Path = field(default_factory=lambda: Path(DEFAULT_PHP_INI))
    wp_config: Path = field(default_factory=lambda: Path(DEFAULT_WP_CONFIG))

    def __post_init__(self) -> None:
        self.php_ini = Path(self.php_ini)
        self.wp_config = Path(self.wp_config)

    def php_directives(self) -> List[ConfigDirective]:
        """Directives written to php.ini, in file order."""
        return [
            ConfigDirective("upload_max_filesize", self.upload_max_filesize),
            ConfigDirective("post_max_size", self.post_max_size),
            ConfigDirective("memory_limit", self.memory_limit),
            ConfigDirective("max_execution_time", self.max_execution_time),
            ConfigDirective("max_input_time", self.max_input_time),
        ]

    def wp_defines(self) -> List[ConfigDirective]:
        """Constants written to wp-config.php. Both follow memory_limit."""
        return [
            ConfigDirective(WP_MEMORY_LIMIT, self.memory_limit),
            ConfigDirective(WP_MAX_MEMORY_LIMIT, self.memory_limit),
        ]

    def summary_rows(self) -> List[Tuple[str, str, bool]]:
        """Rows for the confirmation table: (label, value, critical)."""
        rows = [
            (d.name, d.value, d.name in CRITICAL_SETTINGS)
            for d in self.php_directives()
        ]
        rows.append(("php.ini file", str(self.php_ini), False))
        rows.append(("wp-config.php file", str(self.wp_config), False))
        return rows


# (field, prompt text) in prompt order
PROMPTS: List[Tuple[str, str]] = [
    ("upload_max_filesize", "Enter the upload_max_filesize"),
    ("post_max_size", "Enter the post_max_size"),
    ("memory_limit", "Enter the memory_limit"),
    ("max_execution_time", "Enter the max_execution_time"),
    ("max_input_time", "Enter the max_input_time"),
    ("php_ini", "Enter the path to php.ini file"),
    ("wp_config", "Enter the path to wp-config.php file"),
]


# ----------------------------------------------------------------
# Prompting
# ----------------------------------------------------------------
def collect_settings(
    overrides: Optional[Dict[str, Optional[str]]] = None, interactive: bool = True
) -> LimitSettings:
    """
    Build LimitSettings from command-line overrides and interactive prompts.

    Values given in ``overrides`` are used as-is. Anything else is prompted
    for (showing the default) when ``interactive``, or falls back to the
    default otherwise.
    """
    overrides = overrides or {}
    defaults = LimitSettings()
    values: Dict[str, str] = {}

    for name, text in PROMPTS:
        supplied = overrides.get(name)
        default = str(getattr(defaults, name))
        if supplied is not None:
            values[name] = str(supplied)
        elif interactive:
            answer = get_user_input(text, default, critical=name in CRITICAL_SETTINGS)
            values[name] = answer.strip() or default
        else:
            values[name] = default

    return LimitSettings(**values)


def settings_table(settings: LimitSettings):
    """Confirmation table for the given settings."""
    return create_settings_table(settings.summary_rows())
