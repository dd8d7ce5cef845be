"""Show or change the theme and company branding used by the report tools.

Usage examples:
  py configure_settings.py
  py configure_settings.py --theme dark --company-name "Northside Athletics"
  py configure_settings.py --clear-logo
"""

from __future__ import annotations

import argparse
import logging

from config import EnvironmentConfig
from models import Theme
from repos.settings_repository import SettingsRepository, display_title, resolve_dark_mode

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Show or update local branding settings")
    p.add_argument("--theme", choices=[t.value for t in Theme], default=None, help="Color theme.")
    p.add_argument("--company-name", default=None, help="Name shown instead of the default title.")
    p.add_argument("--company-logo", default=None, help="Path or URL of the company logo.")
    p.add_argument("--clear-logo", action="store_true", help="Remove the company logo.")
    p.add_argument(
        "--system-scheme",
        choices=["light", "dark"],
        default="light",
        help="OS color scheme used to resolve the 'system' theme.",
    )
    p.add_argument("--file", default=None, help="Settings file (default: SETTINGS_FILE).")
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Logging verbosity.",
    )
    return p


def main() -> int:
    args = build_parser().parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    path = args.file or EnvironmentConfig.load_report_settings().settings_file
    repo = SettingsRepository(path)

    changes = {}
    if args.theme is not None:
        changes["theme"] = args.theme
    if args.company_name is not None:
        changes["company_name"] = args.company_name
    if args.clear_logo:
        changes["company_logo"] = None
    elif args.company_logo is not None:
        changes["company_logo"] = args.company_logo

    if changes:
        settings = repo.update(**changes)
        logger.info("Updated settings in %s: %s", path, sorted(changes))
    else:
        settings = repo.load()

    print(f"title={display_title(settings)}")
    print(f"theme={settings.theme.value} dark_mode={resolve_dark_mode(settings, args.system_scheme)}")
    print(f"company_logo={settings.company_logo or '-'}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
