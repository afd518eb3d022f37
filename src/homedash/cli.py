# src/homedash/cli.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from homedash.config import Settings, settings as default_settings
from homedash.errors import DashboardError
from homedash.logging_conf import setup_logging
from homedash.services import DashboardService

log = logging.getLogger("homedash.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("homedash", description="Maintenance commands for the dashboard config store")
    parser.add_argument("--data-dir", help="Directory holding config.json and icons/ (overrides env)")
    parser.add_argument("--log-level", default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("check", help="Load the document and report entity counts")

    exp = sub.add_parser("export", help="Write the raw document to a file (or stdout)")
    exp.add_argument("--out", help="Target path; defaults to config-YYYY-MM-DD.json in the cwd, '-' for stdout")

    orphans = sub.add_parser("orphans", help="List icon files no entity references")
    orphans.add_argument("--prune", action="store_true", help="Delete them")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg: Settings = Settings.for_data_dir(args.data_dir) if args.data_dir else default_settings
    setup_logging(args.log_level or cfg.log_level)

    svc = DashboardService.from_settings(cfg)
    try:
        if args.command == "check":
            doc = svc.get_config()
            print(f"{cfg.config_path}: {len(doc.categories)} categories, {len(doc.services)} services")
        elif args.command == "export":
            name, data = svc.export_config()
            if args.out == "-":
                sys.stdout.buffer.write(data)
            else:
                target = Path(args.out or name)
                target.write_bytes(data)
                print(target)
        elif args.command == "orphans":
            names = svc.prune_orphan_icons() if args.prune else svc.orphan_icons()
            for name in names:
                print(name)
    except DashboardError as e:
        log.error("%s failed: %s", args.command, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
