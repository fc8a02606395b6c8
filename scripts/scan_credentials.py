#!/usr/bin/env python3
"""
Scan a source tree for hardcoded credentials. Exits 1 on any critical
finding, so it can run as a pre-commit or CI step.

  python scripts/scan_credentials.py --root ../web
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from opsdesk.maintenance import credential_scan


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Scan for hardcoded credentials")
    parser.add_argument("--root", type=Path, default=Path.cwd(), help="Directory to scan (default: cwd)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log skipped files")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not args.root.is_dir():
        print(f"❌ Not a directory: {args.root}", file=sys.stderr)
        return 1
    return credential_scan.run(args.root)


if __name__ == "__main__":
    sys.exit(main())
