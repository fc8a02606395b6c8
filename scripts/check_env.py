#!/usr/bin/env python3
"""
Check the environment variables the back office and these tools rely on.

Reads .env.local / .env from the current directory, then reports required
and optional variables, format problems, placeholder values and
production-safety issues. Exits 1 if anything required needs attention.

  python scripts/check_env.py
"""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from opsdesk.maintenance import env_check
from opsdesk.utils.settings import load_environment


def main() -> int:
    load_environment()
    code = env_check.run()
    print("\n📖 For help setting up these variables, see .env.example")
    return code


if __name__ == "__main__":
    sys.exit(main())
