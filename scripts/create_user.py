"""Create a user directly in the DB (same path as POST /api/register).

Usage:
  python scripts/create_user.py --email a@b.com --username alice --password '...'

NOTE: This is intended for local/dev.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from verse_platform.auth.crud import create_user
from verse_platform.auth.security import password_context
from verse_platform.config import load_config
from verse_platform.db import connect, init_db
from verse_platform.errors import ApiError


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--email", required=True)
    ap.add_argument("--username", required=True)
    ap.add_argument("--password", required=True)
    ap.add_argument("--bio", default=None)
    args = ap.parse_args()

    cfg = load_config()
    init_db(cfg.DB_DSN)

    kwargs = {"bio": args.bio} if args.bio else {}
    try:
        with connect(cfg.DB_DSN) as conn:
            u = create_user(
                conn,
                email=args.email,
                username=args.username,
                password=args.password,
                ctx=password_context(cfg.AUTH_PASSWORD_SCHEME),
                **kwargs,
            )
    except ApiError as e:
        print(f"Failed: {e.message}")
        sys.exit(1)

    print("Created user:")
    print(u.public())


if __name__ == "__main__":
    main()
