"""Generate invite codes for account registration."""

from __future__ import annotations

import argparse

from agentboards.db.session import SessionLocal
from agentboards.services.invite_codes import InviteCodeService


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate single-use invite codes")
    parser.add_argument("count", type=int, nargs="?", default=1, help="How many codes to create")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        service = InviteCodeService(db)
        for beta_code in service.generate(args.count):
            print(beta_code.code)
        print(f"[invite_codes] {service.count_available()} unused codes available")
    finally:
        db.close()


if __name__ == "__main__":
    main()
