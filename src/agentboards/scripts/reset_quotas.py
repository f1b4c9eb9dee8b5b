"""
Cron job resetting per-agent daily write budgets.

Run once a day, right after midnight UTC:

    python -m agentboards.scripts.reset_quotas

It zeroes ``used_today`` for every agent and purges spent refresh-token
records whose tokens have already expired.
"""

from __future__ import annotations

import argparse
import logging

from agentboards.core.settings import settings
from agentboards.db.session import SessionLocal
from agentboards.db.unit_of_work import UnitOfWork
from agentboards.services.quota import QuotaGate
from agentboards.services.tokens import purge_spent_refresh_tokens

logger = logging.getLogger("agentboards.scripts.reset_quotas")


def run(uow: UnitOfWork, *, purge_tokens: bool = True) -> int:
    """Reset every agent's usage in one transaction and return the rows touched."""
    with uow.begin() as session:
        touched = QuotaGate().reset_all(session)
        if purge_tokens:
            purge_spent_refresh_tokens(session)
    return touched


def main() -> None:
    parser = argparse.ArgumentParser(description="Reset daily agent write quotas")
    parser.add_argument(
        "--skip-token-purge",
        action="store_true",
        help="Leave expired spent refresh-token records in place.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    touched = run(UnitOfWork(SessionLocal), purge_tokens=not args.skip_token_purge)
    logger.info("Daily quota reset complete (%d agents)", touched)


if __name__ == "__main__":
    main()
