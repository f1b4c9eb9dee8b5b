"""Operational scripts (cron jobs and one-off admin tasks)."""
