"""
vodsync: upload downloaded episodes and reconcile their remote quality tiers.

Packages:
    config        SyncConfig (environment / .env settings)
    db            SQLAlchemy models, Database, work-queue helpers
    storage       Video store backends and typed responses
    remote        Retry-until-success guard for remote calls
    ingestion     File discovery, upload, catalog records, quality reconciliation
    localization  Localized title lookup
    social        Share queue publisher and Weibo client
    pipeline      Scheduler loop and status report
"""

__version__ = "0.1.0"
