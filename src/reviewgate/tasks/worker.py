"""Procrastinate worker configuration."""

import procrastinate

from ..config import settings

app = procrastinate.App(
    connector=procrastinate.PsycopgConnector(
        conninfo=settings.procrastinate_database_url,
        kwargs={},
    ),
    import_paths=["reviewgate.tasks.activity_tasks"],
)
