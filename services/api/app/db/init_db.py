from __future__ import annotations

import os
from pathlib import Path

from services.api.app.db.database import get_engine
from services.api.app.db.models import Base

_TRUTHY = {"1", "true", "yes", "y"}


def init_db() -> None:
    if os.getenv("BURBUJA_DB_AUTO_CREATE", "true").strip().lower() not in _TRUTHY:
        return

    engine = get_engine()
    db_file = engine.url.database
    if engine.url.get_backend_name() == "sqlite" and db_file and db_file != ":memory:":
        Path(db_file).parent.mkdir(parents=True, exist_ok=True)

    Base.metadata.create_all(bind=engine)
