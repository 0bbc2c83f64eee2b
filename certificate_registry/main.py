# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import common.config
import fastapi
import common.db.database as db
import certificate_registry.registry as app_source


def startup() -> fastapi.FastAPI:
    """Brings the database to the latest revision before serving the registry"""
    config = common.config.DBConfig()
    db.alembic_upgrade(config.ALEMBIC_CONFIG_FILE)
    return app_source.app


# uvicorn certificate_registry.main:app
app = startup()
