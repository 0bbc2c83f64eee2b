# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Fixtures running the registry on an in-memory SQLite database
"""

import typing

import pytest

import common.db.database as db

# Register the tables on the metadata
import certificate_registry.db.records  # noqa: F401

TEST_DB_CONNECTION = "sqlite://"


def t_session() -> typing.Generator[db.Session, None, None]:
    """
    Override function Database Injection using the in-memory test database
    """
    session = db.session(db_connection_string=TEST_DB_CONNECTION)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def empty_database() -> None:
    """Every test starts with freshly created, empty tables"""
    engine = db.engine(TEST_DB_CONNECTION)
    db.Base.metadata.drop_all(engine)
    db.Base.metadata.create_all(engine)


@pytest.fixture()
def session() -> typing.Generator[db.Session, None, None]:
    yield from t_session()
