from __future__ import annotations

from src.timetrack_system.timetrack_system.database.connection import DatabaseConnection, db_config_from_dict

DEV = {"host": "localhost", "port": 3306, "user": "root", "password": "", "database": "timetrack_db"}


def test_instances_are_shared_per_config():
    first = DatabaseConnection.get_instance(db_config_from_dict(DEV))
    again = DatabaseConnection.get_instance(db_config_from_dict(dict(DEV)))
    other = DatabaseConnection.get_instance(db_config_from_dict({**DEV, "database": "timetrack_test"}))

    assert first is again
    assert other is not first
    assert other.config.database == "timetrack_test"
    assert first.config.database == "timetrack_db"
