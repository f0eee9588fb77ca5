import pytest
from sqlalchemy.engine import make_url

from tutor_buddy.config import (
    MODE_DEV,
    MODE_PROD,
    MODE_TEST,
    TableNames,
    build_database_url,
    get_mode,
    load_store_config,
)
from tutor_buddy.core.exceptions import ConfigurationError

ENV_VARS = [
    "MODE",
    "mode",
    "DATABASE_URL",
    "DB_INSTANCE",
    "DB_HOST",
    "DB_PORT",
    "DB_USER",
    "DB_PASSWORD",
    "DB_NAME",
    "DB_DRIVER",
    "DB_POOL_TIMEOUT",
    "DB_CONNECT_TIMEOUT",
    "DB_STATEMENT_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_production_table_names():
    names = TableNames.for_mode(MODE_PROD)
    assert names.users == "users"
    assert names.tutor_batch_map == "tutor_batch_map"
    assert TableNames.for_mode(MODE_DEV) == names


def test_test_mode_table_names_are_suffixed():
    names = TableNames.for_mode(MODE_TEST)
    assert names.users == "users-test"
    assert names.tutors == "tutors-test"
    assert names.students == "students-test"
    assert names.batches == "batches-test"
    assert names.tutor_batch_map == "tutor_batch_map-test"
    assert names.batch_student_map == "batch_student_map-test"
    assert names.payments == "payments-test"


def test_mode_defaults_to_dev():
    assert get_mode() == MODE_DEV


def test_mode_is_case_insensitive(monkeypatch):
    monkeypatch.setenv("MODE", "test")
    assert get_mode() == MODE_TEST


def test_lowercase_mode_variable_is_honoured(monkeypatch):
    monkeypatch.setenv("mode", "TEST")
    assert get_mode() == MODE_TEST


def test_unknown_mode_is_rejected(monkeypatch):
    monkeypatch.setenv("MODE", "staging")
    with pytest.raises(ConfigurationError):
        get_mode()


def test_dev_url_uses_host(monkeypatch):
    monkeypatch.setenv("DB_USER", "tutor")
    monkeypatch.setenv("DB_PASSWORD", "p@ss")
    monkeypatch.setenv("DB_HOST", "db.local")
    url = make_url(build_database_url(MODE_DEV))
    assert url.drivername == "mysql+pymysql"
    assert url.host == "db.local"
    assert url.port == 3306
    assert url.username == "tutor"
    assert url.password == "p@ss"
    assert url.database == "tutor-buddy"


def test_prod_url_uses_cloudsql_socket(monkeypatch):
    monkeypatch.setenv("DB_INSTANCE", "proj:region:instance")
    url = make_url(build_database_url(MODE_PROD))
    assert url.host is None
    assert url.query["unix_socket"] == "/cloudsql/proj:region:instance"


def test_prod_without_instance_is_rejected():
    with pytest.raises(ConfigurationError):
        build_database_url(MODE_PROD)


def test_database_url_override(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///tutor.db")
    assert build_database_url(MODE_PROD) == "sqlite:///tutor.db"


def test_load_store_config(monkeypatch):
    monkeypatch.setenv("MODE", "TEST")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("DB_STATEMENT_TIMEOUT", "5")
    config = load_store_config()
    assert config.mode == MODE_TEST
    assert config.tables.users == "users-test"
    assert config.statement_timeout == 5.0


def test_invalid_timeout_is_rejected(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("DB_POOL_TIMEOUT", "soon")
    with pytest.raises(ConfigurationError):
        load_store_config()
