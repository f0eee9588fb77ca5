import pytest
from sqlalchemy import func, select

from tutor_buddy.config import MODE_TEST, StoreConfig, TableNames
from tutor_buddy.utils.gateway import StoreGateway


@pytest.fixture(name="gateway")
def gateway_fixture():
    config = StoreConfig(
        mode=MODE_TEST,
        database_url="sqlite://",
        tables=TableNames.for_mode(MODE_TEST),
    )
    gateway = StoreGateway.from_config(config)
    gateway.create_schema()
    yield gateway
    gateway.drop_schema()
    gateway.dispose()


@pytest.fixture(name="count_rows")
def count_rows_fixture(gateway):
    def count_rows(table, *criteria):
        query = select(func.count()).select_from(table)
        if criteria:
            query = query.where(*criteria)
        with gateway.engine.connect() as conn:
            return conn.execute(query).scalar_one()

    return count_rows


@pytest.fixture(name="user_id")
def user_id_fixture(gateway):
    return gateway.user.create("Tess", "Tutor", "tess@example.com", "fb-100", "token-100")


@pytest.fixture(name="tutor_id")
def tutor_id_fixture(gateway, user_id):
    return gateway.tutor.create_profile(user_id)


@pytest.fixture(name="batch_id")
def batch_id_fixture(gateway, tutor_id):
    return gateway.batch.create(tutor_id, "Algebra I", "Math", "12 Elm St")
