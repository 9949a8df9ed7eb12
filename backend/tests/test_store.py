import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from coupang_insights.models import Base, InMemoryKeyValueStore, SQLAlchemyKeyValueStore
from coupang_insights.schemas import ProductMaster
from coupang_insights.services.repository import RecordRepository


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)


def test_sqlalchemy_store_roundtrip(session_factory):
    store = SQLAlchemyKeyValueStore(session_factory)

    assert store.get("missing") is None

    store.set("k", [{"a": 1}])
    store.set("k", [{"a": 2}, {"b": "텍스트"}])
    assert store.get("k") == [{"a": 2}, {"b": "텍스트"}]

    store.delete("k")
    assert store.get("k") is None


def test_delete_missing_key_is_a_noop(session_factory):
    SQLAlchemyKeyValueStore(session_factory).delete("nothing")


def test_repository_on_database(session_factory, make_sales):
    repository = RecordRepository(SQLAlchemyKeyValueStore(session_factory))

    repository.merge_sales([make_sales(sales_qty=3), make_sales(sales_qty=2)])
    repository.merge_master([ProductMaster(barcode="8801", sku_name="Green Tea", hq_inventory=4)])

    assert repository.load_sales()[0].sales_qty == 5
    assert repository.load_master()[0].hq_inventory == 4


def test_in_memory_store_copies_values():
    store = InMemoryKeyValueStore()
    value = [{"a": 1}]
    store.set("k", value)
    value[0]["a"] = 99

    loaded = store.get("k")
    loaded[0]["a"] = 42
    assert store.get("k") == [{"a": 1}]
