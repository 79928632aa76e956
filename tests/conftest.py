import pytest

from spark_apriori.spark_session import initialize_spark


@pytest.fixture(scope="session")
def sc():
    sc = initialize_spark("spark-apriori-tests", master="local[2]")
    yield sc
    sc.stop()


@pytest.fixture
def market_baskets():
    return [
        ["bread", "milk"],
        ["bread", "diaper", "beer", "eggs"],
        ["milk", "diaper", "beer", "cola"],
        ["bread", "milk", "diaper", "beer"],
        ["bread", "milk", "diaper", "cola"],
    ]
