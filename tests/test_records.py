import pandas as pd
import pytest

from dataflow_ui.models import parse_sales, to_rows

SALES = [
    {"id": 1, "month": "Jan", "revenue": 45000, "orders": 450, "customers": 300},
    {"id": 2, "month": "Feb", "revenue": 52000.5, "orders": 480, "customers": 320,
     "created_at": "2024-02-01 00:00:00"},
]


def test_to_rows_feeds_a_dataframe():
    rows = to_rows(parse_sales(SALES))

    assert rows[0] == {
        "id": 1, "month": "Jan", "revenue": 45000.0, "orders": 450, "customers": 300,
        "created_at": "", "updated_at": "",
    }
    df = pd.DataFrame(rows)
    assert list(df["month"]) == ["Jan", "Feb"]
    assert df.loc[1, "created_at"] == "2024-02-01 00:00:00"


def test_to_rows_empty():
    assert to_rows([]) == []


@pytest.mark.parametrize("payload", [
    {"id": 1},
    [{"id": 1, "month": "Jan", "revenue": "lots", "orders": 1, "customers": 1}],
    [{"id": 1, "month": "Jan", "orders": 1, "customers": 1}],
])
def test_parse_sales_rejects_malformed(payload):
    with pytest.raises((TypeError, KeyError)):
        parse_sales(payload)
