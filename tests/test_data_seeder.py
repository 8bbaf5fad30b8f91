import pytest

from utils.data_seeder import chunked, coerce_row, dedupe_rows, load_to_supabase, read_csv


@pytest.fixture
def products_csv(tmp_path):
    path = tmp_path / "products.csv"
    path.write_text(
        " name ,price,stock_quantity,barcode,is_active,min_stock_level\n"
        "Bread,55.5,20, 600100 ,true,5\n"
        "Milk,60,12,600200,yes,\n"
        "Bread again,50,1,600100,true,5\n"
        "No code,10,1,,false,0\n",
        encoding="utf-8",
    )
    return str(path)


def test_read_csv_strips_and_nulls_blanks(products_csv):
    rows, columns = read_csv(products_csv)

    assert columns == ["name", "price", "stock_quantity", "barcode", "is_active", "min_stock_level"]
    assert rows[0]["barcode"] == "600100"
    assert rows[1]["min_stock_level"] is None


def test_coerce_row_types():
    row = coerce_row({"price": "55.5", "stock_quantity": "20", "is_active": "no", "name": "Bread", "barcode": None})
    assert row == {"price": 55.5, "stock_quantity": 20, "is_active": False, "name": "Bread", "barcode": None}


def test_dedupe_keeps_first_and_skips_missing_keys():
    rows = [{"barcode": "1", "name": "a"}, {"barcode": "1", "name": "b"}, {"barcode": None, "name": "c"}]
    assert dedupe_rows(rows, ["barcode"]) == [{"barcode": "1", "name": "a"}]


def test_chunked():
    assert list(chunked([{"i": i} for i in range(5)], 2)) == [
        [{"i": 0}, {"i": 1}],
        [{"i": 2}, {"i": 3}],
        [{"i": 4}],
    ]


def test_load_to_supabase_upserts_in_batches(fake_client, products_csv):
    total = load_to_supabase(fake_client, "public", "products", products_csv, ["barcode"], batch_size=1)

    upserts = fake_client.calls_for("products", "upsert")
    assert total == 2
    assert len(upserts) == 2
    assert upserts[0].options == {"on_conflict": "barcode"}
    assert upserts[0].payload[0]["price"] == 55.5
    assert upserts[1].payload[0]["name"] == "Milk"


def test_load_to_supabase_rejects_other_tables(fake_client, products_csv):
    with pytest.raises(ValueError):
        load_to_supabase(fake_client, "public", "transactions", products_csv, ["barcode"])


def test_load_to_supabase_checks_requested_columns(fake_client, products_csv):
    with pytest.raises(ValueError, match="CSV missing columns"):
        load_to_supabase(fake_client, "public", "products", products_csv, ["barcode"], column_list=["sku"])
