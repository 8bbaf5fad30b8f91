"""
Load `products` or `customers` rows from a headered CSV into Supabase.

    python -m utils.data_seeder products data/products.csv barcode
    python -m utils.data_seeder customers data/customers.csv phone

The conflict columns must match a UNIQUE constraint in Postgres.
"""
import argparse
import csv
import logging
from typing import Dict, Iterable, List, Optional

from supabase import Client, create_client

from config import configure_logging, load_settings

logger = logging.getLogger(__name__)

BATCH_SIZE = 500
SEEDABLE_TABLES = ("products", "customers")

# CSV gives strings; these columns are converted before upsert
INT_COLUMNS = {"stock_quantity", "min_stock_level", "loyalty_points"}
FLOAT_COLUMNS = {"price", "total_spent"}
BOOL_COLUMNS = {"is_active", "is_student"}


def chunked(items: List[Dict], size: int) -> Iterable[List[Dict]]:
    for i in range(0, len(items), size):
        yield items[i:i + size]


def read_csv(file_name: str) -> tuple[List[Dict], List[str]]:
    """
    Reads a headered CSV and returns (rows, columns_from_header).
    Strips whitespace from headers and values; blank cells become None.
    """
    with open(file_name, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames:
            raise ValueError("CSV has no header row. Add headers that match DB column names.")

        columns = [c.strip() for c in reader.fieldnames if c and c.strip()]
        rows: List[Dict] = []

        for r in reader:
            obj = {}
            for k, v in r.items():
                if not k:
                    continue
                val = v.strip() if isinstance(v, str) else v
                if isinstance(val, str) and val == "":
                    val = None
                obj[k.strip()] = val

            rows.append({c: obj.get(c) for c in columns})

    return rows, columns


def coerce_row(row: Dict) -> Dict:
    out = {}
    for key, val in row.items():
        if val is None:
            out[key] = None
        elif key in INT_COLUMNS:
            out[key] = int(val)
        elif key in FLOAT_COLUMNS:
            out[key] = float(val)
        elif key in BOOL_COLUMNS:
            out[key] = str(val).lower() in ("1", "true", "yes", "y")
        else:
            out[key] = val
    return out


def dedupe_rows(rows: List[Dict], key_cols: List[str]) -> List[Dict]:
    """
    Deduplicate rows in-memory using key_cols. Keeps first occurrence and
    skips rows missing any key value.
    """
    seen = set()
    out: List[Dict] = []

    for r in rows:
        key = tuple(str(r.get(c) or "").strip() for c in key_cols)
        if any(k == "" for k in key):
            continue
        if key in seen:
            continue
        seen.add(key)
        out.append(r)

    return out


def load_to_supabase(
        supabase: Client,
        schema_name: str,
        table_name: str,
        file_name: str,
        conflict_cols: List[str],
        column_list: Optional[List[str]] = None,
        batch_size: int = BATCH_SIZE,
) -> int:
    """
    Upsert the CSV in batches. Returns the number of rows sent.
    """
    if table_name not in SEEDABLE_TABLES:
        raise ValueError(f"Cannot seed table {table_name!r}; expected one of {SEEDABLE_TABLES}")

    rows, header_cols = read_csv(file_name)

    if column_list is None:
        column_list = header_cols

    missing = [c for c in column_list if c not in header_cols]
    if missing:
        raise ValueError(f"CSV missing columns: {missing}. Found: {header_cols}")

    filtered = [coerce_row({c: r.get(c) for c in column_list}) for r in rows]
    deduped = dedupe_rows(filtered, conflict_cols)

    if not deduped:
        logger.warning("No valid rows to insert (after dedupe / missing key filtering).")
        return 0

    total = 0
    for batch in chunked(deduped, batch_size):
        supabase.schema(schema_name).table(table_name).upsert(
            batch,
            on_conflict=",".join(conflict_cols),
        ).execute()
        total += len(batch)
        logger.info("Upserted %d rows (running total: %d)", len(batch), total)

    logger.info("Done: %s.%s <- %s (%d unique rows)", schema_name, table_name, file_name, total)
    return total


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Seed products or customers from a CSV file")
    parser.add_argument("table", choices=SEEDABLE_TABLES)
    parser.add_argument("file")
    parser.add_argument("conflict_cols", nargs="+")
    parser.add_argument("--batch-size", type=int, default=BATCH_SIZE)
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(settings.log_level)

    if not settings.supabase_url or not settings.supabase_key:
        raise RuntimeError("Set SUPABASE_URL and SUPABASE_KEY in .env or environment variables")

    # use the SERVICE_ROLE key for scripts
    supabase = create_client(settings.supabase_url, settings.supabase_key)

    load_to_supabase(
        supabase=supabase,
        schema_name=settings.schema,
        table_name=args.table,
        file_name=args.file,
        conflict_cols=args.conflict_cols,
        batch_size=args.batch_size,
    )


if __name__ == "__main__":
    main()
