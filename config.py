# config.py
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    supabase_url: Optional[str]
    supabase_key: Optional[str]
    schema: str = "public"
    cashier_id: Optional[str] = None
    cashier_name: str = "Cashier"
    store_name: str = "KarU Mart"
    customer_list_limit: int = 50
    log_level: str = "INFO"


def load_settings() -> Settings:
    """
    Read settings from the environment (and `.env`, if present).
    """
    load_dotenv()

    return Settings(
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_key=os.getenv("SUPABASE_KEY"),
        schema=os.getenv("SCHEMA") or "public",
        cashier_id=os.getenv("CASHIER_ID") or None,
        cashier_name=os.getenv("CASHIER_NAME") or "Cashier",
        store_name=os.getenv("STORE_NAME") or "KarU Mart",
        customer_list_limit=int(os.getenv("CUSTOMER_LIST_LIMIT") or 50),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    # basicConfig is a no-op once the root logger has handlers, so reruns are safe
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
