"""Example: using the service layer directly, without Flask.

Controllers stay thin; the business rules live in the services.
"""

import importlib

from config import get_settings_module

from src.cargo_system.cargo_system.common.currency import format_rupiah, terbilang
from src.cargo_system.cargo_system.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    print("STT berikutnya:", container.counter_service.peek_stt_number("surabaya"))
    for tx in list(container.transaction_service.list_transactions())[:5]:
        print(tx.no_stt, format_rupiah(tx.jumlah), terbilang(tx.jumlah))


if __name__ == "__main__":
    main()
