"""Rupiah formatting and terbilang (number to Indonesian words)."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal

from ..core.enums import TransactionType
from ..core.exceptions import ValidationError

_SATUAN = ["", "Satu", "Dua", "Tiga", "Empat", "Lima", "Enam", "Tujuh", "Delapan", "Sembilan"]
_BELASAN = [
    "Sepuluh",
    "Sebelas",
    "Dua Belas",
    "Tiga Belas",
    "Empat Belas",
    "Lima Belas",
    "Enam Belas",
    "Tujuh Belas",
    "Delapan Belas",
    "Sembilan Belas",
]

_NON_DIGITS = re.compile(r"\D")


def round_half_up(value: float | Decimal) -> int:
    """Round to whole Rupiah (0.5 goes up, like Math.round for positives)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _group_thousands(amount: int) -> str:
    return f"{amount:,}".replace(",", ".")


def format_rupiah(amount: int) -> str:
    """Format integer as Rupiah, e.g. 6480000 -> 'Rp 6.480.000'."""
    amount = int(amount)
    if amount < 0:
        return f"-Rp {_group_thousands(-amount)}"
    return f"Rp {_group_thousands(amount)}"


def format_rupiah_input(value: int | str) -> str:
    """Thousand-separated value for input fields; 0 renders as empty string."""
    amount = parse_rupiah(value) if isinstance(value, str) else int(value)
    if amount == 0:
        return ""
    return _group_thousands(amount)


def parse_rupiah(value: str | None) -> int:
    """Parse '6.480.000' or 'Rp 6.480.000' back into 6480000.

    All non-digit characters are stripped; an empty result is 0.
    """
    digits = _NON_DIGITS.sub("", value or "")
    return int(digits) if digits else 0


def _terbilang(n: int) -> str:
    if n < 10:
        return _SATUAN[n]
    if n < 20:
        return _BELASAN[n - 10]
    if n < 100:
        puluhan, sisa = divmod(n, 10)
        return f"{_SATUAN[puluhan]} Puluh" + (f" {_SATUAN[sisa]}" if sisa else "")
    if n < 200:
        sisa = n % 100
        return "Seratus" + (f" {_terbilang(sisa)}" if sisa else "")
    if n < 1000:
        ratusan, sisa = divmod(n, 100)
        return f"{_SATUAN[ratusan]} Ratus" + (f" {_terbilang(sisa)}" if sisa else "")
    if n < 2000:
        sisa = n % 1000
        return "Seribu" + (f" {_terbilang(sisa)}" if sisa else "")
    if n < 1_000_000:
        ribuan, sisa = divmod(n, 1000)
        return f"{_terbilang(ribuan)} Ribu" + (f" {_terbilang(sisa)}" if sisa else "")
    if n < 1_000_000_000:
        jutaan, sisa = divmod(n, 1_000_000)
        return f"{_terbilang(jutaan)} Juta" + (f" {_terbilang(sisa)}" if sisa else "")

    milyaran, sisa = divmod(n, 1_000_000_000)
    return f"{_terbilang(milyaran)} Milyar" + (f" {_terbilang(sisa)}" if sisa else "")


def terbilang(amount: int) -> str:
    """Spell out an amount in Indonesian, e.g. 1500 -> 'Seribu Lima Ratus Rupiah'."""
    amount = int(amount)
    if amount < 0:
        raise ValidationError("Nominal tidak boleh negatif")
    if amount == 0:
        return "Nol Rupiah"
    return f"{_terbilang(amount)} Rupiah"


def calculate_jumlah(harga: int, koli: int, tipe: TransactionType) -> int:
    """Total for regular transactions; borongan totals are entered manually (0)."""
    if TransactionType(tipe) == TransactionType.BORONGAN:
        return 0
    return int(harga) * int(koli)


def calculate_ppn(jumlah: int, rate: float) -> int:
    """PPN contained in a tax-inclusive total."""
    if not rate:
        return 0
    return round_half_up(Decimal(int(jumlah)) - Decimal(int(jumlah)) / (Decimal(1) + Decimal(str(rate))))
