import pytest

from src.cargo_system.cargo_system.common.currency import (
    calculate_jumlah,
    calculate_ppn,
    format_rupiah,
    format_rupiah_input,
    parse_rupiah,
    round_half_up,
    terbilang,
)
from src.cargo_system.cargo_system.core.enums import TransactionType
from src.cargo_system.cargo_system.core.exceptions import ValidationError


def test_format_rupiah_groups_thousands_with_dots():
    assert format_rupiah(6480000) == "Rp 6.480.000"
    assert format_rupiah(0) == "Rp 0"
    assert format_rupiah(-1500) == "-Rp 1.500"


def test_parse_rupiah_strips_everything_but_digits():
    assert parse_rupiah("6.480.000") == 6480000
    assert parse_rupiah("Rp 6.480.000") == 6480000
    assert parse_rupiah("") == 0
    assert parse_rupiah(None) == 0
    assert parse_rupiah("abc") == 0


def test_format_rupiah_input_leaves_zero_empty():
    assert format_rupiah_input(0) == ""
    assert format_rupiah_input(1250000) == "1.250.000"
    assert format_rupiah_input("Rp 1.250.000") == "1.250.000"


@pytest.mark.parametrize(
    "amount, words",
    [
        (0, "Nol Rupiah"),
        (11, "Sebelas Rupiah"),
        (100, "Seratus Rupiah"),
        (1000, "Seribu Rupiah"),
        (1500, "Seribu Lima Ratus Rupiah"),
        (2_500_000, "Dua Juta Lima Ratus Ribu Rupiah"),
        (6_480_000, "Enam Juta Empat Ratus Delapan Puluh Ribu Rupiah"),
        (1_000_000_000, "Satu Milyar Rupiah"),
    ],
)
def test_terbilang(amount, words):
    assert terbilang(amount) == words


def test_terbilang_rejects_negative_amounts():
    with pytest.raises(ValidationError):
        terbilang(-1)


def test_calculate_jumlah_borongan_is_entered_manually():
    assert calculate_jumlah(15000, 4, TransactionType.REGULAR) == 60000
    assert calculate_jumlah(15000, 4, TransactionType.BORONGAN) == 0


def test_calculate_ppn_is_contained_in_the_total():
    assert calculate_ppn(1_110_000, 0.11) == 110_000
    assert calculate_ppn(1_110_000, 0) == 0


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4) == 2
