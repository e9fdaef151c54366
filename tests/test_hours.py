from decimal import Decimal

import pytest

from sogas_rh.common.errors import ValidationError
from sogas_rh.services.hours import calculate_hours, rounded_hours


def D(x):
    return Decimal(x)


def test_ordinary_day_one_hour_in_15_tier():
    h = calculate_hours("08:00", "17:00", False, False, 60)
    assert h.total_hours == D("9.00")
    assert h.heures_normales == D("8.00")
    assert h.heures_sup_15 == D("1.00")
    assert h.heures_sup_40 == D("0.00")
    assert h.heures_supplementaires == D("1.00")
    assert h.majoration_pourcentage == D("0.00")
    assert h.panier_repas_du is False


def test_holiday_reports_everything_as_surcharged():
    h = calculate_hours("08:00", "20:15", True, False, 60)
    assert h.heures_normales == D("0.00")
    assert h.heures_sup_15 == D("0.00")
    assert h.heures_sup_40 == D("0.00")
    assert h.heures_supplementaires == D("12.25")
    assert h.majoration_pourcentage == D("60.00")
    assert h.panier_repas_du is True


def test_sunday_holiday_wins_with_100():
    h = calculate_hours("09:00", "19:40", True, True, 60)
    # 10h40 rounds up to 10h45
    assert h.total_hours == D("10.75")
    assert h.majoration_pourcentage == D("100.00")
    assert h.heures_normales == D("0.00")
    assert h.heures_supplementaires == D("10.75")


def test_holiday_uses_configured_rate():
    h = calculate_hours("08:00", "12:00", True, False, Decimal("75"))
    assert h.majoration_pourcentage == D("75.00")
    assert calculate_hours("08:00", "12:00", True, False, None).majoration_pourcentage == D("60.00")


def test_sunday_only():
    h = calculate_hours("08:00", "12:00", False, True)
    assert h.majoration_pourcentage == D("60.00")
    assert h.heures_supplementaires == D("4.00")
    assert h.heures_normales == D("0.00")


def test_ordinary_day_spills_into_40_tier():
    # 13h10 -> 13h15
    h = calculate_hours("06:00", "19:10", False, False)
    assert h.heures_normales == D("8.00")
    assert h.heures_sup_15 == D("2.00")
    assert h.heures_sup_40 == D("3.25")
    assert h.heures_supplementaires == D("5.25")
    assert h.majoration_pourcentage == D("0.00")
    assert h.panier_repas_du is True


def test_short_day_has_no_overtime():
    h = calculate_hours("08:00", "12:30", False, False)
    assert h.heures_normales == D("4.50")
    assert h.heures_supplementaires == D("0.00")


@pytest.mark.parametrize("start,end,expected", [
    ("08:00", "08:01", "0.25"),
    ("08:00", "08:15", "0.25"),
    ("08:00", "08:16", "0.50"),
    ("07:59", "17:59", "10.00"),
])
def test_rounds_up_to_quarter(start, end, expected):
    assert rounded_hours(start, end) == D(expected)


def test_meal_allowance_threshold():
    assert calculate_hours("08:00", "17:59", False, False).panier_repas_du is True    # 10.00
    assert calculate_hours("08:00", "17:44", False, False).panier_repas_du is False   # 9.75


@pytest.mark.parametrize("start,end", [("22:00", "06:00"), ("08:00", "08:00")])
def test_overnight_or_empty_shift_rejected(start, end):
    with pytest.raises(ValidationError):
        calculate_hours(start, end, False, False)


def test_bad_time_format_rejected():
    with pytest.raises(ValidationError):
        calculate_hours("8h00", "17:00", False, False)
    with pytest.raises(ValidationError):
        calculate_hours("08:00", "24:00", False, False)


def test_as_dict_keys():
    d = calculate_hours("08:00", "17:00", False, False).as_dict()
    assert d == {
        "totalHours": 9.0,
        "heures_normales": 8.0,
        "heures_sup_15": 1.0,
        "heures_sup_40": 0.0,
        "heures_supplementaires": 1.0,
        "majoration_pourcentage": 0.0,
        "panier_repas_du": False,
    }
