# sogas_rh/services/hours.py
"""
Working-hours computation for one same-day shift.

Pure: no database or clock access, so it is unit-testable in isolation.
Rules (SOGAS):
  - worked time is rounded UP to the next quarter hour;
  - a meal allowance (panier repas) is due from 10 rounded hours;
  - Sunday + holiday: every hour surcharged at 100 %;
  - holiday only: every hour surcharged at the holiday's configured rate;
  - Sunday only: every hour surcharged at 60 %;
  - ordinary day: 8 normal hours, then 2 hours in the 15 % tier, the rest in
    the 40 % tier. The tier rates are implicit, majoration_pourcentage stays 0.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from decimal import Decimal, ROUND_HALF_UP

from sogas_rh.common.errors import ValidationError
from sogas_rh.common.validation import parse_hhmm

BASE_NORMAL_HOURS = Decimal("8.00")
TIER_15_HOURS = Decimal("2.00")
MEAL_ALLOWANCE_HOURS = Decimal("10.00")
SUNDAY_SURCHARGE = Decimal("60.00")
SUNDAY_HOLIDAY_SURCHARGE = Decimal("100.00")
DEFAULT_HOLIDAY_SURCHARGE = Decimal("60.00")

_CENT = Decimal("0.01")
_ZERO = Decimal("0.00")


def _r2(v: Decimal) -> Decimal:
    return Decimal(v).quantize(_CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class HoursBreakdown:
    total_hours: Decimal
    heures_normales: Decimal
    heures_sup_15: Decimal
    heures_sup_40: Decimal
    heures_supplementaires: Decimal
    majoration_pourcentage: Decimal
    panier_repas_du: bool

    def as_dict(self) -> dict:
        return {
            "totalHours": float(self.total_hours),
            "heures_normales": float(self.heures_normales),
            "heures_sup_15": float(self.heures_sup_15),
            "heures_sup_40": float(self.heures_sup_40),
            "heures_supplementaires": float(self.heures_supplementaires),
            "majoration_pourcentage": float(self.majoration_pourcentage),
            "panier_repas_du": self.panier_repas_du,
        }


def _minutes(value, field: str) -> int:
    t = parse_hhmm(value)
    if t is None:
        raise ValidationError(f'"{field}" doit respecter le format HH:MM.')
    return t.hour * 60 + t.minute


def rounded_hours(heure_entree: str | time, heure_sortie: str | time) -> Decimal:
    """Worked hours rounded up to the next quarter hour. Overnight shifts are rejected."""
    start = _minutes(heure_entree, "heure_entree")
    end = _minutes(heure_sortie, "heure_sortie")
    if end <= start:
        raise ValidationError("L'heure de sortie doit être postérieure à l'heure d'entrée (pas de poste de nuit).")
    quarters = -(-(end - start) // 15)  # ceil(minutes / 15)
    return Decimal(quarters) / 4


def calculate_hours(
    heure_entree: str | time,
    heure_sortie: str | time,
    is_holiday: bool,
    is_sunday: bool,
    majoration_feriee=DEFAULT_HOLIDAY_SURCHARGE,
) -> HoursBreakdown:
    total = rounded_hours(heure_entree, heure_sortie)
    panier = total >= MEAL_ALLOWANCE_HOURS

    # first match wins: Sunday+holiday never falls through to a single-condition branch
    if is_holiday and is_sunday:
        rate = SUNDAY_HOLIDAY_SURCHARGE
    elif is_holiday:
        rate = Decimal(str(majoration_feriee)) if majoration_feriee is not None else DEFAULT_HOLIDAY_SURCHARGE
    elif is_sunday:
        rate = SUNDAY_SURCHARGE
    else:
        normal = min(total, BASE_NORMAL_HOURS)
        overtime = max(_ZERO, total - BASE_NORMAL_HOURS)
        sup_15 = min(overtime, TIER_15_HOURS)
        sup_40 = max(_ZERO, overtime - TIER_15_HOURS)
        return HoursBreakdown(
            total_hours=_r2(total),
            heures_normales=_r2(normal),
            heures_sup_15=_r2(sup_15),
            heures_sup_40=_r2(sup_40),
            heures_supplementaires=_r2(sup_15 + sup_40),
            majoration_pourcentage=_ZERO,
            panier_repas_du=panier,
        )

    return HoursBreakdown(
        total_hours=_r2(total),
        heures_normales=_ZERO,
        heures_sup_15=_ZERO,
        heures_sup_40=_ZERO,
        heures_supplementaires=_r2(total),
        majoration_pourcentage=_r2(rate),
        panier_repas_du=panier,
    )
