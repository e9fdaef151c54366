# sogas_rh/common/validation.py
"""
Field readers for JSON request bodies.

Every reader takes the raw payload dict and a field name, and either returns
a typed value or raises ValidationError naming the offending field. Operation
schemas are plain functions built from these readers that return frozen
dataclasses; conditional rules are checked after the structural parse.
"""
from __future__ import annotations

import re
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from sogas_rh.common.errors import ValidationError

_MISSING = object()
_HHMM_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def body(payload: Any) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError("Le corps de la requête doit être un objet JSON.")
    return payload


def _raw(d: dict, name: str, required: bool):
    v = d.get(name, _MISSING)
    if v is _MISSING or v is None or (isinstance(v, str) and not v.strip()):
        if required:
            raise ValidationError(f'"{name}" est obligatoire.')
        return None
    return v


def require(d: dict, name: str, max_len: int | None = None, min_len: int | None = None) -> str:
    return opt_str(d, name, max_len=max_len, min_len=min_len, required=True)


def opt_str(d: dict, name: str, max_len: int | None = None, min_len: int | None = None,
            required: bool = False, default: Optional[str] = None) -> Optional[str]:
    v = _raw(d, name, required)
    if v is None:
        return default
    if not isinstance(v, str):
        raise ValidationError(f'"{name}" doit être une chaîne de caractères.')
    v = v.strip()
    if max_len is not None and len(v) > max_len:
        raise ValidationError(f'"{name}" ne doit pas dépasser {max_len} caractères.')
    if min_len is not None and len(v) < min_len:
        raise ValidationError(f'"{name}" doit contenir au moins {min_len} caractères.')
    return v


def as_int(d: dict, name: str, required: bool = False, min_value: int | None = None,
           max_value: int | None = None, default: Optional[int] = None) -> Optional[int]:
    v = _raw(d, name, required)
    if v is None:
        return default
    if isinstance(v, bool):
        raise ValidationError(f'"{name}" doit être un entier.')
    try:
        n = int(v)
    except (TypeError, ValueError):
        raise ValidationError(f'"{name}" doit être un entier.')
    if isinstance(v, float) and v != n:
        raise ValidationError(f'"{name}" doit être un entier.')
    if min_value is not None and n < min_value:
        raise ValidationError(f'"{name}" doit être supérieur ou égal à {min_value}.')
    if max_value is not None and n > max_value:
        raise ValidationError(f'"{name}" doit être inférieur ou égal à {max_value}.')
    return n


def as_decimal(d: dict, name: str, required: bool = False, min_value=None, max_value=None,
               default=None) -> Optional[Decimal]:
    v = _raw(d, name, required)
    if v is None:
        return Decimal(str(default)) if default is not None else None
    if isinstance(v, bool):
        raise ValidationError(f'"{name}" doit être un nombre.')
    try:
        n = Decimal(str(v))
    except (InvalidOperation, ValueError):
        raise ValidationError(f'"{name}" doit être un nombre.')
    if not n.is_finite():
        raise ValidationError(f'"{name}" doit être un nombre.')
    if min_value is not None and n < Decimal(str(min_value)):
        raise ValidationError(f'"{name}" doit être supérieur ou égal à {min_value}.')
    if max_value is not None and n > Decimal(str(max_value)):
        raise ValidationError(f'"{name}" doit être inférieur ou égal à {max_value}.')
    return n


def as_bool(d: dict, name: str, default: bool = False) -> bool:
    v = d.get(name)
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    if isinstance(v, str) and v.lower() in ("true", "1", "yes"):
        return True
    if isinstance(v, str) and v.lower() in ("false", "0", "no"):
        return False
    raise ValidationError(f'"{name}" doit être un booléen.')


def parse_date(val) -> Optional[date]:
    if val is None or val == "":
        return None
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    s = str(val).strip()
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def as_date(d: dict, name: str, required: bool = False, default: Optional[date] = None) -> Optional[date]:
    v = _raw(d, name, required)
    if v is None:
        return default
    out = parse_date(v)
    if out is None:
        raise ValidationError(f'"{name}" doit être une date ISO (AAAA-MM-JJ).')
    return out


def parse_hhmm(val) -> Optional[time]:
    if isinstance(val, time):
        return val.replace(second=0, microsecond=0)
    m = _HHMM_RE.match(str(val or "").strip())
    if not m:
        return None
    return time(int(m.group(1)), int(m.group(2)))


def as_hhmm(d: dict, name: str, required: bool = True) -> Optional[time]:
    v = _raw(d, name, required)
    if v is None:
        return None
    out = parse_hhmm(v)
    if out is None:
        raise ValidationError(f'"{name}" doit respecter le format HH:MM.')
    return out


def one_of(d: dict, name: str, choices: Iterable[str], required: bool = False,
           default: Optional[str] = None) -> Optional[str]:
    choices = tuple(choices)
    v = opt_str(d, name, required=required)
    if v is None:
        return default
    if v not in choices:
        raise ValidationError(f'"{name}" doit être l\'une des valeurs : {", ".join(choices)}.')
    return v


def email(d: dict, name: str, required: bool = False, max_len: int = 255) -> Optional[str]:
    v = opt_str(d, name, max_len=max_len, required=required)
    if v is None:
        return None
    if not _EMAIL_RE.match(v):
        raise ValidationError(f'"{name}" doit être une adresse email valide.')
    return v.lower()


def reject_unknown(d: dict, allowed: Iterable[str]):
    unknown = sorted(set(d) - set(allowed))
    if unknown:
        raise ValidationError(f'Champ non autorisé : "{unknown[0]}".')
