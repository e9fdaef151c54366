# sogas_rh/common/paging.py
"""Query-string helpers for list endpoints."""
from flask import request

from sogas_rh.common.errors import ValidationError
from sogas_rh.common.validation import parse_date

DEFAULT_PAGE = 1
DEFAULT_SIZE = 20
MAX_SIZE = 100


def page_size():
    """?page & ?size, clamped; junk falls back to the defaults."""
    try:
        page = max(int(request.args.get("page", DEFAULT_PAGE)), 1)
    except (TypeError, ValueError):
        page = DEFAULT_PAGE
    try:
        size = max(1, min(int(request.args.get("size", DEFAULT_SIZE)), MAX_SIZE))
    except (TypeError, ValueError):
        size = DEFAULT_SIZE
    return page, size


def text_q():
    q = request.args.get("q", "")
    return q.strip() or None


def date_range(start_key="from", end_key="to"):
    """?from=YYYY-MM-DD&to=YYYY-MM-DD; either bound may be absent."""
    out = []
    for key in (start_key, end_key):
        raw = request.args.get(key)
        val = parse_date(raw)
        if raw and val is None:
            raise ValidationError(f'"{key}" doit être une date ISO (AAAA-MM-JJ).')
        out.append(val)
    if out[0] and out[1] and out[1] < out[0]:
        raise ValidationError(f'"{end_key}" doit être postérieure ou égale à "{start_key}".')
    return tuple(out)
