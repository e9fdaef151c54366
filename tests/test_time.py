from datetime import date, timedelta

import pytest

from sogas_rh.common.errors import ConflictError, NotFoundError, ValidationError
from sogas_rh.extensions import db
from sogas_rh.models.attendance import Attendance
from sogas_rh.models.leave import LeaveRequest
from sogas_rh.services import employees, time_tracking

TODAY = date(2026, 3, 2)

# 2026-03-03 is a Tuesday, 2026-03-01 and 2026-03-08 are Sundays, 2026-04-04 a Saturday
TUESDAY = "2026-03-03"


def _checkin(client, headers, emp_id, day, start="08:00"):
    return client.post("/api/time/checkin",
                       json={"employee_id": emp_id, "heure_entree": start, "date_pointage": day},
                       headers=headers)


def _checkout(client, headers, emp_id, day, end):
    return client.put(f"/api/time/checkout/{emp_id}",
                      json={"heure_sortie": end, "date_pointage": day}, headers=headers)


# ---------- pointage ----------
def test_checkin_then_checkout_ordinary_day(client, headers, employee_id):
    r = _checkin(client, headers, employee_id, TUESDAY)
    assert r.status_code == 201
    att_id = r.get_json()["attendanceId"]
    att = db.session.get(Attendance, att_id)
    assert att.heure_sortie is None and att.heures_normales is None

    r = _checkout(client, headers, employee_id, TUESDAY, "17:00")
    assert r.status_code == 200
    body = r.get_json()
    assert body["totalHours"] == 9.0
    assert body["heures_normales"] == 8.0
    assert body["heures_sup_15"] == 1.0
    assert body["heures_sup_40"] == 0.0
    assert body["majoration_pourcentage_speciale"] == 0.0
    assert body["panier_repas_du"] is False

    db.session.expire_all()
    att = db.session.get(Attendance, att_id)
    assert att.heure_sortie.strftime("%H:%M") == "17:00"
    assert float(att.heures_sup_hors_majoration) == 1.0


def test_duplicate_checkin_is_409(client, headers, employee_id):
    assert _checkin(client, headers, employee_id, TUESDAY).status_code == 201
    assert _checkin(client, headers, employee_id, TUESDAY, "09:00").status_code == 409


def test_checkout_is_applied_once(client, headers, employee_id):
    _checkin(client, headers, employee_id, TUESDAY)
    assert _checkout(client, headers, employee_id, TUESDAY, "17:00").status_code == 200
    assert _checkout(client, headers, employee_id, TUESDAY, "18:00").status_code == 404


def test_checkout_without_checkin_is_404(client, headers, employee_id):
    assert _checkout(client, headers, employee_id, TUESDAY, "17:00").status_code == 404


def test_overnight_checkout_is_400_and_record_stays_open(client, headers, employee_id):
    _checkin(client, headers, employee_id, TUESDAY, "22:00")
    r = _checkout(client, headers, employee_id, TUESDAY, "06:00")
    assert r.status_code == 400
    db.session.expire_all()
    att = db.session.execute(db.select(Attendance)).scalar_one()
    assert att.heure_sortie is None


def test_bad_time_format_is_400(client, headers, employee_id):
    r = client.post("/api/time/checkin",
                    json={"employee_id": employee_id, "heure_entree": "8h"}, headers=headers)
    assert r.status_code == 400


def test_checkin_archived_employee_is_404(client, headers, employee_id, actor):
    employees.archive_employee(employee_id, actor)
    assert _checkin(client, headers, employee_id, TUESDAY).status_code == 404


def test_holiday_checkout_uses_configured_rate(client, headers, employee_id):
    r = client.post("/api/time/feries", json={
        "nom": "Fête de l'Indépendance", "date_feriee": "2026-04-04", "majoration_pourcentage": 60,
    }, headers=headers)
    assert r.status_code == 201

    _checkin(client, headers, employee_id, "2026-04-04")
    body = _checkout(client, headers, employee_id, "2026-04-04", "20:15").get_json()
    assert body["heures_normales"] == 0.0
    assert body["heures_sup_15"] == 0.0
    assert body["heures_sup_40"] == 0.0
    assert body["heures_supplementaires"] == 12.25
    assert body["majoration_pourcentage_speciale"] == 60.0
    assert body["panier_repas_du"] is True


def test_recurrent_holiday_on_sunday(client, headers, employee_id):
    client.post("/api/time/feries", json={
        "nom": "Fête test", "date_feriee": "2025-03-01", "recurrent": True,
    }, headers=headers)
    _checkin(client, headers, employee_id, "2026-03-01", "09:00")
    body = _checkout(client, headers, employee_id, "2026-03-01", "19:40").get_json()
    assert body["majoration_pourcentage_speciale"] == 100.0
    assert body["heures_supplementaires"] == 10.75


def test_sunday_only(client, headers, employee_id):
    _checkin(client, headers, employee_id, "2026-03-08")
    body = _checkout(client, headers, employee_id, "2026-03-08", "12:00").get_json()
    assert body["majoration_pourcentage_speciale"] == 60.0
    assert body["heures_supplementaires"] == 4.0


def test_duplicate_holiday_is_409(app):
    time_tracking.add_holiday({"nom": "Noël", "date_feriee": "2026-12-25"})
    with pytest.raises(ConflictError):
        time_tracking.add_holiday({"nom": "Noël bis", "date_feriee": "2026-12-25"})


def test_inactive_holiday_ignored(app):
    time_tracking.add_holiday({"nom": "Ancien", "date_feriee": "2026-05-20", "actif": False})
    assert time_tracking.holiday_for(date(2026, 5, 20)) is None
    assert time_tracking.list_holidays() == []


def test_attendance_listing(client, headers, employee_id):
    _checkin(client, headers, employee_id, "2026-03-03")
    _checkin(client, headers, employee_id, "2026-03-04")
    rows = client.get(f"/api/time/attendances?employee_id={employee_id}&from=2026-03-04",
                      headers=headers).get_json()["data"]
    assert [r["date_pointage"] for r in rows] == ["2026-03-04"]


def test_attendance_listing_rejects_bad_range(client, headers):
    r = client.get("/api/time/attendances?from=mars", headers=headers)
    assert r.status_code == 400
    r = client.get("/api/time/attendances?from=2026-03-05&to=2026-03-01", headers=headers)
    assert r.status_code == 400


# ---------- leave ----------
def leave(employee_id, start, end, **over):
    data = {
        "employee_id": employee_id,
        "type_conge": "Congé annuel",
        "date_debut": start.isoformat(),
        "date_fin": end.isoformat(),
        "nb_jours": (end - start).days + 1,
    }
    data.update(over)
    return data


def d(offset):
    return TODAY + timedelta(days=offset)


def test_leave_submitted_with_first_step(employee_id, actor):
    rid = time_tracking.submit_leave(leave(employee_id, d(10), d(14)), actor, today=TODAY)
    out = time_tracking.get_leave(rid)
    assert out["statut_actuel"] == "Soumis"
    (step,) = out["validations"]
    assert step["niveau_validation"] == "Soumission Employé"
    assert step["decision"] == "En attente"
    assert step["validateur_id"] == actor.id


@pytest.mark.parametrize("start,end", [
    (12, 16),   # partial overlap at the end
    (8, 10),    # touches the first day
    (11, 13),   # contained
    (5, 20),    # contains
])
def test_overlapping_leave_is_409(employee_id, actor, start, end):
    time_tracking.submit_leave(leave(employee_id, d(10), d(14)), actor, today=TODAY)
    with pytest.raises(ConflictError):
        time_tracking.submit_leave(leave(employee_id, d(start), d(end)), actor, today=TODAY)
    assert db.session.execute(db.select(db.func.count(LeaveRequest.id))).scalar_one() == 1


def test_adjacent_leave_is_fine(employee_id, actor):
    time_tracking.submit_leave(leave(employee_id, d(10), d(14)), actor, today=TODAY)
    assert time_tracking.submit_leave(leave(employee_id, d(15), d(16)), actor, today=TODAY)


def test_rejected_leave_does_not_block(employee_id, actor):
    rid = time_tracking.submit_leave(leave(employee_id, d(10), d(14)), actor, today=TODAY)
    db.session.get(LeaveRequest, rid).statut_actuel = "Rejeté"
    db.session.commit()
    assert time_tracking.submit_leave(leave(employee_id, d(12), d(13)), actor, today=TODAY)


@pytest.mark.parametrize("start,end,over", [
    (-1, 2, {}),                    # starts in the past
    (5, 3, {}),                     # ends before it starts
    (5, 5, {"nb_jours": 0.25}),
])
def test_leave_validation(employee_id, actor, start, end, over):
    with pytest.raises(ValidationError):
        time_tracking.submit_leave(leave(employee_id, d(start), d(end), **over), actor, today=TODAY)


def test_leave_for_archived_employee_is_404(employee_id, actor):
    employees.archive_employee(employee_id, actor)
    with pytest.raises(NotFoundError):
        time_tracking.submit_leave(leave(employee_id, d(1), d(2)), actor, today=TODAY)


def test_api_leave_overlap(client, headers, employee_id):
    start = date.today() + timedelta(days=30)
    r = client.post("/api/time/leaves", json=leave(employee_id, start, start + timedelta(days=4)), headers=headers)
    assert r.status_code == 201
    rid = r.get_json()["requestId"]

    r = client.post("/api/time/leaves",
                    json=leave(employee_id, start + timedelta(days=2), start + timedelta(days=6)), headers=headers)
    assert r.status_code == 409

    r = client.get(f"/api/time/leaves/{rid}", headers=headers)
    assert r.status_code == 200
    assert len(r.get_json()["validations"]) == 1
    assert client.get("/api/time/leaves/999", headers=headers).status_code == 404
