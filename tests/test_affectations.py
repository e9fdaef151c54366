from datetime import date, timedelta

import pytest

from sogas_rh.common.errors import ConflictError, NotFoundError, ValidationError
from sogas_rh.extensions import db
from sogas_rh.models.affectation import EmployeeAffectation
from sogas_rh.models.employee import Employee
from sogas_rh.services import affectations, employees

from conftest import HIRE_DATE, employee_payload, make_user


def _records(emp_id):
    return affectations.history(emp_id)


def _open(emp_id):
    return [r for r in _records(emp_id) if r.date_fin is None]


def test_hire_opens_single_record(employee_id, structure):
    recs = _records(employee_id)
    assert len(recs) == 1
    r = recs[0]
    assert r.motif == "Embauche initiale"
    assert r.date_debut == HIRE_DATE
    assert r.date_fin is None
    assert r.site_id_ancien is None and r.position_ancienne is None
    assert r.team_id_nouveau == structure[1]["team_id"]
    assert r.position_nouvelle == "Technicienne"


def test_position_change_closes_previous_and_opens_new(employee_id, actor):
    day = date(2026, 3, 2)
    moved = employees.update_employee(
        employee_id, {"position": "Chef d'équipe", "motif_changement": "Promotion"}, actor, today=day
    )
    assert moved is True

    first, second = _records(employee_id)
    assert first.date_fin == day - timedelta(days=1)
    assert "Affectation terminée suite à: Promotion" in first.commentaire
    assert second.date_debut == day and second.date_fin is None
    assert second.motif == "Promotion"
    assert second.position_ancienne == "Technicienne"
    assert second.position_nouvelle == "Chef d'équipe"
    # untouched placement fields carry over
    assert second.site_id_nouveau == first.site_id_nouveau
    assert db.session.get(Employee, employee_id).position == "Chef d'équipe"


def test_n_changes_give_n_plus_one_continuous_records(employee_id, actor, structure):
    steps = [
        (date(2026, 2, 1), {"position": "Superviseur"}),
        (date(2026, 3, 1), dict(structure[2])),
        (date(2026, 4, 1), {"fonction": "Exploitation", "team_id": structure[2]["team_id"]}),
    ]
    for day, change in steps:
        employees.update_employee(employee_id, {**change, "motif_changement": "Réorganisation"}, actor, today=day)

    recs = _records(employee_id)
    assert len(recs) == len(steps) + 1
    assert len(_open(employee_id)) == 1
    for prev, nxt in zip(recs, recs[1:]):
        assert prev.date_fin + timedelta(days=1) == nxt.date_debut
        assert prev.site_id_nouveau == nxt.site_id_ancien
        assert prev.team_id_nouveau == nxt.team_id_ancien
        assert prev.position_nouvelle == nxt.position_ancienne
        assert prev.fonction_nouvelle == nxt.fonction_ancienne


def test_missing_motif_rejected_without_write(employee_id, actor):
    with pytest.raises(ValidationError):
        employees.update_employee(employee_id, {"position": "Directeur"}, actor)
    assert len(_records(employee_id)) == 1
    assert db.session.get(Employee, employee_id).position == "Technicienne"


def test_non_placement_update_keeps_history(employee_id, actor):
    moved = employees.update_employee(employee_id, {"nom": "Ndiaye", "telephone_whatsapp": "+221780000000"}, actor)
    assert moved is False
    assert len(_records(employee_id)) == 1
    emp = db.session.get(Employee, employee_id)
    assert emp.nom == "Ndiaye"
    assert emp.contact.telephone_whatsapp == "+221780000000"


def test_same_value_is_not_a_change(employee_id, actor):
    assert employees.update_employee(employee_id, {"position": "Technicienne"}, actor) is False
    assert len(_records(employee_id)) == 1


def test_change_to_unknown_structure_is_404(employee_id, actor):
    with pytest.raises(NotFoundError):
        employees.update_employee(employee_id, {"team_id": 9999, "motif_changement": "Mutation"}, actor)
    assert len(_records(employee_id)) == 1


def test_archive_closes_history_and_severs_user(structure, actor):
    user = make_user("awa@sogas.sn")
    emp_id = employees.create_employee(employee_payload(structure[1], user_id=user.id), actor, today=HIRE_DATE)
    day = date(2026, 6, 30)

    employees.archive_employee(emp_id, actor, today=day)

    emp = db.session.get(Employee, emp_id)
    assert emp.statut == "Licencié"
    assert emp.user_id is None
    (rec,) = _records(emp_id)
    assert rec.date_fin == day
    assert _open(emp_id) == []


def test_second_archive_is_404(employee_id, actor):
    employees.archive_employee(employee_id, actor)
    with pytest.raises(NotFoundError):
        employees.archive_employee(employee_id, actor)


def test_status_update_cannot_archive(employee_id, actor):
    with pytest.raises(ValidationError):
        employees.update_employee(employee_id, {"statut": "Licencié"}, actor)
    assert db.session.get(Employee, employee_id).statut == "Actif"
    assert len(_open(employee_id)) == 1

    employees.archive_employee(employee_id, actor, today=date(2026, 3, 1))
    assert _open(employee_id) == []


def test_archived_employee_placement_is_frozen(employee_id, actor):
    employees.archive_employee(employee_id, actor, today=date(2026, 3, 1))

    with pytest.raises(ConflictError):
        employees.update_employee(employee_id, {"position": "Directeur", "motif_changement": "Nomination"},
                                  actor, today=date(2026, 4, 1))
    with pytest.raises(ConflictError):
        employees.update_employee(employee_id, {"statut": "Actif"}, actor)
    assert _open(employee_id) == []
    assert len(_records(employee_id)) == 1

    # identity fields stay editable
    assert employees.update_employee(employee_id, {"prenom": "Aminata"}, actor) is False
    assert db.session.get(Employee, employee_id).prenom == "Aminata"


def test_archive_before_current_record_start_is_400(employee_id, actor):
    with pytest.raises(ValidationError):
        employees.archive_employee(employee_id, actor, today=HIRE_DATE - timedelta(days=1))
    assert db.session.get(Employee, employee_id).statut == "Actif"
    assert len(_open(employee_id)) == 1


def test_open_record_index_blocks_second_open_row(employee_id, structure):
    from sqlalchemy.exc import IntegrityError

    db.session.add(EmployeeAffectation(
        employee_id=employee_id, date_debut=date(2026, 2, 1), motif="Doublon",
        site_id_nouveau=structure[1]["site_id"], department_id_nouveau=structure[1]["department_id"],
        service_id_nouveau=structure[1]["service_id"], team_id_nouveau=structure[1]["team_id"],
        position_nouvelle="X", fonction_nouvelle="Y",
    ))
    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()


# ---------- through the API ----------
def test_api_update_without_motif_is_400(client, headers, employee_id):
    r = client.put(f"/api/employee/{employee_id}", json={"position": "Directeur"}, headers=headers)
    assert r.status_code == 400
    assert "Motif" in r.get_json()["message"]
    r = client.get(f"/api/employee/{employee_id}/affectations", headers=headers)
    assert len(r.get_json()["data"]) == 1


def test_api_update_reports_affectation_change(client, headers, employee_id):
    r = client.put(f"/api/employee/{employee_id}",
                   json={"position": "Directeur", "motif_changement": "Nomination"}, headers=headers)
    assert r.status_code == 200
    assert r.get_json()["affectationChanged"] is True

    r = client.put(f"/api/employee/{employee_id}", json={"prenom": "Aminata"}, headers=headers)
    assert r.get_json()["affectationChanged"] is False

    hist = client.get(f"/api/employee/{employee_id}/affectations", headers=headers).get_json()["data"]
    assert [h["motif"] for h in hist] == ["Embauche initiale", "Nomination"]


def test_api_archive_twice(client, headers, employee_id):
    assert client.delete(f"/api/employee/{employee_id}", headers=headers).status_code == 200
    r = client.delete(f"/api/employee/{employee_id}", headers=headers)
    assert r.status_code == 404
    assert r.get_json()["message"]


def test_api_status_licencie_points_to_delete(client, headers, employee_id):
    r = client.put(f"/api/employee/{employee_id}", json={"statut": "Licencié"}, headers=headers)
    assert r.status_code == 400
    assert "DELETE" in r.get_json()["message"]
    assert client.delete(f"/api/employee/{employee_id}", headers=headers).status_code == 200


def test_api_update_archived_placement_is_409(client, headers, employee_id):
    assert client.delete(f"/api/employee/{employee_id}", headers=headers).status_code == 200
    r = client.put(f"/api/employee/{employee_id}",
                   json={"position": "Directeur", "motif_changement": "Nomination"}, headers=headers)
    assert r.status_code == 409
    hist = client.get(f"/api/employee/{employee_id}/affectations", headers=headers).get_json()["data"]
    assert all(h["date_fin"] for h in hist)
