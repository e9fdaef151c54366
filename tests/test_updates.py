from sogas_rh.common.updates import changed_fields, compile_update
from sogas_rh.models.employee import Employee, EmployeeContact, EmployeePersonal


def test_fields_follow_table_order():
    changes = {"fonction": "b", "nom": "a", "genre": "F", "unknown": 1}
    assert changed_fields(Employee, changes) == ["nom", "fonction"]
    assert changed_fields(EmployeePersonal, changes) == ["genre"]


def test_compile_update_is_deterministic(app):
    a = compile_update(Employee, "id", 7, {"position": "x", "nom": "y"})
    b = compile_update(Employee, "id", 7, {"nom": "y", "position": "x"})
    assert str(a) == str(b)
    assert str(a).index("nom") < str(a).index("position")


def test_compile_update_none_when_nothing_applies(app):
    assert compile_update(EmployeeContact, "employee_id", 1, {"nom": "x"}) is None
