"""initial schema: users, structure, employees, affectations, time, leave, hr, admin

Revision ID: 3f1a9c2e7b10
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2e7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at():
    return sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now())


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='employe'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # ---- structure ----
    op.create_table(
        'sites',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('nom', sa.String(255), nullable=False),
        sa.Column('code_site', sa.String(50), nullable=False, unique=True),
        sa.Column('adresse', sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_table(
        'departments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('site_id', sa.Integer(), sa.ForeignKey('sites.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('nom', sa.String(255), nullable=False),
        sa.Column('code_interne', sa.String(50), nullable=False, unique=True),
        sa.Column('budget_alloue', sa.Numeric(14, 2), nullable=False, server_default='0'),
        sa.Column('objectifs', sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index('ix_departments_site_id', 'departments', ['site_id'])
    op.create_table(
        'services',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('department_id', sa.Integer(), sa.ForeignKey('departments.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('nom', sa.String(255), nullable=False),
        sa.Column('code_metier', sa.String(50), nullable=False, unique=True),
        _created_at(),
    )
    op.create_index('ix_services_department_id', 'services', ['department_id'])
    op.create_table(
        'teams',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('service_id', sa.Integer(), sa.ForeignKey('services.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('nom', sa.String(255), nullable=False),
        sa.Column('code_equipe', sa.String(50), nullable=True, unique=True),
        sa.Column('specialite', sa.String(255), nullable=True),
        _created_at(),
    )
    op.create_index('ix_teams_service_id', 'teams', ['service_id'])

    # ---- employees ----
    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('matricule', sa.String(50), nullable=False, unique=True),
        sa.Column('nom', sa.String(120), nullable=False),
        sa.Column('prenom', sa.String(120), nullable=False),
        sa.Column('statut', sa.String(16), nullable=False, server_default='Actif'),
        sa.Column('site_id', sa.Integer(), sa.ForeignKey('sites.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('department_id', sa.Integer(), sa.ForeignKey('departments.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('service_id', sa.Integer(), sa.ForeignKey('services.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('team_id', sa.Integer(), sa.ForeignKey('teams.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('position', sa.String(255), nullable=False),
        sa.Column('fonction', sa.String(255), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, unique=True),
        sa.Column('date_fin_contrat', sa.Date(), nullable=True),
        _created_at(),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_emp_site_id', 'employees', ['site_id'])
    op.create_index('ix_emp_dept_id', 'employees', ['department_id'])
    op.create_index('ix_emp_statut', 'employees', ['statut'])

    op.create_table(
        'employee_personal',
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('date_naissance', sa.Date(), nullable=True),
        sa.Column('lieu_naissance', sa.String(120), nullable=True),
        sa.Column('nationalite', sa.String(80), nullable=True),
        sa.Column('genre', sa.String(8), nullable=True),
        sa.Column('nom_jeune_fille', sa.String(120), nullable=True),
        sa.Column('situation_familiale', sa.String(40), nullable=True),
        sa.Column('photo_url', sa.String(255), nullable=True),
    )
    op.create_table(
        'employee_contact',
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('adresse_complete', sa.Text(), nullable=True),
        sa.Column('telephone_principal', sa.String(50), nullable=True),
        sa.Column('telephone_whatsapp', sa.String(50), nullable=True),
        sa.Column('email_personnel', sa.String(255), nullable=True),
        sa.Column('contact_urgence_nom', sa.String(255), nullable=True),
        sa.Column('contact_urgence_telephone', sa.String(50), nullable=True),
    )

    # ---- affectation history ----
    op.create_table(
        'employee_affectations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date_debut', sa.Date(), nullable=False),
        sa.Column('date_fin', sa.Date(), nullable=True),
        sa.Column('motif', sa.String(255), nullable=False),
        sa.Column('commentaire', sa.Text(), nullable=True),
        sa.Column('site_id_ancien', sa.Integer(), sa.ForeignKey('sites.id', ondelete='RESTRICT'), nullable=True),
        sa.Column('department_id_ancien', sa.Integer(), sa.ForeignKey('departments.id', ondelete='RESTRICT'), nullable=True),
        sa.Column('service_id_ancien', sa.Integer(), sa.ForeignKey('services.id', ondelete='RESTRICT'), nullable=True),
        sa.Column('team_id_ancien', sa.Integer(), sa.ForeignKey('teams.id', ondelete='RESTRICT'), nullable=True),
        sa.Column('position_ancienne', sa.String(255), nullable=True),
        sa.Column('fonction_ancienne', sa.String(255), nullable=True),
        sa.Column('site_id_nouveau', sa.Integer(), sa.ForeignKey('sites.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('department_id_nouveau', sa.Integer(), sa.ForeignKey('departments.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('service_id_nouveau', sa.Integer(), sa.ForeignKey('services.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('team_id_nouveau', sa.Integer(), sa.ForeignKey('teams.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('position_nouvelle', sa.String(255), nullable=False),
        sa.Column('fonction_nouvelle', sa.String(255), nullable=False),
        sa.Column('created_by_user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        _created_at(),
    )
    op.create_index('ix_employee_affectations_employee_id', 'employee_affectations', ['employee_id'])
    op.create_index(
        'uq_affectation_open_per_employee', 'employee_affectations', ['employee_id'], unique=True,
        postgresql_where=sa.text('date_fin IS NULL'),
        sqlite_where=sa.text('date_fin IS NULL'),
    )

    # ---- time ----
    op.create_table(
        'jours_feries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('nom', sa.String(120), nullable=False),
        sa.Column('date_feriee', sa.Date(), nullable=False, unique=True),
        sa.Column('type', sa.String(20), nullable=False, server_default='Fixe'),
        sa.Column('recurrent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('majoration_pourcentage', sa.Numeric(5, 2), nullable=False, server_default='60'),
        sa.Column('actif', sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
    )
    op.create_table(
        'attendances',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('date_pointage', sa.Date(), nullable=False),
        sa.Column('heure_entree', sa.Time(), nullable=False),
        sa.Column('heure_sortie', sa.Time(), nullable=True),
        sa.Column('source', sa.String(50), nullable=False, server_default='Manuel'),
        sa.Column('heures_normales', sa.Numeric(5, 2), nullable=True),
        sa.Column('heures_sup_15', sa.Numeric(5, 2), nullable=True),
        sa.Column('heures_sup_40', sa.Numeric(5, 2), nullable=True),
        sa.Column('heures_sup_hors_majoration', sa.Numeric(5, 2), nullable=True),
        sa.Column('majoration_pourcentage', sa.Numeric(5, 2), nullable=True),
        sa.Column('panier_repas_du', sa.Boolean(), nullable=True),
        _created_at(),
        sa.UniqueConstraint('employee_id', 'date_pointage', name='uq_attendance_employee_date'),
    )
    op.create_index('ix_attendances_employee_id', 'attendances', ['employee_id'])

    # ---- leave ----
    op.create_table(
        'leave_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type_conge', sa.String(50), nullable=False),
        sa.Column('date_debut', sa.Date(), nullable=False),
        sa.Column('date_fin', sa.Date(), nullable=False),
        sa.Column('nb_jours', sa.Numeric(5, 2), nullable=False),
        sa.Column('motif_employe', sa.Text(), nullable=True),
        sa.Column('statut_actuel', sa.String(20), nullable=False, server_default='Soumis'),
        _created_at(),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_leave_requests_employee_id', 'leave_requests', ['employee_id'])
    op.create_table(
        'leave_validations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('request_id', sa.Integer(), sa.ForeignKey('leave_requests.id', ondelete='CASCADE'), nullable=False),
        sa.Column('validateur_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('niveau_validation', sa.String(50), nullable=False),
        sa.Column('decision', sa.String(20), nullable=False),
        sa.Column('commentaire', sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index('ix_leave_validations_request_id', 'leave_validations', ['request_id'])

    # ---- hr cases ----
    op.create_table(
        'contracts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('type_contrat', sa.String(20), nullable=False),
        sa.Column('date_debut', sa.Date(), nullable=False),
        sa.Column('date_fin_prevue', sa.Date(), nullable=True),
        sa.Column('date_fin_effective', sa.Date(), nullable=True),
        sa.Column('position', sa.String(255), nullable=False),
        sa.Column('salaire_de_base', sa.Numeric(14, 2), nullable=False),
        sa.Column('notes_rh', sa.Text(), nullable=True),
        sa.Column('document_url', sa.String(255), nullable=True),
        sa.Column('is_avenant', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('parent_contract_id', sa.Integer(), sa.ForeignKey('contracts.id', ondelete='RESTRICT'), nullable=True),
        sa.Column('statut', sa.String(20), nullable=False, server_default='Actif'),
        sa.Column('created_by_user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        _created_at(),
    )
    op.create_index('ix_contracts_employee_id', 'contracts', ['employee_id'])
    op.create_index('ix_contract_emp_statut', 'contracts', ['employee_id', 'statut', 'is_avenant'])

    op.create_table(
        'sanctions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('type_sanction', sa.String(40), nullable=False),
        sa.Column('date_constatation', sa.Date(), nullable=False),
        sa.Column('date_effet', sa.Date(), nullable=False),
        sa.Column('jours_mise_a_pied', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('motif_detaille', sa.Text(), nullable=False),
        sa.Column('procedure_suivie', sa.String(255), nullable=True),
        sa.Column('document_url', sa.String(255), nullable=True),
        sa.Column('created_by_user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        _created_at(),
    )
    op.create_index('ix_sanctions_employee_id', 'sanctions', ['employee_id'])

    op.create_table(
        'medical_visits',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('type_visite', sa.String(20), nullable=False),
        sa.Column('date_visite', sa.Date(), nullable=False),
        sa.Column('medecin', sa.String(255), nullable=True),
        sa.Column('resultat', sa.String(30), nullable=False),
        sa.Column('date_prochaine_visite', sa.Date(), nullable=True),
        sa.Column('observations', sa.Text(), nullable=True),
        sa.Column('created_by_user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        _created_at(),
    )
    op.create_index('ix_medical_visits_employee_id', 'medical_visits', ['employee_id'])

    op.create_table(
        'work_accidents',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('date_accident', sa.Date(), nullable=False),
        sa.Column('lieu', sa.String(255), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('gravite', sa.String(20), nullable=False),
        sa.Column('arret_travail', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('date_debut_arret', sa.Date(), nullable=True),
        sa.Column('date_fin_arret', sa.Date(), nullable=True),
        sa.Column('jours_arret', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('declared_by_user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        _created_at(),
    )
    op.create_index('ix_work_accidents_employee_id', 'work_accidents', ['employee_id'])

    # ---- admin ----
    op.create_table(
        'documents',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type_document', sa.String(100), nullable=False),
        sa.Column('nom_fichier', sa.String(255), nullable=False),
        sa.Column('chemin_stockage', sa.String(255), nullable=False),
        sa.Column('date_enregistrement', sa.Date(), nullable=False),
        sa.Column('date_expiration', sa.Date(), nullable=True),
        sa.Column('statut_alerte', sa.String(20), nullable=False, server_default='OK'),
        sa.Column('created_by_user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        _created_at(),
    )
    op.create_index('ix_documents_employee_id', 'documents', ['employee_id'])
    op.create_table(
        'alerts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('type_alerte', sa.String(50), nullable=False),
        sa.Column('message_detaille', sa.Text(), nullable=False),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='SET NULL'), nullable=True),
        sa.Column('date_echeance', sa.Date(), nullable=True),
        sa.Column('gravite', sa.String(20), nullable=False, server_default='Moyenne'),
        sa.Column('statut', sa.String(20), nullable=False, server_default='Ouvert'),
        sa.Column('assignee_user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        _created_at(),
    )
    op.create_index('ix_alerts_employee_id', 'alerts', ['employee_id'])


def downgrade() -> None:
    for table in (
        'alerts', 'documents',
        'work_accidents', 'medical_visits', 'sanctions', 'contracts',
        'leave_validations', 'leave_requests',
        'attendances', 'jours_feries',
        'employee_affectations', 'employee_contact', 'employee_personal', 'employees',
        'teams', 'services', 'departments', 'sites',
        'users',
    ):
        op.drop_table(table)
