"""Create employees and payroll tables

Revision ID: 20261019_0900
Revises:
Create Date: 2026-10-19 09:00:00.000000

This migration creates the payroll schema:
- employees: Login credentials, names and role
- payroll: One row per trip / pay date with itemized pay components
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_0900'
down_revision = None
branch_labels = None
depends_on = None


employee_role = sa.Enum('admin', 'employee', name='employee_role')
trip_type = sa.Enum('local', 'regional', 'long_haul', 'other', name='trip_type')


def money_column(name: str, **kwargs) -> sa.Column:
    return sa.Column(name, sa.Numeric(precision=12, scale=2), **kwargs)


def upgrade() -> None:
    # ===========================================
    # EMPLOYEES TABLE
    # ===========================================
    op.create_table('employees',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('role', employee_role, nullable=False, server_default='employee'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_employees'),
    )
    op.create_index('ix_employees_email', 'employees', ['email'], unique=True)

    # ===========================================
    # PAYROLL TABLE
    # ===========================================
    op.create_table('payroll',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('employee_id', sa.Integer, nullable=False),

        money_column('base_salary', nullable=False),
        money_column('distance_allowance', nullable=False, server_default='0'),
        money_column('fuel_allowance', nullable=False, server_default='0'),
        money_column('meal_allowance', nullable=False, server_default='0'),
        money_column('other_allowance', nullable=False, server_default='0'),
        money_column('deductions', nullable=False, server_default='0'),
        money_column('net_pay', nullable=False, comment='base_salary + allowances - deductions'),

        sa.Column('pay_period', sa.Date, nullable=False),
        sa.Column('trip_type', trip_type, nullable=True),
        sa.Column('trip_description', sa.String(500), nullable=True),

        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_payroll'),
        sa.ForeignKeyConstraint(
            ['employee_id'], ['employees.id'],
            name='fk_payroll_employee_id_employees',
            ondelete='CASCADE',
        ),
    )
    op.create_index('ix_payroll_employee_id', 'payroll', ['employee_id'])
    op.create_index('ix_payroll_pay_period', 'payroll', ['pay_period'])


def downgrade() -> None:
    op.drop_index('ix_payroll_pay_period', table_name='payroll')
    op.drop_index('ix_payroll_employee_id', table_name='payroll')
    op.drop_table('payroll')
    op.drop_index('ix_employees_email', table_name='employees')
    op.drop_table('employees')
    trip_type.drop(op.get_bind(), checkfirst=True)
    employee_role.drop(op.get_bind(), checkfirst=True)
