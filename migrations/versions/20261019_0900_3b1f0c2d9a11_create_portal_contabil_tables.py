"""create portal contabil tables

Revision ID: 3b1f0c2d9a11
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3b1f0c2d9a11'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Cria empresas, usuários, catálogo de obrigações, rotinas e notificações."""
    op.create_table('empresas',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('nome', sa.String(length=255), nullable=False),
        sa.Column('cnpj', sa.String(length=20), nullable=True),
        sa.Column('razao_social', sa.String(length=255), nullable=True),
        sa.Column('nome_fantasia', sa.String(length=255), nullable=True),
        sa.Column('apelido', sa.String(length=255), nullable=True),
        sa.Column('regime_tributario', sa.String(length=80), nullable=True),
        sa.Column('grupo', sa.String(length=80), nullable=True),
        sa.Column('contato', sa.String(length=100), nullable=True),
        sa.Column('observacoes', sa.Text(), nullable=True),
        sa.Column('ativa', sa.Boolean(), nullable=True),
        sa.Column('obrigacoes', sa.JSON(), nullable=True),
        sa.Column('criado_em', sa.DateTime(timezone=True), nullable=True),
        sa.Column('atualizado_em', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_empresas_cnpj', 'empresas', ['cnpj'], unique=True)

    op.create_table('users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=True),
        sa.Column('full_name', sa.String(length=200), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('empresa_id', sa.String(length=36), nullable=True),
        sa.Column('must_change_password', sa.Boolean(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['empresa_id'], ['empresas.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'], unique=False)

    op.create_table('obrigacoes',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('nome', sa.String(length=255), nullable=False),
        sa.Column('apelido', sa.String(length=100), nullable=True),
        sa.Column('departamento', sa.String(length=50), nullable=True),
        sa.Column('responsavel', sa.String(length=100), nullable=True),
        sa.Column('minutos_previstos', sa.Integer(), nullable=True),
        sa.Column('vencimentos_mensais', sa.JSON(), nullable=True),
        sa.Column('dias_lembrete', sa.Integer(), nullable=True),
        sa.Column('tipo_lembrete', sa.String(length=30), nullable=True),
        sa.Column('regra_dia_nao_util', sa.String(length=60), nullable=True),
        sa.Column('sabado_util', sa.Boolean(), nullable=True),
        sa.Column('regra_competencia', sa.String(length=30), nullable=True),
        sa.Column('requer_robo', sa.Boolean(), nullable=True),
        sa.Column('tem_multa', sa.Boolean(), nullable=True),
        sa.Column('alerta_guia', sa.Boolean(), nullable=True),
        sa.Column('ativa', sa.Boolean(), nullable=True),
        sa.Column('criado_em', sa.DateTime(timezone=True), nullable=True),
        sa.Column('atualizado_em', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_obrigacoes_nome', 'obrigacoes', ['nome'], unique=False)

    op.create_table('rotinas_mensais',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('empresa_id', sa.String(length=36), nullable=False),
        sa.Column('obrigacao_id', sa.String(length=36), nullable=False),
        sa.Column('nome_obrigacao', sa.String(length=255), nullable=True),
        sa.Column('departamento', sa.String(length=50), nullable=True),
        sa.Column('competencia', sa.String(length=7), nullable=False),
        sa.Column('prazo', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('criado_em', sa.DateTime(timezone=True), nullable=True),
        sa.Column('atualizado_em', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['empresa_id'], ['empresas.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['obrigacao_id'], ['obrigacoes.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'empresa_id', 'obrigacao_id', 'competencia',
            name='uq_rotina_empresa_obrigacao_competencia'
        )
    )
    op.create_index('ix_rotinas_mensais_empresa_id', 'rotinas_mensais', ['empresa_id'], unique=False)
    op.create_index('ix_rotinas_mensais_competencia', 'rotinas_mensais', ['competencia'], unique=False)

    op.create_table('notificacoes',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('usuario_id', sa.String(length=36), nullable=False),
        sa.Column('titulo', sa.String(length=255), nullable=False),
        sa.Column('mensagem', sa.Text(), nullable=True),
        sa.Column('lida', sa.Boolean(), nullable=False),
        sa.Column('criado_em', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['usuario_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_notificacoes_usuario_id', 'notificacoes', ['usuario_id'], unique=False)


def downgrade() -> None:
    """Remove as tabelas na ordem inversa das dependências."""
    op.drop_index('ix_notificacoes_usuario_id', table_name='notificacoes')
    op.drop_table('notificacoes')
    op.drop_index('ix_rotinas_mensais_competencia', table_name='rotinas_mensais')
    op.drop_index('ix_rotinas_mensais_empresa_id', table_name='rotinas_mensais')
    op.drop_table('rotinas_mensais')
    op.drop_index('ix_obrigacoes_nome', table_name='obrigacoes')
    op.drop_table('obrigacoes')
    op.drop_index('ix_users_role', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
    op.drop_index('ix_empresas_cnpj', table_name='empresas')
    op.drop_table('empresas')
