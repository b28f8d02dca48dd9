"""Create ouvidoria, usuarios_detalhes and settings tables

Revision ID: 0001_ouvidoria
Revises:
Create Date: 2026-03-02 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_ouvidoria'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1) Diretório de usuários da equipe
    op.create_table(
        'usuarios_detalhes',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('display_name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('perfil', sa.String(50), nullable=False, server_default='professor'),
        sa.Column('ativo', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f('ix_usuarios_detalhes_email'), 'usuarios_detalhes', ['email'], unique=True)
    op.create_index(op.f('ix_usuarios_detalhes_perfil'), 'usuarios_detalhes', ['perfil'], unique=False)

    # 2) Chamados (id_usuario_recebimento sem FK: referência fraca ao diretório)
    op.create_table(
        'ouvidoria',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('identificacao_tipo', sa.String(50), nullable=False),
        sa.Column('nome_completo', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('telefone', sa.String(50), nullable=True),
        sa.Column('vinculo', sa.String(100), nullable=True),
        sa.Column('tipo_manifestacao', sa.String(100), nullable=False),
        sa.Column('assunto', sa.String(255), nullable=False),
        sa.Column('mensagem', sa.Text, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('status', sa.String(50), nullable=True, server_default='Enviado'),
        sa.Column('id_usuario_recebimento', sa.String(36), nullable=True),
        sa.Column('reply', sa.Text, nullable=True),
    )
    op.create_index(op.f('ix_ouvidoria_created_at'), 'ouvidoria', ['created_at'], unique=False)
    op.create_index(op.f('ix_ouvidoria_status'), 'ouvidoria', ['status'], unique=False)
    op.create_index(
        op.f('ix_ouvidoria_id_usuario_recebimento'), 'ouvidoria', ['id_usuario_recebimento'], unique=False,
    )

    # 3) Configurações do site (linha única)
    op.create_table(
        'settings',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('nome_site', sa.String(255), nullable=False, server_default='FAFIH'),
        sa.Column('manutencao', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('drmsocial', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('log_ativo', sa.Boolean, nullable=True),
    )
    op.execute("INSERT INTO settings (id, nome_site) VALUES (1, 'FAFIH')")


def downgrade() -> None:
    op.drop_table('settings')
    op.drop_index(op.f('ix_ouvidoria_id_usuario_recebimento'), table_name='ouvidoria')
    op.drop_index(op.f('ix_ouvidoria_status'), table_name='ouvidoria')
    op.drop_index(op.f('ix_ouvidoria_created_at'), table_name='ouvidoria')
    op.drop_table('ouvidoria')
    op.drop_index(op.f('ix_usuarios_detalhes_perfil'), table_name='usuarios_detalhes')
    op.drop_index(op.f('ix_usuarios_detalhes_email'), table_name='usuarios_detalhes')
    op.drop_table('usuarios_detalhes')
