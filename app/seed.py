"""
Seed script — cria o usuário admin da equipe e a linha de settings.

Uso:
    python -m app.seed

Idempotente: não recria o que já existe. Imprime um token de sessão de
desenvolvimento para o cookie ``ui-admin-token``.
"""

import asyncio

from sqlalchemy import select

from app.domain.systems.users.entity import PerfilUsuario, Usuario
from app.infrastructure.config import get_settings
from app.infrastructure.database.models import SettingsModel, UsuarioDetalhesModel
from app.infrastructure.database.session import AsyncSessionLocal
from app.infrastructure.systems.settings.repository import SETTINGS_ID
from app.infrastructure.systems.users.repository import UsuarioRepository
from app.presentation.api.deps import create_access_token

settings = get_settings()

ADMIN_NAME = "Administrador"
ADMIN_EMAIL = "admin@fafih.edu.br"


async def seed() -> None:
    async with AsyncSessionLocal() as session:
        repo = UsuarioRepository(session)

        result = await session.execute(
            select(UsuarioDetalhesModel.id).where(UsuarioDetalhesModel.email == ADMIN_EMAIL)
        )
        admin_id = result.scalar_one_or_none()
        if admin_id:
            print(f"ℹ️  Admin '{ADMIN_EMAIL}' já existe (id={admin_id}).")
        else:
            created = await repo.create(Usuario(
                display_name=ADMIN_NAME,
                email=ADMIN_EMAIL,
                perfil=PerfilUsuario.ADMIN,
            ))
            admin_id = created.id
            print(f"✅ Admin criado: {ADMIN_EMAIL} (id={admin_id})")

        if await session.get(SettingsModel, SETTINGS_ID) is None:
            session.add(SettingsModel(id=SETTINGS_ID, nome_site="FAFIH"))
            print("✅ Settings iniciais criadas")

        await session.commit()

    token = create_access_token({"sub": admin_id})
    print(f"\n🔑 Cookie {settings.AUTH_COOKIE_NAME} (dev):\n{token}")


def main():
    asyncio.run(seed())


if __name__ == "__main__":
    main()
