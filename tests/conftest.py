"""
Fixtures de teste — client HTTP + banco SQLite async.

Usa SQLite para testes rápidos sem Docker. O lifespan não roda sob
ASGITransport, então os handlers de eventos são registrados aqui com um
remetente de e-mail falso.
"""

from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.application.shared.event_dispatcher import clear_handlers
from app.application.shared.event_handlers import register_all_handlers
from app.application.systems.ouvidoria.reply_dispatcher import ReplyDispatcher
from app.domain.systems.ouvidoria.entity import Chamado, StatusChamado
from app.domain.systems.users.entity import PerfilUsuario, Usuario
from app.infrastructure.config import get_settings
from app.infrastructure.database.models import OuvidoriaModel, SettingsModel
from app.infrastructure.database.session import Base, get_db
from app.infrastructure.services.email_service import EmailDeliveryError, EmailMessage
from app.infrastructure.systems.ouvidoria.repository import ChamadoRepository
from app.infrastructure.systems.users.repository import UsuarioRepository
from app.main import app
from app.presentation.api.deps import create_access_token

# ── SQLite async para testes ──
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionLocal = async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)

settings = get_settings()


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# Override dependency
app.dependency_overrides[get_db] = override_get_db


class FakeEmailSender:
    """Guarda as mensagens em memória; ``fail=True`` simula o provedor recusando."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, EmailMessage]] = []
        self.fail = False

    async def send(self, to: str, message: EmailMessage) -> None:
        if self.fail:
            raise EmailDeliveryError("domínio não verificado", status_code=403)
        self.sent.append((to, message))


@pytest_asyncio.fixture
async def fake_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest_asyncio.fixture(autouse=True)
async def setup_db(fake_sender: FakeEmailSender):
    """Cria/destrói tabelas e registra os handlers antes/depois de cada teste."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    clear_handlers()
    register_all_handlers(ReplyDispatcher(fake_sender))
    yield
    clear_handlers()
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ════════════════════════════════════════════════════════════════
# HELPERS
# ════════════════════════════════════════════════════════════════

async def create_usuario(
    perfil: PerfilUsuario,
    display_name: Optional[str] = None,
    email: Optional[str] = None,
    ativo: bool = True,
) -> Usuario:
    async with TestSessionLocal() as session:
        usuario = await UsuarioRepository(session).create(Usuario(
            display_name=display_name,
            email=email,
            perfil=perfil,
            ativo=ativo,
        ))
        await session.commit()
    return usuario


async def create_chamado(
    *,
    identificacao_tipo: str = "identificado",
    email: Optional[str] = "maria@example.com",
    assunto: str = "Atendimento na secretaria",
    mensagem: str = "Fiquei duas horas na fila.",
    nome_completo: Optional[str] = "Maria Souza",
    status: StatusChamado = StatusChamado.ENVIADO,
    responsavel_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Chamado:
    async with TestSessionLocal() as session:
        chamado = await ChamadoRepository(session).create(Chamado(
            identificacao_tipo=identificacao_tipo,
            nome_completo=nome_completo,
            email=email,
            vinculo="aluno",
            tipo_manifestacao="reclamacao",
            assunto=assunto,
            mensagem=mensagem,
            status=status,
            responsavel_id=responsavel_id,
            created_at=created_at or datetime(2026, 3, 5, 17, 30, tzinfo=timezone.utc),
        ))
        await session.commit()
    return chamado


async def set_raw_status(chamado_id: str, raw_status: Optional[str]) -> None:
    """Grava um status fora do enum (registros legados)."""
    async with TestSessionLocal() as session:
        await session.execute(
            update(OuvidoriaModel).where(OuvidoriaModel.id == chamado_id).values(status=raw_status)
        )
        await session.commit()


async def create_site_settings(**values) -> None:
    async with TestSessionLocal() as session:
        session.add(SettingsModel(id=1, **values))
        await session.commit()


def session_cookie(usuario: Usuario) -> dict:
    token = create_access_token({"sub": usuario.id})
    return {"Cookie": f"{settings.AUTH_COOKIE_NAME}={token}"}


# ════════════════════════════════════════════════════════════════
# USUÁRIOS
# ════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def admin() -> Usuario:
    return await create_usuario(PerfilUsuario.ADMIN, "Ana Admin", "ana@fafih.edu.br")


@pytest_asyncio.fixture
async def secretaria() -> Usuario:
    return await create_usuario(PerfilUsuario.SECRETARIA, "Sérgio Secretaria", "sergio@fafih.edu.br")


@pytest_asyncio.fixture
async def professor() -> Usuario:
    return await create_usuario(PerfilUsuario.PROFESSOR, "Paula Professora", "paula@fafih.edu.br")
