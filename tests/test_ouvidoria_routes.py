"""Testes dos endpoints /api/ouvidoria — leitura, atendimento, atualização e resumo."""

from datetime import datetime, timezone

import pytest
from httpx import AsyncClient

from app.application.systems.ouvidoria.resolver import ResponsavelResolver
from app.domain.shared.exceptions import StoreError
from app.domain.systems.ouvidoria.entity import StatusChamado
from app.domain.systems.users.entity import PerfilUsuario
from app.main import app
from app.presentation.api.deps import create_access_token, get_chamado_repo, get_resolver
from tests.conftest import (
    create_chamado,
    create_usuario,
    set_raw_status,
    session_cookie,
)

URL = "/api/ouvidoria"


# ════════════════════════════════════════════════════════════════
# SESSÃO E PERFIS
# ════════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_sem_cookie_retorna_401(client: AsyncClient):
    resp = await client.get(URL)
    assert resp.status_code == 401
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Não autenticado."
    assert body["request_id"]


@pytest.mark.asyncio
async def test_token_invalido_retorna_401(client: AsyncClient):
    resp = await client.get(URL, headers={"Cookie": "ui-admin-token=nao-e-um-jwt"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_token_de_usuario_inexistente_retorna_401(client: AsyncClient):
    token = create_access_token({"sub": "11111111-2222-3333-4444-555555555555"})
    resp = await client.get(URL, headers={"Cookie": f"ui-admin-token={token}"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_usuario_inativo_retorna_401(client: AsyncClient):
    inativo = await create_usuario(PerfilUsuario.ADMIN, "Ex Admin", ativo=False)
    resp = await client.get(URL, headers=session_cookie(inativo))
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_perfil_sem_acesso_retorna_403(client: AsyncClient, professor):
    chamado = await create_chamado()
    for method, params in (("GET", {}), ("PATCH", {"id": chamado.id}), ("POST", {"id": chamado.id})):
        path = URL if method != "POST" else f"{URL}/iniciar-atendimento"
        resp = await client.request(
            method, path, params=params, headers=session_cookie(professor),
            json={"status": "Finalizado"} if method == "PATCH" else None,
        )
        assert resp.status_code == 403, method
        assert resp.json()["message"] == "Acesso negado."

    resp = await client.get(f"{URL}/resumo", headers=session_cookie(professor))
    assert resp.status_code == 403


# ════════════════════════════════════════════════════════════════
# LEITURA
# ════════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_lista_mais_recentes_primeiro(client: AsyncClient, secretaria):
    antigo = await create_chamado(assunto="Antigo", created_at=datetime(2026, 1, 10, tzinfo=timezone.utc))
    novo = await create_chamado(assunto="Novo", created_at=datetime(2026, 2, 10, tzinfo=timezone.utc))

    resp = await client.get(URL, headers=session_cookie(secretaria))
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert [c["id"] for c in body["chamados"]] == [novo.id, antigo.id]
    first = body["chamados"][0]
    assert first["identificacaoTipo"] == "identificado"
    assert first["tipoManifestacao"] == "reclamacao"
    assert first["status"] == "Enviado"
    assert first["responsavelNome"] is None


@pytest.mark.asyncio
async def test_lista_vazia(client: AsyncClient, admin):
    resp = await client.get(URL, headers=session_cookie(admin))
    assert resp.status_code == 200
    assert resp.json()["chamados"] == []


@pytest.mark.asyncio
async def test_filtros_status_e_busca(client: AsyncClient, admin):
    legado = await create_chamado(assunto="Biblioteca fechada")
    await set_raw_status(legado.id, None)
    await create_chamado(assunto="Wi-fi", mensagem="Sem sinal no bloco B", status=StatusChamado.FINALIZADO)

    resp = await client.get(URL, params={"status": "Enviado"}, headers=session_cookie(admin))
    chamados = resp.json()["chamados"]
    # Status nulo no banco é lido como Enviado
    assert [c["id"] for c in chamados] == [legado.id]
    assert chamados[0]["status"] == "Enviado"

    resp = await client.get(URL, params={"search": "biblioteca"}, headers=session_cookie(admin))
    assert [c["assunto"] for c in resp.json()["chamados"]] == ["Biblioteca fechada"]

    resp = await client.get(URL, params={"search": "bloco"}, headers=session_cookie(admin))
    assert [c["assunto"] for c in resp.json()["chamados"]] == ["Wi-fi"]


@pytest.mark.asyncio
async def test_filtro_status_invalido(client: AsyncClient, admin):
    resp = await client.get(URL, params={"status": "Arquivado"}, headers=session_cookie(admin))
    assert resp.status_code == 400
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_detalhe_nao_altera_chamado(client: AsyncClient, secretaria):
    chamado = await create_chamado()

    resp = await client.get(URL, params={"id": chamado.id}, headers=session_cookie(secretaria))
    assert resp.status_code == 200
    assert resp.json()["chamado"]["status"] == "Enviado"

    resp = await client.get(URL, params={"id": chamado.id}, headers=session_cookie(secretaria))
    detalhe = resp.json()["chamado"]
    assert detalhe["status"] == "Enviado"
    assert detalhe["responsavelId"] is None


@pytest.mark.asyncio
async def test_detalhe_inexistente_404(client: AsyncClient, admin):
    resp = await client.get(URL, params={"id": "nao-existe"}, headers=session_cookie(admin))
    assert resp.status_code == 404
    assert resp.json()["message"] == "Chamado não encontrado."


# ════════════════════════════════════════════════════════════════
# INÍCIO DE ATENDIMENTO
# ════════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_iniciar_atendimento_atribui_a_quem_abriu(client: AsyncClient, secretaria, admin):
    chamado = await create_chamado()

    resp = await client.post(
        f"{URL}/iniciar-atendimento", params={"id": chamado.id}, headers=session_cookie(secretaria),
    )
    assert resp.status_code == 200
    body = resp.json()["chamado"]
    assert body["status"] == "Em atendimento"
    assert body["responsavelId"] == secretaria.id
    assert body["responsavelNome"] == "Sérgio Secretaria"

    # Segunda abertura (outra pessoa) não muda nada
    resp = await client.post(
        f"{URL}/iniciar-atendimento", params={"id": chamado.id}, headers=session_cookie(admin),
    )
    assert resp.status_code == 200
    body = resp.json()["chamado"]
    assert body["status"] == "Em atendimento"
    assert body["responsavelId"] == secretaria.id


@pytest.mark.asyncio
async def test_iniciar_atendimento_em_chamado_finalizado_nao_muda(client: AsyncClient, admin):
    chamado = await create_chamado(status=StatusChamado.FINALIZADO)
    resp = await client.post(
        f"{URL}/iniciar-atendimento", params={"id": chamado.id}, headers=session_cookie(admin),
    )
    assert resp.status_code == 200
    assert resp.json()["chamado"]["status"] == "Finalizado"
    assert resp.json()["chamado"]["responsavelId"] is None


@pytest.mark.asyncio
async def test_iniciar_atendimento_status_legado(client: AsyncClient, admin):
    chamado = await create_chamado()
    await set_raw_status(chamado.id, "pendente")
    resp = await client.post(
        f"{URL}/iniciar-atendimento", params={"id": chamado.id}, headers=session_cookie(admin),
    )
    assert resp.json()["chamado"]["status"] == "Em atendimento"


@pytest.mark.asyncio
async def test_iniciar_atendimento_sem_id_e_inexistente(client: AsyncClient, admin):
    resp = await client.post(f"{URL}/iniciar-atendimento", headers=session_cookie(admin))
    assert resp.status_code == 400
    assert resp.json()["message"] == "Informe o ID do chamado."

    resp = await client.post(
        f"{URL}/iniciar-atendimento", params={"id": "nao-existe"}, headers=session_cookie(admin),
    )
    assert resp.status_code == 404


# ════════════════════════════════════════════════════════════════
# ATUALIZAÇÃO
# ════════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_patch_sem_campos_400(client: AsyncClient, admin):
    chamado = await create_chamado()
    resp = await client.patch(URL, params={"id": chamado.id}, json={}, headers=session_cookie(admin))
    assert resp.status_code == 400
    assert resp.json()["message"] == "Informe ao menos um campo para atualizar."


@pytest.mark.asyncio
async def test_patch_sem_id_400(client: AsyncClient, admin):
    resp = await client.patch(URL, json={"status": "Finalizado"}, headers=session_cookie(admin))
    assert resp.status_code == 400
    assert resp.json()["message"] == "Informe o ID do chamado."


@pytest.mark.asyncio
async def test_patch_inexistente_404(client: AsyncClient, admin):
    resp = await client.patch(
        URL, params={"id": "nao-existe"}, json={"status": "Finalizado"}, headers=session_cookie(admin),
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_patch_payload_invalido(client: AsyncClient, admin):
    chamado = await create_chamado()
    headers = {**session_cookie(admin), "Content-Type": "application/json"}

    resp = await client.patch(URL, params={"id": chamado.id}, content=b"{nao json", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Payload inválido."

    resp = await client.patch(
        URL, params={"id": chamado.id}, json={"idUsuarioRecebimento": "abc"}, headers=session_cookie(admin),
    )
    assert resp.status_code == 400
    assert "ID de usuário inválido." in resp.json()["message"]

    resp = await client.patch(
        URL, params={"id": chamado.id}, json={"status": "Arquivado"}, headers=session_cookie(admin),
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_patch_parcial_so_reply(client: AsyncClient, admin, secretaria):
    chamado = await create_chamado(status=StatusChamado.EM_ATENDIMENTO, responsavel_id=secretaria.id)

    resp = await client.patch(
        URL, params={"id": chamado.id}, json={"reply": "<p>Obrigado</p>"}, headers=session_cookie(admin),
    )
    assert resp.status_code == 200
    body = resp.json()["chamado"]
    assert body["reply"] == "<p>Obrigado</p>"
    assert body["status"] == "Em atendimento"
    assert body["responsavelId"] == secretaria.id
    assert body["assunto"] == chamado.assunto


@pytest.mark.asyncio
async def test_patch_reatribui_responsavel(client: AsyncClient, admin, secretaria):
    chamado = await create_chamado(status=StatusChamado.EM_ATENDIMENTO, responsavel_id=admin.id)
    resp = await client.patch(
        URL, params={"id": chamado.id},
        json={"idUsuarioRecebimento": secretaria.id},
        headers=session_cookie(admin),
    )
    body = resp.json()["chamado"]
    assert body["responsavelId"] == secretaria.id
    assert body["responsavelNome"] == "Sérgio Secretaria"


@pytest.mark.asyncio
async def test_patch_status_nao_volta(client: AsyncClient, admin):
    chamado = await create_chamado(status=StatusChamado.FINALIZADO)
    resp = await client.patch(
        URL, params={"id": chamado.id}, json={"status": "Enviado"}, headers=session_cookie(admin),
    )
    assert resp.status_code == 400
    assert "Transição inválida" in resp.json()["message"]

    resp = await client.get(URL, params={"id": chamado.id}, headers=session_cookie(admin))
    assert resp.json()["chamado"]["status"] == "Finalizado"


@pytest.mark.asyncio
async def test_patch_enviado_direto_para_finalizado(client: AsyncClient, admin):
    chamado = await create_chamado()
    resp = await client.patch(
        URL, params={"id": chamado.id}, json={"status": "Finalizado"}, headers=session_cookie(admin),
    )
    assert resp.status_code == 200
    assert resp.json()["chamado"]["status"] == "Finalizado"


# ════════════════════════════════════════════════════════════════
# E-MAIL DE RESPOSTA
# ════════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_resposta_envia_email_ao_manifestante(client: AsyncClient, admin, fake_sender):
    chamado = await create_chamado(assunto="Boleto duplicado", email=" maria@example.com ")

    resp = await client.patch(
        URL, params={"id": chamado.id},
        json={"reply": "<p>Olá &amp; obrigado</p><ul><li>Estorno feito</li></ul>"},
        headers=session_cookie(admin),
    )
    assert resp.status_code == 200

    assert len(fake_sender.sent) == 1
    to, message = fake_sender.sent[0]
    assert to == "maria@example.com"
    assert message.subject == "Resposta à sua solicitação: Boleto duplicado - Ouvidoria FAFIH"
    assert "5 de março de 2026 às 14:30" in message.text
    assert "Olá & obrigado" in message.text
    assert "- Estorno feito" in message.text
    assert "<li>Estorno feito</li>" in message.html


@pytest.mark.asyncio
async def test_resposta_anonima_ou_vazia_nao_envia(client: AsyncClient, admin, fake_sender):
    anonimo = await create_chamado(identificacao_tipo="anonimo", email=None, nome_completo=None)
    identificado = await create_chamado()

    resp = await client.patch(
        URL, params={"id": anonimo.id}, json={"reply": "<p>Resolvido</p>"}, headers=session_cookie(admin),
    )
    assert resp.status_code == 200
    assert resp.json()["chamado"]["reply"] == "<p>Resolvido</p>"

    resp = await client.patch(
        URL, params={"id": identificado.id}, json={"reply": "   "}, headers=session_cookie(admin),
    )
    assert resp.status_code == 200

    assert fake_sender.sent == []


@pytest.mark.asyncio
async def test_falha_no_email_nao_desfaz_resposta(client: AsyncClient, admin, fake_sender):
    fake_sender.fail = True
    chamado = await create_chamado()

    resp = await client.patch(
        URL, params={"id": chamado.id}, json={"reply": "<p>Resolvido</p>"}, headers=session_cookie(admin),
    )
    assert resp.status_code == 200

    resp = await client.get(URL, params={"id": chamado.id}, headers=session_cookie(admin))
    assert resp.json()["chamado"]["reply"] == "<p>Resolvido</p>"


# ════════════════════════════════════════════════════════════════
# RESPONSÁVEIS (best-effort)
# ════════════════════════════════════════════════════════════════

class _DiretorioIndisponivel:
    async def get_display_names(self, ids):
        raise StoreError("Erro ao buscar usuários.")


@pytest.mark.asyncio
async def test_diretorio_indisponivel_nao_quebra_leitura(client: AsyncClient, admin, secretaria):
    chamado = await create_chamado(status=StatusChamado.EM_ATENDIMENTO, responsavel_id=secretaria.id)

    app.dependency_overrides[get_resolver] = lambda: ResponsavelResolver(_DiretorioIndisponivel())
    try:
        resp = await client.get(URL, headers=session_cookie(admin))
    finally:
        app.dependency_overrides.pop(get_resolver, None)

    assert resp.status_code == 200
    item = resp.json()["chamados"][0]
    assert item["id"] == chamado.id
    assert item["responsavelId"] == secretaria.id
    assert item["responsavelNome"] is None


@pytest.mark.asyncio
async def test_responsavel_sem_nome_ou_fora_do_formato(client: AsyncClient, admin):
    sem_nome = await create_usuario(PerfilUsuario.SECRETARIA)
    com_sem_nome = await create_chamado(
        assunto="A", status=StatusChamado.EM_ATENDIMENTO, responsavel_id=sem_nome.id,
        created_at=datetime(2026, 2, 1, tzinfo=timezone.utc),
    )
    legado = await create_chamado(
        assunto="B", status=StatusChamado.EM_ATENDIMENTO, responsavel_id="42",
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )

    resp = await client.get(URL, headers=session_cookie(admin))
    chamados = {c["id"]: c for c in resp.json()["chamados"]}
    assert chamados[com_sem_nome.id]["responsavelNome"] == "Responsável"
    assert chamados[legado.id]["responsavelId"] == "42"
    assert chamados[legado.id]["responsavelNome"] is None


# ════════════════════════════════════════════════════════════════
# CENÁRIO COMPLETO
# ════════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_ciclo_de_vida_completo(client: AsyncClient, secretaria, admin, fake_sender):
    chamado = await create_chamado(assunto="Diploma atrasado")
    staff = session_cookie(secretaria)

    resp = await client.post(f"{URL}/iniciar-atendimento", params={"id": chamado.id}, headers=staff)
    assert resp.json()["chamado"]["status"] == "Em atendimento"

    resp = await client.patch(
        URL, params={"id": chamado.id}, json={"reply": "<p>Seu diploma está pronto.</p>"}, headers=staff,
    )
    assert resp.json()["chamado"]["status"] == "Em atendimento"
    assert len(fake_sender.sent) == 1

    resp = await client.patch(URL, params={"id": chamado.id}, json={"status": "Finalizado"}, headers=staff)
    assert resp.json()["chamado"]["status"] == "Finalizado"
    assert resp.json()["chamado"]["reply"] == "<p>Seu diploma está pronto.</p>"
    # Mudar só o status não reenvia o e-mail
    assert len(fake_sender.sent) == 1

    resp = await client.get(f"{URL}/resumo", headers=session_cookie(admin))
    resumo = resp.json()["resumo"]
    assert resumo["total"] == 1
    assert resumo["naoAtendidos"] == 0


# ════════════════════════════════════════════════════════════════
# RESUMO
# ════════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_resumo_por_status(client: AsyncClient, admin):
    await create_chamado()
    legado = await create_chamado()
    await set_raw_status(legado.id, None)
    await create_chamado(status=StatusChamado.EM_ATENDIMENTO)
    await create_chamado(status=StatusChamado.FINALIZADO)

    resp = await client.get(f"{URL}/resumo", headers=session_cookie(admin))
    assert resp.status_code == 200
    resumo = resp.json()["resumo"]
    assert resumo["total"] == 4
    assert resumo["naoRecebidos"] == 2
    assert resumo["naoAtendidos"] == 3
    assert resumo["porStatus"] == {"Enviado": 2, "Em atendimento": 1, "Finalizado": 1}


# ════════════════════════════════════════════════════════════════
# FALHA DO BANCO
# ════════════════════════════════════════════════════════════════

class _BancoForaDoAr:
    async def list_all(self, **filtros):
        raise StoreError("Erro ao buscar chamados: connection refused em db.interno:5432")


@pytest.mark.asyncio
async def test_falha_do_banco_nao_vaza_detalhes(client: AsyncClient, admin):
    app.dependency_overrides[get_chamado_repo] = lambda: _BancoForaDoAr()
    try:
        resp = await client.get(URL, headers=session_cookie(admin))
    finally:
        app.dependency_overrides.pop(get_chamado_repo, None)

    assert resp.status_code == 500
    body = resp.json()
    assert body == {
        "success": False,
        "message": "Erro interno do servidor",
        "request_id": resp.headers["X-Request-ID"],
    }
    assert "db.interno" not in resp.text
