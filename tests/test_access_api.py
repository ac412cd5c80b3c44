"""
tests.test_access_api

HTTP surface: health probes, dev tokens, access evaluation and master-gated
profile administration.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from axioma_access.access.models import ModuleId, Role
from axioma_access.api.app import create_app
from axioma_access.auth.jwt import JwtConfig, issue_token
from axioma_access.db.repositories.profiles import ProfileRepo
from axioma_access.settings import Settings


@dataclass
class Harness:
    app: FastAPI
    client: httpx.AsyncClient
    settings: Settings

    def auth(self, principal_id: str) -> dict[str, str]:
        token = issue_token(cfg=JwtConfig.from_settings(self.settings), subject=principal_id)
        return {"Authorization": f"Bearer {token}"}

    async def seed(self, user_id: str, role: Role, **kwargs) -> None:
        async with self.app.state.sessionmaker() as session:
            await ProfileRepo(session).create(user_id=user_id, role=role, **kwargs)
            await session.commit()


@pytest_asyncio.fixture
async def harness(tmp_path) -> AsyncIterator[Harness]:
    settings = Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        jwt_secret="api-test-secret",
    )
    app = create_app(settings=settings)
    # httpx ASGITransport does not run lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield Harness(app=app, client=client, settings=settings)


@pytest.mark.asyncio
async def test_health_endpoints(harness: Harness) -> None:
    r = await harness.client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert "x-request-id" in r.headers

    r = await harness.client.get("/readyz")
    assert r.status_code == 200
    assert r.json()["status"] == "ready"


@pytest.mark.asyncio
async def test_dev_token_round_trip(harness: Harness) -> None:
    await harness.seed("aud-1", Role.auditor, approved=True)

    r = await harness.client.post("/v1/dev/token", json={"principal_id": "aud-1"})
    assert r.status_code == 200
    token = r.json()["access_token"]

    r = await harness.client.get(
        "/v1/access/routes",
        params={"path": "/auditoria"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert r.json()["verdict"] == "allow"


@pytest.mark.asyncio
async def test_anonymous_visitor_redirected_to_login_with_return_path(harness: Harness) -> None:
    r = await harness.client.post(
        "/v1/access/evaluate",
        json={"allowed_roles": ["auditor"], "requested_path": "/auditoria"},
    )

    assert r.status_code == 200
    assert r.json() == {
        "verdict": "deny_no_session",
        "allowed": False,
        "redirect": {"kind": "login", "path": "/auth", "return_to": "/auditoria"},
        "notification": None,
    }


@pytest.mark.asyncio
async def test_invalid_token_is_anonymous(harness: Harness) -> None:
    r = await harness.client.get(
        "/v1/access/routes",
        params={"path": "/dashboard"},
        headers={"Authorization": "Bearer nope"},
    )
    assert r.json()["verdict"] == "deny_no_session"


@pytest.mark.asyncio
async def test_session_only_route_allows_without_profile(harness: Harness) -> None:
    r = await harness.client.get(
        "/v1/access/routes", params={"path": "/dashboard"}, headers=harness.auth("no-profile")
    )
    assert r.json() == {"verdict": "allow", "allowed": True, "redirect": None, "notification": None}


@pytest.mark.asyncio
async def test_role_mismatch_and_missing_profile_look_identical(harness: Harness) -> None:
    await harness.seed("emp-1", Role.empresa, approved=True)

    mismatch = await harness.client.get(
        "/v1/access/routes", params={"path": "/auditoria"}, headers=harness.auth("emp-1")
    )
    missing = await harness.client.get(
        "/v1/access/routes", params={"path": "/auditoria"}, headers=harness.auth("ghost")
    )

    assert mismatch.json()["verdict"] == "deny_role_mismatch"
    assert missing.json()["verdict"] == "deny_lookup_failed"
    for body in (mismatch.json(), missing.json()):
        assert body["redirect"] == {"kind": "dashboard", "path": "/dashboard", "return_to": None}
        assert body["notification"] == {
            "category": "access_denied",
            "message": "Acesso negado para esta modalidade.",
        }


@pytest.mark.asyncio
async def test_module_route_upgrade_redirect(harness: Harness) -> None:
    await harness.seed(
        "owner-1",
        Role.proprietario,
        approved=True,
        active_modules={ModuleId.gestao_riscos: False},
    )

    r = await harness.client.get(
        "/v1/access/routes", params={"path": "/riscos"}, headers=harness.auth("owner-1")
    )

    body = r.json()
    assert body["verdict"] == "deny_module_not_entitled"
    assert body["redirect"]["kind"] == "upgrade"
    assert body["redirect"]["path"] == "/upgrade"
    assert body["notification"]["category"] == "module_not_purchased"


@pytest.mark.asyncio
async def test_unapproved_user_awaits_approval(harness: Harness) -> None:
    await harness.seed("emp-2", Role.empresa, approved=False)

    r = await harness.client.post(
        "/v1/access/evaluate",
        json={"allowed_roles": ["empresa", "total_quality_iso"]},
        headers=harness.auth("emp-2"),
    )

    assert r.json()["verdict"] == "deny_not_approved"
    assert r.json()["notification"]["category"] == "awaiting_approval"


@pytest.mark.asyncio
async def test_unknown_role_or_route_rejected(harness: Harness) -> None:
    r = await harness.client.post("/v1/access/evaluate", json={"allowed_roles": ["auditr"]})
    assert r.status_code == 422

    r = await harness.client.post("/v1/access/evaluate", json={"required_module": "crm"})
    assert r.status_code == 422

    r = await harness.client.get(
        "/v1/access/routes", params={"path": "/nowhere"}, headers=harness.auth("x")
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_admin_routes_require_master(harness: Harness) -> None:
    await harness.seed("owner-2", Role.proprietario, approved=True)

    r = await harness.client.get("/v1/admin/profiles/owner-2")
    assert r.status_code == 401
    assert r.json()["detail"] == {
        "verdict": "deny_no_session",
        "redirect": "/auth",
        "return_to": "/admin",
    }

    r = await harness.client.get("/v1/admin/profiles/owner-2", headers=harness.auth("owner-2"))
    assert r.status_code == 403
    assert r.json()["detail"] == {
        "verdict": "deny_role_mismatch",
        "redirect": "/dashboard",
        "return_to": None,
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path", ["https://evil.example", "//evil.example", "/\\evil.example", "auditoria", ""]
)
async def test_off_site_requested_paths_rejected(harness: Harness, path: str) -> None:
    r = await harness.client.post(
        "/v1/access/evaluate", json={"allowed_roles": ["auditor"], "requested_path": path}
    )
    assert r.status_code == 422

    r = await harness.client.get("/v1/access/routes", params={"path": path})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_same_site_requested_paths_accepted(harness: Harness) -> None:
    for path in ("/", "/auditoria", "/riscos/relatorio?aba=2"):
        r = await harness.client.post(
            "/v1/access/evaluate", json={"allowed_roles": ["auditor"], "requested_path": path}
        )
        assert r.status_code == 200
        assert r.json()["redirect"]["return_to"] == path


@pytest.mark.asyncio
async def test_unapproved_master_administers_profiles(harness: Harness) -> None:
    await harness.seed("root", Role.master, approved=False)
    headers = harness.auth("root")

    r = await harness.client.post(
        "/v1/admin/profiles",
        json={"user_id": "new-1", "role": "empresa"},
        headers=headers,
    )
    assert r.status_code == 201
    assert r.json()["approved"] is False

    r = await harness.client.post(
        "/v1/admin/profiles", json={"user_id": "new-1", "role": "empresa"}, headers=headers
    )
    assert r.status_code == 409

    # Before approval the new user is held back from /documentos.
    r = await harness.client.get(
        "/v1/access/routes", params={"path": "/documentos"}, headers=harness.auth("new-1")
    )
    assert r.json()["verdict"] == "deny_not_approved"

    r = await harness.client.put(
        "/v1/admin/profiles/new-1/approval", json={"approved": True}, headers=headers
    )
    assert r.json()["approved"] is True

    r = await harness.client.get(
        "/v1/access/routes", params={"path": "/documentos"}, headers=harness.auth("new-1")
    )
    assert r.json()["verdict"] == "allow"

    r = await harness.client.put(
        "/v1/admin/profiles/new-1/role", json={"role": "proprietario"}, headers=headers
    )
    assert r.json()["role"] == "proprietario"

    r = await harness.client.put(
        "/v1/admin/profiles/new-1/modules/nps", json={"entitled": True}, headers=headers
    )
    assert r.json()["active_modules"] == {"nps": True}

    r = await harness.client.get(
        "/v1/access/routes", params={"path": "/nps"}, headers=harness.auth("new-1")
    )
    assert r.json()["verdict"] == "allow"

    r = await harness.client.put(
        "/v1/admin/profiles/missing/approval", json={"approved": True}, headers=headers
    )
    assert r.status_code == 404
