"""
axioma_access.access.models

Access-control domain models.

Responsibilities:
- Closed enums for roles, purchasable modules, verdicts and redirect kinds.
- Immutable value types for profile records, resource policies and decisions.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

PrincipalId = str


class Role(enum.StrEnum):
    master = "master"
    proprietario = "proprietario"
    auditor = "auditor"
    empresa = "empresa"
    secretaria = "secretaria"
    treinador = "treinador"
    recepcionista = "recepcionista"
    manutencao = "manutencao"
    estacionamento = "estacionamento"
    # Platform-admin category.
    total_quality_iso = "total_quality_iso"


class ModuleId(enum.StrEnum):
    axioma_mercado = "axioma_mercado"
    axioma_estatistica = "axioma_estatistica"
    gestao_riscos = "gestao_riscos"
    nps = "nps"
    manutencao = "manutencao"


class Verdict(enum.StrEnum):
    allow = "allow"
    deny_no_session = "deny_no_session"
    deny_not_approved = "deny_not_approved"
    deny_role_mismatch = "deny_role_mismatch"
    deny_module_not_entitled = "deny_module_not_entitled"
    deny_lookup_failed = "deny_lookup_failed"


class RedirectKind(enum.StrEnum):
    login = "login"
    dashboard = "dashboard"
    upgrade = "upgrade"


@dataclass(frozen=True, slots=True)
class Session:
    """
    An already-resolved session. Only the principal id matters for authorization.
    """

    principal_id: PrincipalId


@dataclass(frozen=True, slots=True)
class ProfileRecord:
    """
    Authorization-relevant attributes of a principal.
    """

    role: Role
    approved: bool
    entitled_modules: Mapping[ModuleId, bool] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "entitled_modules", MappingProxyType(dict(self.entitled_modules)))

    def __hash__(self) -> int:
        # mappingproxy is unhashable; hash its items instead.
        return hash((self.role, self.approved, frozenset(self.entitled_modules.items())))

    def is_entitled(self, module: ModuleId) -> bool:
        # Absent entries and non-True values are not entitled.
        return self.entitled_modules.get(module) is True


def _coerce_roles(roles: Iterable[Role | str] | None) -> frozenset[Role] | None:
    if roles is None:
        return None
    coerced = frozenset(Role(r) for r in roles)
    return coerced or None


@dataclass(frozen=True, slots=True)
class ResourcePolicy:
    """
    Static authorization requirement declared by a protected view.

    Role and module strings are coerced to their enums; an unknown value raises
    ValueError at declaration time. An empty role set means "no role restriction".
    """

    allowed_roles: frozenset[Role] | None = None
    required_module: ModuleId | None = None

    def __init__(
        self,
        allowed_roles: Iterable[Role | str] | None = None,
        required_module: ModuleId | str | None = None,
    ) -> None:
        object.__setattr__(self, "allowed_roles", _coerce_roles(allowed_roles))
        object.__setattr__(
            self,
            "required_module",
            ModuleId(required_module) if required_module is not None else None,
        )

    @property
    def requires_profile(self) -> bool:
        return self.allowed_roles is not None or self.required_module is not None


@dataclass(frozen=True, slots=True)
class RedirectTarget:
    kind: RedirectKind
    path: str
    # Originally requested destination; only carried on login redirects.
    return_to: str | None = None


@dataclass(frozen=True, slots=True)
class Decision:
    verdict: Verdict
    redirect: RedirectTarget | None = None

    @property
    def allowed(self) -> bool:
        return self.verdict is Verdict.allow


# --- Module Notes -----------------------------------------------------------
# Roles and modules are stored as raw strings in the profile table; conversion to
# these enums happens in the profile store so malformed rows fail closed there.
