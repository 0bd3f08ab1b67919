"""Logical font roles and their chained fallback resolution.

Each role names an optional decorative resource and either a standard
font or another role to fall back to. Resolution happens once per run
and produces an immutable ``ResolvedFontSet``; a failed resource load
never raises, it is logged and the fallback is used instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from ..config import Settings
from ..errors import ResourceError
from ..services.backend import DocumentBackend, FontHandle, try_embed_font
from ..services.resources import ResourceLoader

logger = logging.getLogger("certgen.fonts")

TITLE = "title"
BODY = "body"
EMPHASIS = "emphasis"
INSTITUTION_NAME = "institution_name"

ROLE_ORDER: tuple[str, ...] = (TITLE, BODY, EMPHASIS, INSTITUTION_NAME)


@dataclass(frozen=True)
class FontRole:
    name: str
    resource: str | None = None
    standard: str | None = None
    fallback_role: str | None = None


def build_font_roles(settings: Settings | None = None) -> dict[str, FontRole]:
    settings = settings or Settings()
    return {
        TITLE: FontRole(TITLE, resource=settings.title_font, standard="Times-Roman"),
        BODY: FontRole(BODY, standard="Times-Roman"),
        EMPHASIS: FontRole(EMPHASIS, standard="Helvetica-Bold"),
        # Borrows whatever the emphasis role resolved to, not a standard font.
        INSTITUTION_NAME: FontRole(
            INSTITUTION_NAME,
            resource=settings.institution_font,
            fallback_role=EMPHASIS,
        ),
    }


@dataclass(frozen=True)
class ResolvedFontSet:
    fonts: Mapping[str, FontHandle]
    fallbacks: Mapping[str, str] = field(default_factory=dict)

    def __getitem__(self, role: str) -> FontHandle:
        return self.fonts[role]

    @property
    def title(self) -> FontHandle:
        return self.fonts[TITLE]

    @property
    def body(self) -> FontHandle:
        return self.fonts[BODY]

    @property
    def emphasis(self) -> FontHandle:
        return self.fonts[EMPHASIS]

    @property
    def institution_name(self) -> FontHandle:
        return self.fonts[INSTITUTION_NAME]


def _check_graph(roles: Mapping[str, FontRole]) -> None:
    for role in roles.values():
        if role.fallback_role is None and role.standard is None:
            raise ValueError(f"font role {role.name!r} has no fallback")
        seen = [role.name]
        current = role
        while current.fallback_role is not None:
            nxt = current.fallback_role
            if nxt not in roles:
                raise ValueError(f"font role {current.name!r} falls back to unknown role {nxt!r}")
            if nxt in seen:
                raise ValueError(f"font fallback cycle: {' -> '.join(seen + [nxt])}")
            seen.append(nxt)
            current = roles[nxt]


def resolve_fonts(
    backend: DocumentBackend,
    loader: ResourceLoader,
    roles: Mapping[str, FontRole] | None = None,
) -> ResolvedFontSet:
    roles = roles if roles is not None else build_font_roles()
    _check_graph(roles)
    resolved: dict[str, FontHandle] = {}
    fallbacks: dict[str, str] = {}

    def resolve(name: str) -> FontHandle:
        if name in resolved:
            return resolved[name]
        role = roles[name]
        reason: str | None = None
        if role.resource:
            try:
                data = loader.load(role.resource)
            except ResourceError as exc:
                reason = str(exc) or exc.__class__.__name__
            else:
                result = try_embed_font(backend, data)
                if result.ok:
                    resolved[name] = result.handle
                    return result.handle
                reason = result.reason
        if role.fallback_role is not None:
            handle = resolve(role.fallback_role)
        else:
            handle = backend.standard_font(role.standard)
        if reason is not None:
            fallbacks[name] = reason
            logger.warning(
                "[CERT-FONT] role=%s resource=%s -> %s (%s)",
                name,
                role.resource,
                handle.name,
                reason,
            )
        resolved[name] = handle
        return handle

    ordered = [name for name in ROLE_ORDER if name in roles]
    ordered += sorted(name for name in roles if name not in ROLE_ORDER)
    for name in ordered:
        resolve(name)
    return ResolvedFontSet(
        fonts=MappingProxyType(dict(resolved)),
        fallbacks=MappingProxyType(dict(fallbacks)),
    )
