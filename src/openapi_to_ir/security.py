"""Security scheme and requirement projection."""

from __future__ import annotations

from collections.abc import Iterator

from .classify import (
    ApiKeySecurityScheme,
    HttpSecurityScheme,
    OAuth2SecurityScheme,
    OAuthFlows,
    SecurityScheme,
)
from .extensions import parse_meta
from .ir import (
    ApiKeyScheme,
    BasicScheme,
    OAuth2AuthorizationCodeFlow,
    OAuth2ClientCredentialsFlow,
    OAuth2Flow,
    OAuth2ImplicitFlow,
    OAuth2PasswordFlow,
    OAuth2Scheme,
    OAuth2Scope,
    Scalar,
    SecurityOption,
)
from .ir import SecurityScheme as IRSecurityScheme
from .overlay import OpenAPIView, OperationView, SecurityRequirementView
from .resolver import Resolver
from .scalars import optional_text, text
from .views import Index


class SecurityProjection:
    """Translate security requirements into IR security options."""

    def __init__(self, document: OpenAPIView, resolver: Resolver) -> None:
        self._document = document
        self._resolver = resolver

    def options(self, operation: OperationView) -> list[SecurityOption]:
        """Options for an operation; its own ``security`` replaces the document default."""
        requirements = operation.security
        if requirements is None:
            requirements = self._document.security
        return [self._option(requirement) for requirement in requirements or []]

    def _option(self, requirement: SecurityRequirementView) -> SecurityOption:
        schemes: list[IRSecurityScheme] = []
        for key in requirement.keys:
            scheme = self._scheme(key)
            if scheme is not None:
                schemes.append(scheme)
        return SecurityOption(schemes=schemes)

    def _scheme(self, key: str) -> IRSecurityScheme | None:
        components = self._document.components
        index = components.security_schemes if components is not None else None
        if index is None:
            return None
        definition = index.read(key)
        if definition is None:
            return None
        scheme = self._resolver.resolve_security_scheme(definition)
        name = Scalar[str](value=key, loc=index.key_range(key))
        loc = index.prop_range(key)
        return project_scheme(scheme, name, loc)


def project_scheme(
    scheme: SecurityScheme,
    name: Scalar[str],
    loc: str | None,
) -> IRSecurityScheme | None:
    """IR form of one classified scheme; OpenID Connect has none."""
    if isinstance(scheme, HttpSecurityScheme):
        return BasicScheme(
            type=Scalar[str](value="basic", loc=scheme.type.loc),
            name=name,
            description=optional_text(scheme.description),
            loc=loc,
            meta=parse_meta(scheme.fields),
        )
    if isinstance(scheme, ApiKeySecurityScheme):
        return ApiKeyScheme(
            type=Scalar[str](value="apiKey", loc=scheme.type.loc),
            name=name,
            description=optional_text(scheme.description),
            parameter=text(scheme.name),
            in_=text(scheme.location),
            loc=loc,
            meta=parse_meta(scheme.fields),
        )
    if isinstance(scheme, OAuth2SecurityScheme):
        flows = scheme.flows
        return OAuth2Scheme(
            type=Scalar[str](value="oauth2", loc=scheme.type.loc),
            name=name,
            description=optional_text(scheme.description),
            flows=list(_flows(flows, loc)) if flows is not None else [],
            loc=loc,
            meta=parse_meta(scheme.fields),
        )
    return None


def _flows(flows: OAuthFlows, loc: str | None) -> Iterator[OAuth2Flow]:
    fields = flows.fields
    code = flows.authorization_code
    if code is not None:
        yield OAuth2AuthorizationCodeFlow(
            type=Scalar[str](value="authorizationCode", loc=fields.key_range("authorizationCode")),
            authorization_url=optional_text(code.authorization_url),
            token_url=optional_text(code.token_url),
            refresh_url=optional_text(code.refresh_url),
            scopes=_scopes(code.scopes),
            loc=loc,
        )
    credentials = flows.client_credentials
    if credentials is not None:
        yield OAuth2ClientCredentialsFlow(
            type=Scalar[str](value="clientCredentials", loc=fields.key_range("clientCredentials")),
            token_url=optional_text(credentials.token_url),
            refresh_url=optional_text(credentials.refresh_url),
            scopes=_scopes(credentials.scopes),
            loc=loc,
        )
    implicit = flows.implicit
    if implicit is not None:
        yield OAuth2ImplicitFlow(
            type=Scalar[str](value="implicit", loc=fields.key_range("implicit")),
            authorization_url=optional_text(implicit.authorization_url),
            refresh_url=optional_text(implicit.refresh_url),
            scopes=_scopes(implicit.scopes),
            loc=loc,
        )
    password = flows.password
    if password is not None:
        yield OAuth2PasswordFlow(
            type=Scalar[str](value="password", loc=fields.key_range("password")),
            token_url=optional_text(password.token_url),
            refresh_url=optional_text(password.refresh_url),
            scopes=_scopes(password.scopes),
            loc=loc,
        )


def _scopes(scopes: Index | None) -> list[OAuth2Scope]:
    if scopes is None:
        return []
    return [
        OAuth2Scope(
            name=Scalar[str](value=name, loc=scopes.key_range(name)),
            description=text(description) if isinstance(description.value, str) else None,
            loc=scopes.prop_range(name),
        )
        for name, description in scopes.items()
    ]
