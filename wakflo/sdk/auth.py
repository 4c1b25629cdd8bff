"""
Auth requirement declarations.

A connector declares what credentials it needs; obtaining and refreshing
them belongs to the hosting platform. The declaration is built once at
connector registration and passed down explicitly.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from wakflo.sdk.form import FormBuilder, FormSchema


class AuthStrategy(str, Enum):
    """How the platform obtains the credential."""

    OAUTH2 = "oauth2"
    API_KEY = "api_key"
    CUSTOM = "custom"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class AuthMetadata:
    """Credential requirement for a connector or a single action."""

    required: bool
    schema: FormSchema | None = None
    strategy: AuthStrategy = AuthStrategy.CUSTOM

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "required": self.required,
            "strategy": self.strategy.value,
        }
        if self.schema is not None:
            result["schema"] = self.schema.to_dict()
        return result


NO_AUTH = AuthMetadata(required=False, strategy=AuthStrategy.NONE)


def oauth2_auth(
    auth_id: str,
    title: str,
    *,
    authorization_url: str,
    token_url: str,
    scopes: Sequence[str],
) -> AuthMetadata:
    """Declare an OAuth2 connection."""
    form = FormBuilder(auth_id, title)
    form.oauth_field("oauth", title).required().with_extra(
        authorizationUrl=authorization_url,
        tokenUrl=token_url,
        scopes=list(scopes),
    )
    return AuthMetadata(required=True, schema=form.build(), strategy=AuthStrategy.OAUTH2)


def custom_auth(form: FormBuilder, *, strategy: AuthStrategy = AuthStrategy.CUSTOM) -> AuthMetadata:
    """
    Declare a connection described by an arbitrary credential form.

    Example:
        form = FormBuilder("shopify-auth", "Shopify")
        form.text_field("domain", "Shop domain").required()
        form.password_field("token", "Admin API access token").required()
        SHOPIFY_AUTH = custom_auth(form)
    """
    return AuthMetadata(required=True, schema=form.build(), strategy=strategy)
