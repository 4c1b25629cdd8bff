"""
Wakflo connector SDK.

The contract every connector operation implements, the form schema used
to declare its input, and the dynamic-field protocol that computes
select options at render time.
"""

from wakflo.sdk.action import (
    Action,
    ActionMetadata,
    ActionSettings,
    ActionType,
    Trigger,
    TriggerMetadata,
    TriggerType,
    run_action,
    run_trigger,
)
from wakflo.sdk.auth import NO_AUTH, AuthMetadata, AuthStrategy, custom_auth, oauth2_auth
from wakflo.sdk.client import ClientConfig, VendorClient
from wakflo.sdk.context import (
    AuthContext,
    DynamicFieldContext,
    ExecuteContext,
    LifecycleContext,
    PerformContext,
)
from wakflo.sdk.errors import (
    AuthenticationError,
    ConfigurationError,
    ConnectorError,
    DecodeError,
    NotFoundError,
    PartialResultError,
    PreconditionError,
    RateLimitError,
    RegistryError,
    SchemaError,
    ValidationError,
    VendorError,
)
from wakflo.sdk.form import (
    FieldBuilder,
    FieldDefinition,
    FieldType,
    FormBuilder,
    FormSchema,
    Option,
    ValidationKind,
    ValidationRule,
    VisibilityRule,
    new_form,
)
from wakflo.sdk.integration import Integration, IntegrationRegistry
from wakflo.sdk.options import (
    DynamicOption,
    DynamicOptionsDescriptor,
    DynamicOptionsResponse,
    OptionsBuilder,
    collect_pages,
)
from wakflo.sdk.resolution import FieldState, ResolutionSession

__all__ = [
    # Contract
    "Action",
    "ActionMetadata",
    "ActionSettings",
    "ActionType",
    "Trigger",
    "TriggerMetadata",
    "TriggerType",
    "run_action",
    "run_trigger",
    # Auth
    "AuthMetadata",
    "AuthStrategy",
    "NO_AUTH",
    "custom_auth",
    "oauth2_auth",
    # Client
    "ClientConfig",
    "VendorClient",
    # Contexts
    "AuthContext",
    "DynamicFieldContext",
    "ExecuteContext",
    "LifecycleContext",
    "PerformContext",
    # Errors
    "AuthenticationError",
    "ConfigurationError",
    "ConnectorError",
    "DecodeError",
    "NotFoundError",
    "PartialResultError",
    "PreconditionError",
    "RateLimitError",
    "RegistryError",
    "SchemaError",
    "ValidationError",
    "VendorError",
    # Forms
    "FieldBuilder",
    "FieldDefinition",
    "FieldType",
    "FormBuilder",
    "FormSchema",
    "Option",
    "ValidationKind",
    "ValidationRule",
    "VisibilityRule",
    "new_form",
    # Integrations
    "Integration",
    "IntegrationRegistry",
    # Dynamic options
    "DynamicOption",
    "DynamicOptionsDescriptor",
    "DynamicOptionsResponse",
    "OptionsBuilder",
    "collect_pages",
    "FieldState",
    "ResolutionSession",
]
