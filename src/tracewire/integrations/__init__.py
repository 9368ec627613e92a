from tracewire.integrations.base import Integration
from tracewire.integrations.shutdown import IntegrationState, ShutdownHook, ShutdownHookIntegration


def default_integrations() -> list[Integration]:
    return [ShutdownHookIntegration()]


__all__ = [
    "Integration",
    "IntegrationState",
    "ShutdownHook",
    "ShutdownHookIntegration",
    "default_integrations",
]
