import enum


class DeploymentEnvironment(enum.Enum):
    """Selects the configuration overlay under ``config/env.d``."""

    Production = "production"
    Staging = "staging"
    Test = "test"
    Local = "local"
