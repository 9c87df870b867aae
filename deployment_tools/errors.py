class DeploymentToolError(Exception):
    """Base class for every failure the registry tools report to the user."""


class MissingArgument(DeploymentToolError):
    pass


class InvalidVariant(DeploymentToolError):
    pass


class InvalidChainId(DeploymentToolError):
    pass


class VersionNotFound(DeploymentToolError):
    pass


class NoRecordsFound(DeploymentToolError):
    pass


class MalformedRecord(DeploymentToolError):
    pass


class ConfigError(DeploymentToolError):
    pass
