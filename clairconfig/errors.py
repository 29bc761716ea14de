class ConfigError(Exception):
    """Base class for everything the loader raises."""


class ConfigIOError(ConfigError):
    """Config file could not be opened or read."""


class ConfigParseError(ConfigError):
    """Config file is not valid YAML or does not have the expected shape."""


class PaginationKeyError(ConfigError):
    def __init__(self, msg: str = "invalid pagination key; must be 32-byte URL-safe base64") -> None:
        super().__init__(msg)


class KeyGenerationError(ConfigError):
    pass


class DatasourceNotLoadedError(ConfigError):
    def __init__(self) -> None:
        super().__init__("could not load configuration: no database source specified")
