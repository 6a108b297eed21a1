class ConfigServerError(Exception):
    pass

class MissingConfigurationError(Exception):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No '{key}' set in configuration, cannot start")

class InvalidConfigurationError(Exception):
    def __init__(self, key: str, value):
        self.key = key
        self.value = value
        super().__init__(f"Invalid value {value!r} for '{key}' in configuration, cannot start")
