class HbsBuildError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(HbsBuildError):
    # errors related to configuration.
    pass

class HelperError(HbsBuildError):
    # errors resolving helper modules.
    pass
