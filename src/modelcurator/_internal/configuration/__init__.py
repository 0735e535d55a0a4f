from modelcurator._internal.configuration.settings import (
    CuratorSettings,
    load_settings,
    resolve_env_vars,
)

__all__ = ["CuratorSettings", "load_settings", "resolve_env_vars"]
