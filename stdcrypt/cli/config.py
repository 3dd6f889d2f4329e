from dataclasses import dataclass
from typing import Dict, Optional

import yaml

from stdcrypt.config.errors import ConfigurationError
from stdcrypt.config.logging import LogConfig, parse_logging_config
from stdcrypt.pdf_utils.crypt.settings import DecryptionSettings

__all__ = ['CLIRootConfig', 'parse_cli_config']


@dataclass
class CLIRootConfig:
    """
    Config settings gathered from the CLI configuration file.
    """

    settings: DecryptionSettings
    """
    Decryption settings, from the ``decryption`` section.
    """

    log_config: Dict[Optional[str], LogConfig]
    """
    Per-module logging configuration. The keys in this dictionary are
    module names, the :class:`.LogConfig` values define the logging settings.

    The ``None`` key houses the configuration for the root logger, if any.
    """


def parse_cli_config(yaml_str) -> CLIRootConfig:
    config_dict = yaml.safe_load(yaml_str) or {}
    if not isinstance(config_dict, dict):
        raise ConfigurationError("Configuration should be a dictionary")
    settings_spec = config_dict.get('decryption', None) or {}
    log_config_spec = config_dict.get('logging', {})
    return CLIRootConfig(
        settings=DecryptionSettings.from_config(settings_spec),
        log_config=parse_logging_config(log_config_spec),
    )
