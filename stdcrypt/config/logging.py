"""
Logging configuration for the ``stdcrypt`` command line tool.

The ``logging`` section of the configuration file looks like this:

.. code-block:: yaml

    logging:
        root-level: INFO
        root-output: stderr
        by-module:
            stdcrypt.pdf_utils.crypt.standard:
                level: DEBUG
                output: crypt.log

Outputs are either ``stderr``, ``stdout`` or a file name.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union

from stdcrypt.config.errors import ConfigurationError
from stdcrypt.pdf_utils.misc import get_and_apply

__all__ = [
    'LogConfig', 'StdLogOutput', 'parse_logging_config',
    'DEFAULT_ROOT_LOGGER_LEVEL', 'DEFAULT_MODULE_LEVELS',
]


class StdLogOutput(enum.Enum):
    STDERR = enum.auto()
    STDOUT = enum.auto()


@dataclass(frozen=True)
class LogConfig:
    level: int
    """
    Numeric logging level.
    """

    output: Optional[Union[StdLogOutput, str]]
    """
    Name of the output file, or a standard one. If ``None``, the logger gets
    no output of its own, and its records only reach the root logger's.
    """

    @staticmethod
    def parse_output_spec(spec) -> Union[StdLogOutput, str]:
        if not isinstance(spec, str):
            raise ConfigurationError(
                "Log output must be specified as a string."
            )
        try:
            return StdLogOutput[spec.upper()]
        except KeyError:
            return spec

    @staticmethod
    def parse_level(spec) -> int:
        """
        Turn a level name (case-insensitive) or number into a numeric
        logging level.
        """
        if isinstance(spec, bool):
            raise ConfigurationError(f"Invalid log level: {spec!r}")
        if isinstance(spec, int):
            return spec
        if isinstance(spec, str):
            level = logging.getLevelName(spec.upper())
            if isinstance(level, int):
                return level
        raise ConfigurationError(f"Invalid log level: {spec!r}")


DEFAULT_ROOT_LOGGER_LEVEL = logging.INFO

DEFAULT_MODULE_LEVELS = {
    # one line per skipped object
    'stdcrypt.pdf_utils.crypt.traversal': logging.INFO,
}
"""
Levels for ``stdcrypt`` loggers that apply unless the configuration says
otherwise. These loggers write to the root logger's output.
"""


def _module_config(module, settings) -> LogConfig:
    if not isinstance(module, str):
        raise ConfigurationError("Keys in logging.by-module should be strings")
    if not isinstance(settings, dict):
        raise ConfigurationError(
            f"Logging config for '{module}' should be a dictionary"
        )
    try:
        level = LogConfig.parse_level(settings['level'])
    except KeyError:
        raise ConfigurationError(
            f"Logging config for '{module}' does not define a log level."
        )
    output = get_and_apply(
        settings, 'output', LogConfig.parse_output_spec,
        default=StdLogOutput.STDERR
    )
    return LogConfig(level=level, output=output)


def parse_logging_config(log_config_spec) -> Dict[Optional[str], LogConfig]:
    """
    Process the ``logging`` section of the configuration.

    :param log_config_spec:
        The contents of the section.
    :return:
        A dictionary mapping logger names to their settings. The root logger
        is keyed by ``None``.
    :raises ConfigurationError:
        if the section is malformed.
    """
    if not isinstance(log_config_spec, dict):
        raise ConfigurationError('logging config should be a dictionary')

    root_level = get_and_apply(
        log_config_spec, 'root-level', LogConfig.parse_level,
        default=DEFAULT_ROOT_LOGGER_LEVEL
    )
    root_output = get_and_apply(
        log_config_spec, 'root-output', LogConfig.parse_output_spec,
        default=StdLogOutput.STDERR,
    )

    log_config: Dict[Optional[str], LogConfig] = {
        None: LogConfig(root_level, root_output),
    }
    for module, level in DEFAULT_MODULE_LEVELS.items():
        log_config[module] = LogConfig(level, output=None)

    logging_by_module = log_config_spec.get('by-module', {})
    if not isinstance(logging_by_module, dict):
        raise ConfigurationError('logging.by-module should be a dict')
    for module, settings in logging_by_module.items():
        log_config[module] = _module_config(module, settings)

    return log_config
