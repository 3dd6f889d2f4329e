import logging

import pytest

from stdcrypt.cli.config import CLIRootConfig, parse_cli_config
from stdcrypt.cli.runtime import logging_setup
from stdcrypt.config.errors import ConfigurationError
from stdcrypt.config.logging import (
    DEFAULT_MODULE_LEVELS,
    DEFAULT_ROOT_LOGGER_LEVEL,
    LogConfig,
    StdLogOutput,
)
from stdcrypt.pdf_utils.crypt import DecryptionSettings
from stdcrypt.pdf_utils.crypt.settings import (
    DEFAULT_MAX_NESTING_DEPTH,
    MAX_NESTING_DEPTH_LIMIT,
)


def test_read_decryption_settings():
    config_string = """
    decryption:
        max-nesting-depth: 32
        gate-metadata-flag: true
        authenticate: false
    """
    cli_config: CLIRootConfig = parse_cli_config(config_string)
    settings = cli_config.settings
    assert settings.max_nesting_depth == 32
    assert settings.gate_metadata_flag
    assert not settings.authenticate


def test_read_decryption_settings_defaults():
    for config_string in ("", "decryption:", "decryption: {}"):
        settings = parse_cli_config(config_string).settings
        assert settings == DecryptionSettings()
        assert settings.max_nesting_depth == DEFAULT_MAX_NESTING_DEPTH
        assert not settings.gate_metadata_flag
        assert settings.authenticate


def test_settings_from_config_underscores():
    settings = DecryptionSettings.from_config({'max_nesting_depth': 10})
    assert settings.max_nesting_depth == 10


def test_nesting_depth_limit():
    settings = DecryptionSettings.from_config(
        {'max-nesting-depth': MAX_NESTING_DEPTH_LIMIT}
    )
    assert settings.max_nesting_depth == MAX_NESTING_DEPTH_LIMIT
    with pytest.raises(ConfigurationError, match='cannot exceed'):
        parse_cli_config(
            f"decryption:\n  max-nesting-depth: {MAX_NESTING_DEPTH_LIMIT * 4}"
        )


WRONG_SETTINGS = [
    {'max-nesting-depth': 0},
    {'max-nesting-depth': -5},
    {'max-nesting-depth': 'deep'},
    {'max-nesting-depth': True},
    {'max-nesting-depth': MAX_NESTING_DEPTH_LIMIT + 1},
    {'gate-metadata-flag': 'yes please'},
    {'authenticate': 1},
    {'no-such-setting': True},
]


@pytest.mark.parametrize('config_dict', WRONG_SETTINGS)
def test_decryption_settings_errors(config_dict):
    with pytest.raises(ConfigurationError):
        DecryptionSettings.from_config(config_dict)


def test_decryption_settings_not_a_dict():
    with pytest.raises(ConfigurationError):
        parse_cli_config("decryption: 5")


def test_unknown_key_message():
    with pytest.raises(ConfigurationError, match='no-such-setting'):
        DecryptionSettings.from_config({'no-such-setting': True})


TRAVERSAL_LOGGER = 'stdcrypt.pdf_utils.crypt.traversal'


def test_read_logging_config():
    config_string = """
    logging:
        root-level: DEBUG
        root-output: stdout
        by-module:
            example.test1:
                level: 50
                output: test.log
            example.test2:
                level: debug
            example.test3:
                level: 10
                output: stderr
    """
    cli_config: CLIRootConfig = parse_cli_config(config_string)

    assert cli_config.log_config[None].output == StdLogOutput.STDOUT
    assert cli_config.log_config[None].level == logging.DEBUG

    assert cli_config.log_config['example.test1'].level == 50
    assert cli_config.log_config['example.test1'].output == 'test.log'
    assert cli_config.log_config['example.test2'].level == logging.DEBUG
    assert cli_config.log_config['example.test2'].output == StdLogOutput.STDERR
    assert cli_config.log_config['example.test3'].level == 10
    assert cli_config.log_config['example.test3'].output == StdLogOutput.STDERR


def test_read_logging_config_defaults():
    cli_config = parse_cli_config("""
        logging:
            root-level: DEBUG
    """)

    assert cli_config.log_config[None].output == StdLogOutput.STDERR
    assert cli_config.log_config[None].level == logging.DEBUG
    assert set(cli_config.log_config.keys()) == {None, TRAVERSAL_LOGGER}

    cli_config = parse_cli_config("""
        logging:
            root-output: 'test.log'
    """)

    assert cli_config.log_config[None].output == 'test.log'
    assert cli_config.log_config[None].level == DEFAULT_ROOT_LOGGER_LEVEL

    cli_config = parse_cli_config("")
    assert cli_config.log_config[None].output == StdLogOutput.STDERR
    assert cli_config.log_config[None].level == DEFAULT_ROOT_LOGGER_LEVEL


def test_traversal_logger_default():
    log_config = parse_cli_config("").log_config
    assert log_config[TRAVERSAL_LOGGER] == LogConfig(
        level=logging.INFO, output=None
    )
    assert set(DEFAULT_MODULE_LEVELS) == {TRAVERSAL_LOGGER}


def test_traversal_logger_override():
    log_config = parse_cli_config(f"""
        logging:
            by-module:
                {TRAVERSAL_LOGGER}:
                    level: DEBUG
                    output: traversal.log
    """).log_config
    assert log_config[TRAVERSAL_LOGGER] == LogConfig(
        level=logging.DEBUG, output='traversal.log'
    )


@pytest.mark.parametrize('spec,expected', [
    ('WARNING', logging.WARNING),
    ('warning', logging.WARNING),
    ('Error', logging.ERROR),
    (25, 25),
])
def test_parse_level(spec, expected):
    assert LogConfig.parse_level(spec) == expected


@pytest.mark.parametrize('spec', ['LOUD', '', True, None, 1.5, [10]])
def test_parse_level_errors(spec):
    with pytest.raises(ConfigurationError):
        LogConfig.parse_level(spec)


def test_logging_setup_level_only():
    root = logging.getLogger()
    logger = logging.getLogger(TRAVERSAL_LOGGER)
    root_handlers = list(root.handlers)
    root_level = root.level
    handlers_before = list(logger.handlers)
    level_before = logger.level
    try:
        logging_setup(parse_cli_config("").log_config, verbose=False)
        assert logger.level == logging.INFO
        # records propagate to the root logger's output
        assert logger.handlers == handlers_before
        assert len(root.handlers) == len(root_handlers) + 1
    finally:
        logger.setLevel(level_before)
        root.setLevel(root_level)
        for handler in root.handlers[:]:
            if handler not in root_handlers:
                root.removeHandler(handler)


WRONG_CONFIGS = [
    "logging: 5",
    """
    logging:
        by-module: 1
    """,
    """
    logging:
        root-output: [1, 2]
    """,
    """
    logging:
        root-level: [2, 3]
    """,
    """
    logging:
        root-level: NOISY
    """,
    """
    logging:
        by-module:
            test.example:
                level: 10
                output: 5
    """,
    """
    logging:
        by-module:
            test.example:
                level: chatty
    """,
    """
    logging:
        by-module:
            0:
                level: 10
    """,
    # level is required for non-root logging specs
    """
    logging:
        by-module:
            test.example:
                output: 'abc.log'
    """,
    "[1, 2, 3]",
]


@pytest.mark.parametrize('config_str', WRONG_CONFIGS)
def test_read_logging_config_errors(config_str):
    with pytest.raises(ConfigurationError):
        parse_cli_config(config_str)
