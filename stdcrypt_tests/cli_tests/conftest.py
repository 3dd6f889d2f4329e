import logging

import pytest
from click.testing import CliRunner

CONFIG_PATH = 'stdcrypt.yml'


def _const(v):
    def f(*_args, **_kwargs):
        return v

    return f


def _write_config(config_str: str, fname: str = CONFIG_PATH):
    with open(fname, 'w') as outf:
        outf.write(config_str)


# cli_runner is autouse to ensure it gets priority in the dependency graph
@pytest.fixture(scope="function", autouse=True)
def cli_runner():
    # CLI invocations run logging_setup, which changes global logger state;
    # restore it afterwards so other tests don't depend on run order
    manager = logging.Logger.manager
    loggers = [logging.getLogger()] + [
        logging.getLogger(name) for name in list(manager.loggerDict)
    ]
    saved = {lg: (lg.level, list(lg.handlers)) for lg in loggers}
    runner = CliRunner()
    try:
        with runner.isolated_filesystem():
            yield runner
    finally:
        for name in list(manager.loggerDict):
            lg = logging.getLogger(name)
            if lg not in saved:
                saved[lg] = (logging.NOTSET, [])
        for lg, (level, handlers) in saved.items():
            lg.setLevel(level)
            for handler in lg.handlers[:]:
                if handler not in handlers:
                    lg.removeHandler(handler)
