from stdcrypt.cli._root import cli_root
from stdcrypt.cli.commands.crypt import *

__all__ = ['launch', 'cli_root']


def launch():
    cli_root(prog_name='stdcrypt')
