from dataclasses import dataclass
from typing import Optional

from stdcrypt.pdf_utils.crypt.settings import DecryptionSettings


@dataclass
class CLIContext:
    """
    Context object that cobbles together the CLI settings gathered during the
    lifetime of a CLI invocation.
    This object is passed around as a ``click`` context object.
    """

    settings: Optional[DecryptionSettings] = None
    """
    Decryption settings, as read from the configuration file.
    """

    def get_settings(self) -> DecryptionSettings:
        return self.settings or DecryptionSettings()
