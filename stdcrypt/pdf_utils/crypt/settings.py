from dataclasses import dataclass

from stdcrypt.config.api import (
    ConfigurableMixin,
    process_bool,
    process_positive_int,
)
from stdcrypt.config.errors import ConfigurationError

__all__ = [
    'DecryptionSettings', 'DEFAULT_MAX_NESTING_DEPTH',
    'MAX_NESTING_DEPTH_LIMIT',
]

DEFAULT_MAX_NESTING_DEPTH = 256

# each level of nesting takes up to three stack frames
MAX_NESTING_DEPTH_LIMIT = 300


@dataclass(frozen=True)
class DecryptionSettings(ConfigurableMixin):
    """
    Settings that influence how encrypted documents are processed.
    """

    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    """
    Maximal nesting depth of arrays and dictionaries inside a single object.
    Deeper objects are rejected with :class:`.ExcessiveNestingError`.
    Values loaded from configuration cannot exceed
    :const:`MAX_NESTING_DEPTH_LIMIT`.
    """

    gate_metadata_flag: bool = False
    """
    If ``True``, revision 4 key derivation only mixes in ``0xFFFFFFFF`` when
    ``/EncryptMetadata`` is ``false``. The default (``False``) always mixes
    it in for revision 4 handlers.
    """

    authenticate: bool = True
    """
    Check the password against the ``/U`` entry of the encryption
    dictionary, if there is one. This also allows decrypting with the owner
    password.
    """

    @classmethod
    def process_entries(cls, config_dict):
        super().process_entries(config_dict)
        process_positive_int(config_dict, 'max_nesting_depth')
        depth = config_dict.get('max_nesting_depth')
        if depth is not None and depth > MAX_NESTING_DEPTH_LIMIT:
            raise ConfigurationError(
                f"'max-nesting-depth' cannot exceed "
                f"{MAX_NESTING_DEPTH_LIMIT}, not {depth}."
            )
        process_bool(config_dict, 'gate_metadata_flag')
        process_bool(config_dict, 'authenticate')
