import getpass

import click

from stdcrypt.cli._ctx import CLIContext
from stdcrypt.cli._root import cli_root
from stdcrypt.cli.runtime import stdcrypt_exception_manager
from stdcrypt.cli.utils import _warn_empty_password, parse_hex
from stdcrypt.pdf_utils import generic
from stdcrypt.pdf_utils.crypt import (
    ALL_PERMS,
    DecryptionSession,
    EncryptionDictionary,
    SecurityHandlerVersion,
)

__all__ = ['derive_key', 'decrypt_string']


def encryption_options(f):
    # options describing the encryption dictionary, shared by all commands
    options = [
        click.option(
            '--revision',
            help='security handler revision (/R)',
            required=True,
            type=int,
        ),
        click.option(
            '--version',
            'handler_version',
            help='security handler version (/V)',
            required=False,
            type=int,
            default=2,
            show_default=True,
        ),
        click.option(
            '--key-length',
            help='key length in bits (/Length)',
            required=False,
            type=int,
            default=40,
            show_default=True,
        ),
        click.option(
            '--owner',
            help='value of the /O entry (hex)',
            required=True,
            callback=parse_hex,
        ),
        click.option(
            '--user',
            help='value of the /U entry (hex); enables the password check',
            required=False,
            callback=parse_hex,
        ),
        click.option(
            '--permissions',
            help='value of the /P entry (signed integer)',
            required=False,
            type=int,
            default=ALL_PERMS,
            show_default=True,
        ),
        click.option(
            '--doc-id',
            help='first element of the document\'s /ID array (hex)',
            required=False,
            default='',
            callback=parse_hex,
        ),
        click.option(
            '--no-encrypt-metadata',
            help='the document does not encrypt its metadata',
            type=bool,
            is_flag=True,
            default=False,
        ),
        click.option(
            '--password',
            help='password to derive the key from',
            required=False,
            type=str,
        ),
    ]
    for opt in reversed(options):
        f = opt(f)
    return f


def _read_password(password):
    if password is None:
        password = getpass.getpass(prompt='Password: ')
    if not password:
        _warn_empty_password()
    return password


def _session_from_options(ctx: click.Context, revision, handler_version,
                          key_length, owner, user, permissions, doc_id,
                          no_encrypt_metadata, password) -> DecryptionSession:
    ctx_obj: CLIContext = ctx.obj
    encrypt_dict = EncryptionDictionary(
        revision=revision,
        owner_check_value=owner,
        permissions=permissions,
        version=SecurityHandlerVersion.from_number(handler_version),
        keylen_bits=key_length,
        user_check_value=user,
        encrypt_metadata=not no_encrypt_metadata,
    )
    return DecryptionSession(
        encrypt_dict, document_id=doc_id, password=_read_password(password),
        settings=ctx_obj.get_settings()
    )


def _report_auth(session: DecryptionSession):
    auth_result = session.auth_result
    if auth_result is not None:
        click.echo(f"Authentication status: {auth_result.status.name}")


@cli_root.command(
    help='derive the file encryption key of a document', name='derive-key'
)
@encryption_options
@click.pass_context
def derive_key(ctx: click.Context, **kwargs):
    with stdcrypt_exception_manager():
        session = _session_from_options(ctx, **kwargs)
        click.echo(session.handler.get_file_encryption_key().hex())
        _report_auth(session)


@cli_root.command(
    help='decrypt a string belonging to an indirect object',
    name='decrypt-string'
)
@encryption_options
@click.option(
    '--object',
    'idnum',
    help='ID of the object containing the string',
    required=True,
    type=int,
)
@click.option(
    '--generation',
    help='generation number of the object containing the string',
    required=False,
    type=int,
    default=0,
    show_default=True,
)
@click.argument('ciphertext', callback=parse_hex)
@click.pass_context
def decrypt_string(ctx: click.Context, idnum, generation, ciphertext,
                   **kwargs):
    with stdcrypt_exception_manager():
        session = _session_from_options(ctx, **kwargs)
        ref = generic.Reference(idnum, generation)
        result = session.decrypt(ref, generic.ByteStringObject(ciphertext))
        click.echo(result.original_bytes.hex())
        _report_auth(session)
