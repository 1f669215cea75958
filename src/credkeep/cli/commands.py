import click
import logging
from functools import wraps
from pathlib import Path

from cryptography.exceptions import InvalidTag

from credkeep.config import Settings
from credkeep.core.encryption import BACKENDS, backend_for
from credkeep.core.generator import generate_password
from credkeep.core.ordering import SORT_KEYS, order_for
from credkeep.core.record import Record
from credkeep.cli.clipboard import copy_to_clipboard
from credkeep.cli.render import describe, format_rows
from credkeep.cli.session import Session

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
CLEAR_MEMO = '-'

COPY_FIELDS = {
    'password': lambda r: r.password,
    'id': lambda r: r.account_id,
    'name': lambda r: r.name,
    'memo': lambda r: r.memo or '',
}


def _passphrase_prompt(settings: Settings):
    """Build the prompt the file backend calls when it needs a passphrase."""
    def prompt() -> str:
        if settings.passphrase:
            return settings.passphrase
        new_file = not settings.file_path.exists()
        label = "New file passphrase" if new_file else "File passphrase"
        return click.prompt(label, hide_input=True, confirmation_prompt=new_file)
    return prompt


def with_session(f):
    """Open the accounts file around a command and save it afterwards if changed."""
    @click.pass_obj
    @wraps(f)
    def wrapped(settings, *args, **kwargs):
        session = None
        try:
            session = Session(settings, backend_for(settings.backend, _passphrase_prompt(settings)))
            session.open()
            result = f(session, *args, **kwargs)
            if session.commit():
                click.echo(f"Saved {settings.file_path}.")
            return result
        except InvalidTag:
            raise click.ClickException("Wrong passphrase or corrupted accounts file.")
        except (OSError, ValueError) as e:
            logging.error(f"Command failed: {e}")
            raise click.ClickException(str(e))
        finally:
            if session is not None:
                session.close()
    return wrapped


def _lookup(session: Session, name: str) -> Record:
    record = session.store.get(name)
    if record is None:
        raise click.ClickException(f"No account named '{name}'.")
    return record


@click.group()
@click.option('--file', 'file_path', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help='Accounts file to use (default: $CREDKEEP_FILE or ~/.credkeep/accounts.enc).')
@click.option('--backend', type=click.Choice(BACKENDS), default=None,
              help='How the accounts file is stored on disk.')
@click.option('--verbose', is_flag=True, help='Log debug messages.')
@click.pass_context
def cli(ctx, file_path, backend, verbose):
    """Credential manager CLI

    Keeps named accounts (id, password, update date, memo) in a single
    encrypted file. Use the commands below to list, add, edit, delete and
    copy out credentials.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    try:
        ctx.obj = Settings().with_overrides(file_path=file_path, backend=backend)
    except ValueError as e:
        raise click.ClickException(str(e))


@cli.command(name='list')
@click.option('--sort', 'sort_key', type=click.Choice(SORT_KEYS), default=None,
              help='Field to order by (default: name).')
@click.option('--show-passwords/--hide-passwords', default=None, help='Show passwords in clear text.')
@with_session
def list_accounts(session, sort_key, show_passwords):
    """List all stored accounts."""
    records = session.store.get_all()
    if not records:
        click.echo("No accounts stored.")
        return
    if show_passwords is None:
        show_passwords = session.settings.show_passwords
    for line in format_rows(order_for(records, sort_key), show_passwords):
        click.echo(line)


@cli.command()
@click.argument('name')
@click.option('--show-password', is_flag=True, default=False, help='Show the password in clear text.')
@with_session
def show(session, name, show_password):
    """Show one account."""
    record = _lookup(session, name)
    for line in describe(record, show_password or session.settings.show_passwords):
        click.echo(line)


@cli.command()
@click.argument('name')
@click.option('--id', 'account_id', default=None, help='Login identifier.')
@click.option('--memo', default=None, help='Free-form note.')
@click.option('--generate', '-g', is_flag=True, help='Generate the password instead of prompting.')
@click.option('--length', type=int, default=None, help='Length of a generated password.')
@with_session
def add(session, name, account_id, memo, generate, length):
    """Add a new account."""
    store = session.store
    if store.get(name) is not None:
        click.echo(f"Note: an account named '{name}' already exists; adding another.")
    if account_id is None:
        account_id = click.prompt('ID')
    if generate:
        pwd = generate_password(length if length is not None else session.settings.password_length)
    else:
        pwd = click.prompt('Password', hide_input=True, confirmation_prompt=True)
    if memo is None:
        memo = click.prompt('Memo', default='', show_default=False)
    store.add(Record.create(name, account_id, pwd, memo or None))
    click.echo(f"Account '{name}' added.")


@cli.command()
@click.argument('name')
@click.option('--generate', '-g', is_flag=True, help='Replace the password with a generated one.')
@click.option('--length', type=int, default=None, help='Length of a generated password.')
@with_session
def edit(session, name, generate, length):
    """Edit an existing account in place."""
    record = _lookup(session, name)
    new_name = click.prompt('Name', default=record.name)
    account_id = click.prompt('ID', default=record.account_id)
    if generate:
        pwd = generate_password(length if length is not None else session.settings.password_length)
    else:
        pwd = click.prompt('Password (empty keeps current)', hide_input=True, default='',
                           show_default=False) or record.password
    memo_text = click.prompt(f'Memo ("{CLEAR_MEMO}" clears)', default=record.memo or '', show_default=False)
    if memo_text == CLEAR_MEMO:
        memo = None
    else:
        memo = memo_text if memo_text or record.memo == '' else None

    if (new_name, account_id, pwd, memo) == (record.name, record.account_id, record.password, record.memo):
        click.echo("No changes.")
        return
    record.name = new_name
    record.account_id = account_id
    record.password = pwd
    record.memo = memo
    record.touch()
    session.store.mark_modified()
    click.echo(f"Account '{new_name}' updated.")


@cli.command()
@click.argument('name')
@click.option('--yes', is_flag=True, help='Do not ask for confirmation.')
@with_session
def delete(session, name, yes):
    """Delete every account with the given name."""
    _lookup(session, name)
    if not yes and not click.confirm(f"Delete all accounts named '{name}'?"):
        click.echo("Aborted.")
        return
    removed = session.store.delete_by_name(name)
    click.echo(f"Deleted {removed} account(s) named '{name}'.")


@cli.command()
@click.argument('name')
@click.option('--field', type=click.Choice(tuple(COPY_FIELDS)), default='password',
              help='Which field to copy (default: password).')
@click.option('--timeout', type=int, default=None,
              help='Seconds before the clipboard is cleared; 0 keeps it.')
@with_session
def copy(session, name, field, timeout):
    """Copy a field of an account to the clipboard."""
    record = _lookup(session, name)
    if timeout is None:
        timeout = session.settings.clipboard_timeout
    copy_to_clipboard(COPY_FIELDS[field](record), timeout)
    if timeout > 0:
        click.echo(f"Copied {field} of '{name}'; the clipboard clears in {timeout}s. "
                   "Waiting until then (use --timeout 0 to return at once).")
    else:
        click.echo(f"Copied {field} of '{name}'.")


@cli.command()
@click.option('--length', type=int, default=None, help='Password length.')
@click.pass_obj
def generate(settings, length):
    """Print a freshly generated password."""
    try:
        click.echo(generate_password(length if length is not None else settings.password_length))
    except ValueError as e:
        raise click.ClickException(str(e))


def configure_logging(settings: Settings) -> None:
    settings.log_file.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    logging.basicConfig(filename=str(settings.log_file), level=logging.INFO, format=LOG_FORMAT)


def main():
    try:
        configure_logging(Settings())
    except ValueError as e:
        raise SystemExit(f"Error: {e}")
    cli()


if __name__ == '__main__':
    main()
