"""Ignore ledger rules: which processes the user has asked not to hear about."""

from hogwatch.models import ProcessIdentity

# executable path -> command lines the user ignored for it
IgnoreLedger = dict[str, set[str]]

PROMOTE_AFTER = 3


def should_ignore(
    ledger: IgnoreLedger,
    identity: ProcessIdentity,
    promote_after: int = PROMOTE_AFTER,
) -> bool:
    """
    Check whether a process is exempt from hog detection.

    A process is exempt when its exact command line was ignored before, or when
    enough distinct command lines of the same executable were ignored that the
    whole executable is treated as noise.
    """
    commands = ledger.get(identity.executable_path)
    if commands is None:
        return False
    return len(commands) >= promote_after or identity.command_line in commands


def record_ignore(ledger: IgnoreLedger, identity: ProcessIdentity) -> bool:
    """Add the identity to the ledger. Returns True if it was not there yet."""
    commands = ledger.setdefault(identity.executable_path, set())
    if identity.command_line in commands:
        return False
    commands.add(identity.command_line)
    return True
