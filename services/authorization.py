"""
Authorization predicates over (actor, program).

Structural edits take one of these as an injectable predicate so the
surrounding request layer can swap the policy without touching the store.
"""

from typing import Callable

from models.program import Actor, ActorRole, Program

ProgramPredicate = Callable[[Actor, Program], bool]


def can_edit_program(actor: Actor, program: Program) -> bool:
    """Admins edit everything; coaches edit the programs they author."""
    if actor.role == ActorRole.ADMIN:
        return True
    return actor.role == ActorRole.COACH and program.coach_id == actor.id


def can_view_program(actor: Actor, program: Program) -> bool:
    """Admins, the authoring coach and the assigned client may read."""
    if actor.role == ActorRole.ADMIN:
        return True
    return actor.id in (program.coach_id, program.client_id)


def can_train_program(actor: Actor, program: Program) -> bool:
    """Only the assigned client (or an admin) logs and advances progress."""
    if actor.role == ActorRole.ADMIN:
        return True
    return program.client_id is not None and program.client_id == actor.id
