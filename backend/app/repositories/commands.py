"""
Order workflow: awaiting -> on_delivery -> delivered.

Every transition is a single conditional UPDATE (or DELETE) whose WHERE
clause carries the legality check, so two suppliers racing to accept the
same command cannot both win. When nothing matched, the row is re-read only
to pick the right error.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from app.core.clock import utcnow
from app.core.exceptions import Forbidden, InvalidTransition, NotFound
from app.models.account import Role
from app.models.command import Command, CommandState
from app.models.medicine import Medicine
from app.schemas.auth import Identity

logger = logging.getLogger(__name__)


class CommandRepository:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Command).options(
            joinedload(Command.medicine),
            joinedload(Command.pharmacy),
            joinedload(Command.fournisseur),
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_for(
        self,
        identity: Identity,
        state: Optional[CommandState] = None,
        pharm_id: Optional[int] = None,
        fournisseur_id: Optional[int] = None,
    ) -> List[Command]:
        """
        List commands with optional filters.

        Pharmacies only ever see their own commands and suppliers only the
        ones bound to them, whatever filters they pass.
        """
        q = self._query()
        if identity.role == Role.PHARMACY:
            pharm_id = identity.id
        elif identity.role == Role.FOURNISSEUR:
            fournisseur_id = identity.id

        if state is not None:
            q = q.filter(Command.state == state.value)
        if pharm_id is not None:
            q = q.filter(Command.pharm_id == pharm_id)
        if fournisseur_id is not None:
            q = q.filter(Command.fournisseur_id == fournisseur_id)
        return q.order_by(Command.start_date.desc(), Command.id.desc()).all()

    def list_pending(self) -> List[Command]:
        return (
            self._query()
            .filter(Command.state == CommandState.AWAITING.value)
            .order_by(Command.start_date.desc(), Command.id.desc())
            .all()
        )

    def get(self, command_id: int) -> Command:
        command = self._query().filter(Command.id == command_id).first()
        if command is None:
            raise NotFound("Command not found")
        return command

    def get_for(self, command_id: int, identity: Identity) -> Command:
        command = self.get(command_id)
        if identity.role == Role.PHARMACY and command.pharm_id != identity.id:
            raise Forbidden(reason=f"pharmacy {identity.id} reading command {command_id}")
        if identity.role == Role.FOURNISSEUR and command.fournisseur_id != identity.id:
            raise Forbidden(reason=f"supplier {identity.id} reading command {command_id}")
        return command

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def create(self, pharmacy_id: int, med_id: int, num_of_units: int) -> Command:
        if self.db.get(Medicine, med_id) is None:
            raise NotFound("Medicine not found")
        command = Command(
            med_id=med_id,
            pharm_id=pharmacy_id,
            num_of_units=num_of_units,
            start_date=utcnow(),
            state=CommandState.AWAITING.value,
            fournisseur_id=None,
        )
        self.db.add(command)
        self.db.commit()
        logger.info(f"[Commands] Pharmacy {pharmacy_id} created command {command.id}")
        return self.get(command.id)

    def accept(self, command_id: int, supplier_id: int) -> Command:
        updated = (
            self.db.query(Command)
            .filter(Command.id == command_id, Command.state == CommandState.AWAITING.value)
            .update(
                {
                    Command.fournisseur_id: supplier_id,
                    Command.state: CommandState.ON_DELIVERY.value,
                },
                synchronize_session=False,
            )
        )
        self.db.commit()
        if not updated:
            self.get(command_id)
            raise InvalidTransition("Command is not in awaiting state")
        logger.info(f"[Commands] Supplier {supplier_id} accepted command {command_id}")
        return self.get(command_id)

    def deliver(self, command_id: int, supplier_id: int) -> Command:
        updated = (
            self.db.query(Command)
            .filter(
                Command.id == command_id,
                Command.fournisseur_id == supplier_id,
                Command.state == CommandState.ON_DELIVERY.value,
            )
            .update({Command.state: CommandState.DELIVERED.value}, synchronize_session=False)
        )
        self.db.commit()
        if not updated:
            command = self.get(command_id)
            if command.fournisseur_id != supplier_id:
                raise Forbidden(reason=f"supplier {supplier_id} is not bound to command {command_id}")
            raise InvalidTransition("Command is not in delivery state")
        logger.info(f"[Commands] Supplier {supplier_id} delivered command {command_id}")
        return self.get(command_id)

    def amend(self, command_id: int, pharmacy_id: int, num_of_units: int) -> Command:
        """Change the quantity. Only the owning pharmacy, only while awaiting."""
        updated = (
            self._owned_awaiting(command_id, pharmacy_id)
            .update({Command.num_of_units: num_of_units}, synchronize_session=False)
        )
        self.db.commit()
        if not updated:
            self._explain_owned_miss(command_id, pharmacy_id, "Cannot update command that is not in awaiting state")
        return self.get(command_id)

    def cancel(self, command_id: int, pharmacy_id: int) -> None:
        """Delete the command. Only the owning pharmacy, only while awaiting."""
        deleted = self._owned_awaiting(command_id, pharmacy_id).delete(synchronize_session=False)
        self.db.commit()
        if not deleted:
            self._explain_owned_miss(command_id, pharmacy_id, "Cannot delete command that is not in awaiting state")
        logger.info(f"[Commands] Pharmacy {pharmacy_id} cancelled command {command_id}")

    def _owned_awaiting(self, command_id: int, pharmacy_id: int):
        return self.db.query(Command).filter(
            Command.id == command_id,
            Command.pharm_id == pharmacy_id,
            Command.state == CommandState.AWAITING.value,
        )

    def _explain_owned_miss(self, command_id: int, pharmacy_id: int, transition_message: str):
        command = self.get(command_id)
        if command.pharm_id != pharmacy_id:
            raise Forbidden(reason=f"pharmacy {pharmacy_id} does not own command {command_id}")
        raise InvalidTransition(transition_message)
