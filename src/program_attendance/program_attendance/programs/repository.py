from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Participant, ProgramSession


class SessionRepository(Protocol):
    def get_by_id(self, session_id: str) -> Optional[ProgramSession]:
        raise NotImplementedError

    def list_for_program(self, program_id: str, *, until: Optional[datetime] = None) -> Sequence[ProgramSession]:
        """Sessions of a program ordered by session number; ``until`` keeps those started by then."""

        raise NotImplementedError


class ParticipantRepository(Protocol):
    def get_by_id(self, participant_id: str) -> Optional[Participant]:
        raise NotImplementedError

    def get_for_user(self, program_id: str, user_id: str) -> Optional[Participant]:
        raise NotImplementedError

    def list_for_program(self, program_id: str) -> Sequence[Participant]:
        raise NotImplementedError
