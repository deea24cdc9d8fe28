from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import DepositSetting, ReviewSubmission


class ReviewRepository(Protocol):
    def list_for_user(self, program_id: str, user_id: str) -> Sequence[ReviewSubmission]:
        """Write-ups the user submitted for the program's sessions (at most one per session)."""

        raise NotImplementedError


class DepositSettingRepository(Protocol):
    def get_for_program(self, program_id: str) -> Optional[DepositSetting]:
        raise NotImplementedError


class SurveyRepository(Protocol):
    def has_submitted(self, program_id: str, user_id: str) -> bool:
        raise NotImplementedError
