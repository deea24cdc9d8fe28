from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import CheckInStrategyFactory
from .attendance.service import AttendanceService
from .attendance.window import CheckInWindow
from .core import constants
from .refunds.engine import RefundEligibilityEngine
from .refunds.service import SettlementService
from .storage.memory import (
    InMemoryAttendanceRepository,
    InMemoryDepositSettingRepository,
    InMemoryParticipantRepository,
    InMemoryReviewRepository,
    InMemorySessionRepository,
    InMemoryStore,
    InMemorySurveyRepository,
    InMemoryTokenIssuanceRepository,
)
from .tokens.codec import CheckInTokenCodec
from .tokens.service import CheckInTokenService


@dataclass
class CheckInConfig:
    token_secret: str
    base_url: str
    validity_window_ms: int = constants.VALIDITY_WINDOW_MS
    late_threshold_min: int = constants.LATE_THRESHOLD_MIN
    absent_threshold_min: int = constants.ABSENT_THRESHOLD_MIN
    admissible_before_min: int = constants.ADMISSIBLE_BEFORE_MIN
    admissible_default_duration_min: int = constants.ADMISSIBLE_DEFAULT_DURATION_MIN
    eligibility_threshold_pct: int = constants.ELIGIBILITY_THRESHOLD_PCT
    refresh_threshold_seconds: int = constants.REFRESH_THRESHOLD_SECONDS
    default_deposit_amount: int = constants.DEFAULT_DEPOSIT_AMOUNT


@dataclass(frozen=True)
class Container:
    store: InMemoryStore

    sessions_repo: InMemorySessionRepository
    participants_repo: InMemoryParticipantRepository
    attendance_repo: InMemoryAttendanceRepository
    issuances_repo: InMemoryTokenIssuanceRepository
    reviews_repo: InMemoryReviewRepository
    deposit_settings_repo: InMemoryDepositSettingRepository
    surveys_repo: InMemorySurveyRepository

    token_service: CheckInTokenService
    attendance_service: AttendanceService
    settlement_service: SettlementService


def build_container(*, checkin_config: dict, store: Optional[InMemoryStore] = None) -> Container:
    config = CheckInConfig(
        token_secret=str(checkin_config["token_secret"]),
        base_url=str(checkin_config["base_url"]),
        validity_window_ms=int(checkin_config.get("validity_window_ms", constants.VALIDITY_WINDOW_MS)),
        late_threshold_min=int(checkin_config.get("late_threshold_min", constants.LATE_THRESHOLD_MIN)),
        absent_threshold_min=int(checkin_config.get("absent_threshold_min", constants.ABSENT_THRESHOLD_MIN)),
        admissible_before_min=int(checkin_config.get("admissible_before_min", constants.ADMISSIBLE_BEFORE_MIN)),
        admissible_default_duration_min=int(
            checkin_config.get("admissible_default_duration_min", constants.ADMISSIBLE_DEFAULT_DURATION_MIN)
        ),
        eligibility_threshold_pct=int(
            checkin_config.get("eligibility_threshold_pct", constants.ELIGIBILITY_THRESHOLD_PCT)
        ),
        refresh_threshold_seconds=int(
            checkin_config.get("refresh_threshold_seconds", constants.REFRESH_THRESHOLD_SECONDS)
        ),
        default_deposit_amount=int(checkin_config.get("default_deposit_amount", constants.DEFAULT_DEPOSIT_AMOUNT)),
    )
    store = store or InMemoryStore.get_instance()

    sessions_repo = InMemorySessionRepository(store)
    participants_repo = InMemoryParticipantRepository(store)
    attendance_repo = InMemoryAttendanceRepository(store)
    issuances_repo = InMemoryTokenIssuanceRepository(store)
    reviews_repo = InMemoryReviewRepository(store)
    deposit_settings_repo = InMemoryDepositSettingRepository(store)
    surveys_repo = InMemorySurveyRepository(store)

    codec = CheckInTokenCodec(config.token_secret, validity_window_ms=config.validity_window_ms)
    window = CheckInWindow(
        late_threshold_min=config.late_threshold_min,
        absent_threshold_min=config.absent_threshold_min,
        admissible_before_min=config.admissible_before_min,
        admissible_default_duration_min=config.admissible_default_duration_min,
    )

    token_service = CheckInTokenService(
        codec,
        sessions_repo,
        issuances_repo,
        base_url=config.base_url,
        refresh_threshold_seconds=config.refresh_threshold_seconds,
    )
    attendance_service = AttendanceService(
        attendance_repo,
        sessions_repo,
        participants_repo,
        token_service,
        window=window,
        strategy_factory=CheckInStrategyFactory(),
    )
    settlement_service = SettlementService(
        sessions_repo,
        participants_repo,
        attendance_repo,
        reviews_repo,
        deposit_settings=deposit_settings_repo,
        surveys=surveys_repo,
        engine=RefundEligibilityEngine(config.eligibility_threshold_pct),
        default_deposit_amount=config.default_deposit_amount,
    )

    return Container(
        store=store,
        sessions_repo=sessions_repo,
        participants_repo=participants_repo,
        attendance_repo=attendance_repo,
        issuances_repo=issuances_repo,
        reviews_repo=reviews_repo,
        deposit_settings_repo=deposit_settings_repo,
        surveys_repo=surveys_repo,
        token_service=token_service,
        attendance_service=attendance_service,
        settlement_service=settlement_service,
    )
