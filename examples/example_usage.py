"""Example: use the service layer directly (no Flask).

Issues a check-in token for the demo book club, checks a member in with it
and prints the member's deposit settlement.
"""

import importlib
from datetime import timedelta

from config import get_settings_module

from src.program_attendance.program_attendance.common.datetime_utils import now_local
from src.program_attendance.program_attendance.container import build_container
from src.program_attendance.program_attendance.core.enums import Role
from src.program_attendance.program_attendance.storage.memory import InMemoryStore
from src.program_attendance.program_attendance.storage.seed import DEMO_PROGRAM_ID, seed_demo


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(checkin_config=settings.CHECKIN_CONFIG, store=InMemoryStore())
    now = now_local()
    seed_demo(container.store, now=now)

    issued = container.token_service.issue(current_role=Role.ORGANIZER, session_id=f"{DEMO_PROGRAM_ID}-s2", now=now)
    print(issued.to_dict())

    result = container.attendance_service.check_in_with_token(
        user_id="member", token=issued.token, now=now + timedelta(minutes=12)
    )
    print(result.to_dict())

    settlement = container.settlement_service.settlement(program_id=DEMO_PROGRAM_ID, user_id="member", now=now)
    print(settlement.to_dict())

    refund = container.settlement_service.policy_refund(program_id=DEMO_PROGRAM_ID, user_id="member", now=now)
    print(refund.to_dict())


if __name__ == "__main__":
    main()
