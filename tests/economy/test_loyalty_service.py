from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace
from uuid import UUID

import pytest

from app.economy.loyalty import service
from app.economy.loyalty.errors import MilestoneNotFoundError, MilestoneRewardAlreadySentError
from app.economy.loyalty.types import MilestoneType, RewardType
from tests.economy.helpers import DummySessionLocal

NOW_UTC = datetime(2024, 1, 17, 11, 0, tzinfo=timezone.utc)
USER_ID = UUID("00000000-0000-0000-0000-0000000000c1")
VENUE_ID = UUID("00000000-0000-0000-0000-00000000a001")
MILESTONE_ID = UUID("00000000-0000-0000-0000-0000000000f9")


@pytest.fixture
def notifications(monkeypatch) -> list[dict[str, object]]:
    sent: list[dict[str, object]] = []

    async def _send(*, event: str, audience: str, payload: dict[str, object]) -> bool:
        sent.append({"event": event, "audience": audience, "payload": payload})
        return True

    monkeypatch.setattr(service, "SessionLocal", DummySessionLocal())
    monkeypatch.setattr(service, "send_notification", _send)
    return sent


def _patch_pair_store(
    monkeypatch,
    *,
    visits: int,
    existing_types: list[str],
    inserted_types: set[str] | None = None,
) -> None:
    async def _get_venue(session, venue_id):  # noqa: ARG001
        return SimpleNamespace(id=venue_id, timezone="Europe/Budapest")

    async def _history(session, *, user_id, venue_id):  # noqa: ARG001
        return [(NOW_UTC - timedelta(hours=index), Decimal("1000")) for index in range(visits)]

    async def _existing(session, *, user_id, venue_id):  # noqa: ARG001
        return existing_types

    async def _insert(session, *, milestone_type, **kwargs):  # noqa: ARG001
        return inserted_types is None or milestone_type in inserted_types

    monkeypatch.setattr(service.VenuesRepo, "get_by_id", _get_venue)
    monkeypatch.setattr(service.RedemptionsRepo, "list_success_history", _history)
    monkeypatch.setattr(service.MilestonesRepo, "list_types_for_pair", _existing)
    monkeypatch.setattr(service.MilestonesRepo, "insert_if_absent", _insert)


@pytest.mark.asyncio
async def test_first_redemption_records_first_visit_without_alert(monkeypatch, notifications) -> None:
    _patch_pair_store(monkeypatch, visits=1, existing_types=[])

    recorded = await service.LoyaltyService.on_redemption_success(
        user_id=USER_ID,
        venue_id=VENUE_ID,
        now_utc=NOW_UTC,
    )

    assert [milestone.milestone_type for milestone in recorded] == [MilestoneType.FIRST_VISIT]
    assert recorded[0].total_spend == Decimal("1000")
    assert notifications == []


@pytest.mark.asyncio
async def test_weekly_regular_notifies_admins(monkeypatch, notifications) -> None:
    _patch_pair_store(monkeypatch, visits=3, existing_types=["first_visit"])

    recorded = await service.LoyaltyService.on_redemption_success(
        user_id=USER_ID,
        venue_id=VENUE_ID,
        now_utc=NOW_UTC,
    )

    assert {milestone.milestone_type for milestone in recorded} == {
        MilestoneType.RETURNING,
        MilestoneType.WEEKLY_REGULAR,
    }
    assert len(notifications) == 1
    assert notifications[0]["event"] == "loyalty_milestone_reached"
    assert notifications[0]["audience"] == "admin"
    assert notifications[0]["payload"]["milestone_type"] == "weekly_regular"
    assert notifications[0]["payload"]["milestone_label"] == "Heti Törzsvendég"


@pytest.mark.asyncio
async def test_concurrent_insert_loser_records_nothing(monkeypatch, notifications) -> None:
    _patch_pair_store(monkeypatch, visits=3, existing_types=["first_visit"], inserted_types=set())

    recorded = await service.LoyaltyService.on_redemption_success(
        user_id=USER_ID,
        venue_id=VENUE_ID,
        now_utc=NOW_UTC,
    )

    assert recorded == []
    assert notifications == []


@pytest.mark.asyncio
async def test_pending_alerts_fall_back_to_unknown_names(monkeypatch, notifications) -> None:
    other_venue_id = UUID("00000000-0000-0000-0000-00000000a002")
    milestones = [
        SimpleNamespace(
            id=MILESTONE_ID,
            user_id=USER_ID,
            venue_id=VENUE_ID,
            milestone_type="weekly_regular",
            visit_count=3,
            total_spend=Decimal("4500.00"),
            achieved_at=NOW_UTC,
            reward_sent=False,
        ),
        SimpleNamespace(
            id=UUID("00000000-0000-0000-0000-0000000000fa"),
            user_id=USER_ID,
            venue_id=other_venue_id,
            milestone_type="monthly_vip",
            visit_count=12,
            total_spend=Decimal("18000.00"),
            achieved_at=NOW_UTC,
            reward_sent=False,
        ),
    ]

    async def _pending(session, *, limit):  # noqa: ARG001
        assert limit == 50
        return milestones

    async def _user_names(session, profile_ids):  # noqa: ARG001
        return {}

    async def _venue_names(session, venue_ids):  # noqa: ARG001
        return {VENUE_ID: "Bar Budapest"}

    async def _count_today(session, *, since_utc):  # noqa: ARG001
        return 7

    monkeypatch.setattr(service, "get_settings", lambda: SimpleNamespace(default_venue_timezone="Europe/Budapest"))
    monkeypatch.setattr(service.MilestonesRepo, "list_pending_alerts", _pending)
    monkeypatch.setattr(service.MilestonesRepo, "count_achieved_since", _count_today)
    monkeypatch.setattr(service.ProfilesRepo, "get_names", _user_names)
    monkeypatch.setattr(service.VenuesRepo, "get_names", _venue_names)

    alerts, summary = await service.LoyaltyService.pending_alerts(now_utc=NOW_UTC)

    assert [alert.venue_name for alert in alerts] == ["Bar Budapest", "Ismeretlen"]
    assert alerts[0].user_name == "Ismeretlen"
    assert alerts[0].milestone_label == "Heti Törzsvendég"
    assert alerts[1].suggested_reward == "free_dessert"
    assert summary.pending_count == 2
    assert summary.today_total == 7
    assert summary.by_type == {"weekly_regular": 1, "monthly_vip": 1}


@pytest.mark.asyncio
async def test_dismiss_unknown_milestone(monkeypatch, notifications) -> None:
    async def _mark_dismissed(session, *, milestone_id):  # noqa: ARG001
        return False

    monkeypatch.setattr(service.MilestonesRepo, "mark_dismissed", _mark_dismissed)

    with pytest.raises(MilestoneNotFoundError):
        await service.LoyaltyService.dismiss(milestone_id=MILESTONE_ID)


@pytest.mark.asyncio
async def test_send_reward_rejects_already_rewarded_milestone(monkeypatch, notifications) -> None:
    async def _get_for_update(session, milestone_id):  # noqa: ARG001
        return SimpleNamespace(id=milestone_id, reward_sent=True)

    monkeypatch.setattr(service.MilestonesRepo, "get_by_id_for_update", _get_for_update)

    with pytest.raises(MilestoneRewardAlreadySentError):
        await service.LoyaltyService.send_reward(
            milestone_id=MILESTONE_ID,
            reward_type=RewardType.FREE_DRINK,
            points_amount=None,
            message=None,
            now_utc=NOW_UTC,
        )
    assert notifications == []


@pytest.mark.asyncio
async def test_send_bonus_points_reward_credits_points_and_notifies_user(
    monkeypatch, notifications
) -> None:
    credited: list[int] = []
    marked: list[dict[str, object]] = []

    async def _get_for_update(session, milestone_id):  # noqa: ARG001
        return SimpleNamespace(
            id=milestone_id,
            user_id=USER_ID,
            venue_id=VENUE_ID,
            milestone_type="weekly_regular",
            reward_sent=False,
        )

    async def _add_points(session, *, user_id, amount, now_utc):  # noqa: ARG001
        credited.append(amount)
        return amount

    async def _mark_reward_sent(session, **kwargs):  # noqa: ARG001
        marked.append(kwargs)
        return True

    async def _user_names(session, profile_ids):  # noqa: ARG001
        return {USER_ID: "Anna"}

    async def _venue_names(session, venue_ids):  # noqa: ARG001
        return {VENUE_ID: "Bar Budapest"}

    monkeypatch.setattr(service.MilestonesRepo, "get_by_id_for_update", _get_for_update)
    monkeypatch.setattr(service.MilestonesRepo, "mark_reward_sent", _mark_reward_sent)
    monkeypatch.setattr(service.ProfilesRepo, "add_points", _add_points)
    monkeypatch.setattr(service.ProfilesRepo, "get_names", _user_names)
    monkeypatch.setattr(service.VenuesRepo, "get_names", _venue_names)

    result = await service.LoyaltyService.send_reward(
        milestone_id=MILESTONE_ID,
        reward_type=RewardType.BONUS_POINTS,
        points_amount=200,
        message=None,
        now_utc=NOW_UTC,
    )

    assert credited == [200]
    assert marked[0]["reward_type"] == "bonus_points"
    assert result.label == "200 bónusz pont"
    assert result.user_name == "Anna"
    assert result.venue_name == "Bar Budapest"
    assert len(notifications) == 1
    assert notifications[0]["audience"] == "user"
    assert "Bar Budapest" in str(notifications[0]["payload"]["body"])


async def test_scan_recent_defaults_to_trailing_day(monkeypatch, notifications) -> None:
    captured: dict[str, object] = {}

    async def _pairs(session, *, since_utc, user_id, venue_id):  # noqa: ARG001
        captured["since_utc"] = since_utc
        return []

    monkeypatch.setattr(service.RedemptionsRepo, "list_success_pairs_since", _pairs)

    recorded = await service.LoyaltyService.scan_recent(now_utc=NOW_UTC)

    assert recorded == []
    assert captured["since_utc"] == NOW_UTC - timedelta(hours=24)
    assert notifications == []
