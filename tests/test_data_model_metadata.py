from __future__ import annotations

from sqlalchemy import CheckConstraint, UniqueConstraint

from app.db.models import (  # noqa: F401
    FreeDrinkWindow,
    LoyaltyMilestone,
    Profile,
    Redemption,
    UserPoints,
    UserQRToken,
    Venue,
    VenueDrink,
    VenueMembership,
)
from app.db.models.base import Base


def _check_names(table_name: str) -> set[str | None]:
    table = Base.metadata.tables[table_name]
    return {constraint.name for constraint in table.constraints if isinstance(constraint, CheckConstraint)}


def _index_names(table_name: str) -> set[str | None]:
    return {index.name for index in Base.metadata.tables[table_name].indexes}


def test_all_tables_registered() -> None:
    expected_tables = {
        "profiles",
        "venues",
        "venue_memberships",
        "venue_drinks",
        "free_drink_windows",
        "redemptions",
        "user_qr_tokens",
        "user_points",
        "loyalty_milestones",
    }
    assert expected_tables == set(Base.metadata.tables)


def test_critical_constraints_present() -> None:
    assert "ck_redemptions_status" in _check_names("redemptions")
    assert "ck_free_drink_windows_same_day" in _check_names("free_drink_windows")
    assert "ck_free_drink_windows_days" in _check_names("free_drink_windows")
    assert "ck_user_points_balance_non_negative" in _check_names("user_points")
    assert "ck_venue_memberships_role" in _check_names("venue_memberships")

    loyalty_milestones = Base.metadata.tables["loyalty_milestones"]
    milestone_unique_constraints = {
        constraint.name
        for constraint in loyalty_milestones.constraints
        if isinstance(constraint, UniqueConstraint)
    }
    assert "uq_loyalty_milestones_user_venue_type" in milestone_unique_constraints
    assert "idx_loyalty_milestones_pending" in _index_names("loyalty_milestones")


def test_redemption_indexes_cover_cap_and_history_queries() -> None:
    redemption_indexes = _index_names("redemptions")
    assert "idx_redemptions_venue_status_time" in redemption_indexes
    assert "idx_redemptions_user_venue_status" in redemption_indexes
    assert "idx_redemptions_status_time" in redemption_indexes


def test_redemption_metadata_column_keeps_sql_name() -> None:
    redemptions = Base.metadata.tables["redemptions"]
    assert "metadata" in redemptions.columns
    assert Redemption.metadata_.property.columns[0].name == "metadata"


def test_qr_token_hash_is_unique() -> None:
    token_hash = Base.metadata.tables["user_qr_tokens"].columns["token_hash"]
    assert token_hash.unique is True


def test_qr_token_backs_at_most_one_redemption() -> None:
    user_qr_tokens = Base.metadata.tables["user_qr_tokens"]
    unique_constraints = {
        constraint.name
        for constraint in user_qr_tokens.constraints
        if isinstance(constraint, UniqueConstraint)
    }
    assert "uq_user_qr_tokens_redemption_id" in unique_constraints
    redemption_id = user_qr_tokens.columns["redemption_id"]
    assert redemption_id.nullable is True
    assert {fk.column.table.name for fk in redemption_id.foreign_keys} == {"redemptions"}
