"""Create legs, dart throws, game stats and results tables"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "20261017_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "legs",
        sa.Column("match_id", sa.String(length=64), primary_key=True),
        sa.Column("leg_number", sa.Integer(), primary_key=True),
        sa.Column("side", sa.String(length=8), primary_key=True),
        sa.Column("player_id", sa.String(length=64), nullable=True),
        sa.Column("starting_score", sa.Integer(), nullable=False),
        sa.Column("final_score", sa.Integer(), nullable=False),
        sa.Column("won", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "dart_throws",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("match_id", sa.String(length=64), nullable=False),
        sa.Column("leg_number", sa.Integer(), nullable=False),
        sa.Column("side", sa.String(length=8), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("dart_id", sa.String(length=64), nullable=False),
        sa.Column("turn_number", sa.Integer(), nullable=False),
        sa.Column("dart_number", sa.Integer(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("running_score", sa.Integer(), nullable=False),
        sa.Column("is_double_attempt", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_checkout_attempt", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("checkout_successful", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_bust", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("thrown_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("player_id", sa.String(length=64), nullable=True),
        sa.ForeignKeyConstraint(
            ["match_id", "leg_number", "side"],
            ["legs.match_id", "legs.leg_number", "legs.side"],
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_dart_throws_leg", "dart_throws", ["match_id", "leg_number", "side"]
    )

    op.create_table(
        "game_stats",
        sa.Column("match_id", sa.String(length=64), primary_key=True),
        sa.Column("side", sa.String(length=8), primary_key=True),
        sa.Column("player_id", sa.String(length=64), nullable=False),
        sa.Column("player_name", sa.String(length=255), nullable=False),
        sa.Column("game_won", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("legs_played", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("legs_won", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_darts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("average", sa.Float(), nullable=False, server_default="0"),
        sa.Column("three_dart_average", sa.Float(), nullable=False, server_default="0"),
        sa.Column("scores_80_plus", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("scores_100_plus", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("scores_140_plus", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("scores_180", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("double_attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("double_hits", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("double_percentage", sa.Float(), nullable=False, server_default="0"),
        sa.Column("checkout_attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("checkout_hits", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("checkout_percentage", sa.Float(), nullable=False, server_default="0"),
        sa.Column("highest_checkout", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("highest_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("finish_positions", sa.JSON(), nullable=False),
        sa.Column("played_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_game_stats_player_id", "game_stats", ["player_id"])

    op.create_table(
        "game_results",
        sa.Column("match_id", sa.String(length=64), primary_key=True),
        sa.Column("home_name", sa.String(length=255), nullable=False),
        sa.Column("away_name", sa.String(length=255), nullable=False),
        sa.Column("starting_score", sa.Integer(), nullable=False),
        sa.Column("leg_format", sa.String(length=8), nullable=False),
        sa.Column("game_type", sa.String(length=16), nullable=False),
        sa.Column("home_legs_won", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("away_legs_won", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("winner", sa.String(length=8), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("game_results")
    op.drop_index("ix_game_stats_player_id", table_name="game_stats")
    op.drop_table("game_stats")
    op.drop_index("ix_dart_throws_leg", table_name="dart_throws")
    op.drop_table("dart_throws")
    op.drop_table("legs")
