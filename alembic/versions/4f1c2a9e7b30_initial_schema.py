"""queues and messages"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

message_status = sa.Enum("pending", "processing", name="message_status")


def upgrade():
    op.create_table(
        "queues",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=25), nullable=False, unique=True),
    )
    op.create_index("ix_queues_id", "queues", ["id"])

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("queue_id", sa.Integer(), sa.ForeignKey("queues.id"), nullable=False),
        sa.Column(
            "creation_time",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "update_time",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "status",
            message_status,
            nullable=False,
            server_default="pending",
        ),
        sa.Column("token", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("content", sa.Text(), nullable=False),
    )
    op.create_index("ix_messages_id", "messages", ["id"])
    op.create_index("ix_messages_queue_status", "messages", ["queue_id", "status"])
    op.create_index("ix_messages_queue_token", "messages", ["queue_id", "token"])


def downgrade():
    op.drop_index("ix_messages_queue_token", table_name="messages")
    op.drop_index("ix_messages_queue_status", table_name="messages")
    op.drop_index("ix_messages_id", table_name="messages")
    op.drop_table("messages")
    op.drop_index("ix_queues_id", table_name="queues")
    op.drop_table("queues")
    message_status.drop(op.get_bind(), checkfirst=True)
