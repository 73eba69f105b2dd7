"""Asset and PM task template SQLModels.

Both tables are owned by other parts of the platform; the engine only reads
them.
"""

from datetime import datetime

from sqlmodel import Field, SQLModel

from pm_engine.domain.maintenance.value_objects.recurrence import utc_now


class AssetBase(SQLModel):
    """Base asset fields."""

    name: str = Field(min_length=1, max_length=255)
    organization_id: int = Field(index=True)


class Asset(AssetBase, table=True):
    """Asset table model."""

    __tablename__ = "assets"

    id: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)


class PMTaskBase(SQLModel):
    """Base PM task template fields."""

    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None)
    procedure: str | None = Field(default=None)
    organization_id: int = Field(index=True)
    is_active: bool = Field(default=True)


class PMTask(PMTaskBase, table=True):
    """
    PM task template table model.

    Reusable checklist items attached to schedules and snapshotted into
    work order tasks when work is materialized.
    """

    __tablename__ = "pm_tasks"

    id: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(
        default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}
    )
