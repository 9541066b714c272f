from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class EntityTypeRow(Base):
    __tablename__ = 'entity_types'

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    # Stored as JSON so the schema works on both PostgreSQL and SQLite.
    entity_meta: Mapped[dict[str, Any]] = mapped_column(JSON, name='metadata')


class ActionRow(Base):
    __tablename__ = 'actions'

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    applicable_entity_types: Mapped[list[str]] = mapped_column(JSON)
    action_meta: Mapped[dict[str, Any]] = mapped_column(JSON, name='metadata')


class UIBindingRow(Base):
    __tablename__ = 'ui_bindings'

    action_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    selector: Mapped[str] = mapped_column(String(1000))
    selector_type: Mapped[str] = mapped_column(String(32))
    binding_meta: Mapped[dict[str, Any]] = mapped_column(JSON, name='metadata')


class PlanRow(Base):
    __tablename__ = 'plans'

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    entity_type_id: Mapped[str] = mapped_column(String(255))
    entity_id: Mapped[str] = mapped_column(String(255))
    action_id: Mapped[str] = mapped_column(String(255))
    status: Mapped[str] = mapped_column(String(32))

    steps: Mapped[list['PlanStepRow']] = relationship(
        back_populates='plan',
        cascade='all, delete-orphan',
        order_by='PlanStepRow.step_index',
    )


class PlanStepRow(Base):
    __tablename__ = 'plan_steps'

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    plan_id: Mapped[str] = mapped_column(ForeignKey('plans.id', ondelete='CASCADE'), index=True)
    step_index: Mapped[int] = mapped_column()
    type: Mapped[str] = mapped_column(String(32))
    target: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    explanation: Mapped[str | None] = mapped_column(Text, nullable=True)
    parameters: Mapped[dict[str, Any]] = mapped_column(JSON)

    plan: Mapped['PlanRow'] = relationship(back_populates='steps')


class ExecutionResultRow(Base):
    __tablename__ = 'execution_results'

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    plan_id: Mapped[str] = mapped_column(String(64), unique=True)
    success: Mapped[bool] = mapped_column(Boolean)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    finished_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    log_entries: Mapped[list['ExecutionLogEntryRow']] = relationship(
        back_populates='execution_result',
        cascade='all, delete-orphan',
        order_by='ExecutionLogEntryRow.step_index',
    )


class ExecutionLogEntryRow(Base):
    __tablename__ = 'execution_log_entries'

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    execution_result_id: Mapped[int] = mapped_column(ForeignKey('execution_results.id', ondelete='CASCADE'),
                                                     index=True)
    plan_id: Mapped[str] = mapped_column(String(64))
    step_index: Mapped[int] = mapped_column()
    step_type: Mapped[str] = mapped_column(String(32))
    step_target: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    step_explanation: Mapped[str | None] = mapped_column(Text, nullable=True)
    step_parameters: Mapped[dict[str, Any]] = mapped_column(JSON)
    success: Mapped[bool] = mapped_column(Boolean)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration_ms: Mapped[int] = mapped_column()
    artifact_ref: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    # The outcome may describe a different target than the step, e.g. agent initialization.
    outcome_step_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    outcome_step_target: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    executed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    logged_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    execution_result: Mapped['ExecutionResultRow'] = relationship(back_populates='log_entries')
