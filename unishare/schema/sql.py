"""Tables the job handlers read for input validation and entitlement checks."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from unishare.core.database import Base


class Document(Base):
  __tablename__ = "study_documents"

  id: Mapped[str] = mapped_column(String, primary_key=True)
  user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
  name: Mapped[str] = mapped_column(String, nullable=False)
  type: Mapped[str | None] = mapped_column(String, nullable=True)
  size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
  # pending | processing | ready | failed
  status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
  # file | text | youtube
  source: Mapped[str] = mapped_column(String, nullable=False, default="file")
  storage_path: Mapped[str | None] = mapped_column(String, nullable=True)
  original_url: Mapped[str | None] = mapped_column(String, nullable=True)
  content: Mapped[str | None] = mapped_column(Text, nullable=True)
  page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
  text_chunks: Mapped[list[Any] | None] = mapped_column(JSONB, nullable=True)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class LectureRecording(Base):
  __tablename__ = "lecture_recordings"

  id: Mapped[str] = mapped_column(String, primary_key=True)
  user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
  title: Mapped[str] = mapped_column(String, nullable=False)
  transcript: Mapped[str | None] = mapped_column(Text, nullable=True)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Subscription(Base):
  __tablename__ = "subscriptions"

  id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
  user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
  status: Mapped[str] = mapped_column(String, nullable=False)
  # Unix seconds; null means the period never lapses.
  current_period_end: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TemporaryScholarAccess(Base):
  __tablename__ = "temporary_scholar_access"

  id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
  user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
  is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
  expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
  points_spent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
  access_duration_hours: Mapped[int] = mapped_column(Integer, nullable=False)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
