"""Schema package exports."""

from .jobs import StudyJob
from .sql import Document, LectureRecording, Subscription, TemporaryScholarAccess

__all__ = ["Document", "LectureRecording", "StudyJob", "Subscription", "TemporaryScholarAccess"]
