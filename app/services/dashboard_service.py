"""
Dashboard assembly: turns processing records into the view model the UI renders.
"""
from collections import Counter
from datetime import datetime, timedelta
from pathlib import PurePath
from typing import Iterable, Optional

from app.core import clock
from app.core.exceptions import ValidationError
from app.schemas.dashboard import (
    ChartData,
    DashboardStats,
    DashboardViewModel,
    ProcessingRecord,
    ProcessingStatusEnum,
    RecentActivity,
    TypeStatistic,
)

BADGE_CLASSES = {
    "autuacao": "bg-danger",
    "defesa": "bg-primary",
    "notificacao_penalidade": "bg-warning",
    "outros": "bg-secondary",
}
DEFAULT_BADGE_CLASS = "bg-secondary"

PROGRESS_BAR_CLASSES = {
    "autuacao": "bg-danger",
    "defesa": "bg-primary",
    "notificacao_penalidade": "bg-warning",
    "outros": "bg-secondary",
}
DEFAULT_PROGRESS_BAR_CLASS = "bg-info"

ICON_CLASSES = {
    "pdf": "fas fa-file-pdf",
    "png": "fas fa-file-image",
    "jpg": "fas fa-file-image",
    "jpeg": "fas fa-file-image",
    "tif": "fas fa-file-image",
    "tiff": "fas fa-file-image",
    "doc": "fas fa-file-word",
    "docx": "fas fa-file-word",
    "txt": "fas fa-file-alt",
}
DEFAULT_ICON_CLASS = "fas fa-file"

JUST_NOW_LABEL = "Agora"


def format_time_ago(moment: datetime, now: datetime) -> str:
    """Short relative time: "Agora", "5m", "3h", or the date past a day."""
    moment = clock.as_utc(moment)
    elapsed = (clock.as_utc(now) - moment).total_seconds()

    if elapsed < 60:
        return JUST_NOW_LABEL
    if elapsed < 3600:
        return f"{int(elapsed // 60)}m"
    if elapsed < 86400:
        return f"{int(elapsed // 3600)}h"
    return moment.strftime("%d/%m/%Y")


def file_extension(file_name: str) -> str:
    return PurePath(file_name).suffix.lstrip(".").lower()


def badge_class_for(document_type: str) -> str:
    return BADGE_CLASSES.get(document_type.lower(), DEFAULT_BADGE_CLASS)


def progress_bar_class_for(document_type: str) -> str:
    return PROGRESS_BAR_CLASSES.get(document_type.lower(), DEFAULT_PROGRESS_BAR_CLASS)


def icon_class_for(extension: str) -> str:
    return ICON_CLASSES.get(extension.lower(), DEFAULT_ICON_CLASS)


def _percentage(part: int, whole: int) -> float:
    if whole == 0:
        return 0.0
    return round((part / whole) * 100, 1)


class DashboardService:
    """Service for assembling the dashboard view model."""

    @staticmethod
    def build_stats(records: list[ProcessingRecord], active_users: int = 0) -> DashboardStats:
        status_counts = Counter(record.status for record in records)
        completed = status_counts[ProcessingStatusEnum.COMPLETED]
        failed = status_counts[ProcessingStatusEnum.FAILED]

        return DashboardStats(
            total_documents=len(records),
            success_rate=_percentage(completed, completed + failed),
            active_users=active_users,
            processing_count=status_counts[ProcessingStatusEnum.PROCESSING],
        )

    @staticmethod
    def build_recent_activities(
        records: list[ProcessingRecord], now: datetime, limit: int = 10
    ) -> list[RecentActivity]:
        """Newest records first, decorated for the activity feed."""
        if limit < 0:
            raise ValidationError("recent_limit cannot be negative")

        newest = sorted(
            records, key=lambda r: clock.as_utc(r.processed_at), reverse=True
        )[:limit]

        activities = []
        for record in newest:
            extension = file_extension(record.file_name)
            activities.append(RecentActivity(
                file_name=record.file_name,
                classification=record.document_type,
                processed_at=clock.as_utc(record.processed_at),
                file_extension=extension,
                time_ago=format_time_ago(record.processed_at, now),
                badge_class=badge_class_for(record.document_type),
                icon_class=icon_class_for(extension),
            ))
        return activities

    @staticmethod
    def build_chart_data(
        records: list[ProcessingRecord], now: datetime, days: int = 7
    ) -> ChartData:
        """Documents processed per day over the last N days, oldest first."""
        if days < 1:
            raise ValidationError("chart_days must be at least 1")

        today = clock.as_utc(now).date()
        start_date = today - timedelta(days=days - 1)

        counts_map = Counter(
            clock.as_utc(record.processed_at).date() for record in records
        )

        chart = ChartData()
        for i in range(days):
            d = start_date + timedelta(days=i)
            chart.labels.append(d.strftime("%d/%m"))
            chart.values.append(counts_map.get(d, 0))
        return chart

    @staticmethod
    def build_type_statistics(records: list[ProcessingRecord]) -> list[TypeStatistic]:
        """Per-type counts, most frequent first."""
        type_counts = Counter(record.document_type for record in records)
        total = len(records)

        ordered = sorted(type_counts.items(), key=lambda item: (-item[1], item[0]))
        return [
            TypeStatistic(
                type=doc_type,
                count=count,
                percentage=_percentage(count, total),
                progress_bar_class=progress_bar_class_for(doc_type),
            )
            for doc_type, count in ordered
        ]

    @staticmethod
    def build_view_model(
        records: Iterable[ProcessingRecord],
        active_users: int = 0,
        now: Optional[datetime] = None,
        recent_limit: int = 10,
        chart_days: int = 7,
    ) -> DashboardViewModel:
        now = now or clock.utcnow()
        records = list(records)

        return DashboardViewModel(
            stats=DashboardService.build_stats(records, active_users),
            recent_activities=DashboardService.build_recent_activities(
                records, now, recent_limit
            ),
            chart_data=DashboardService.build_chart_data(records, now, chart_days),
            type_statistics=DashboardService.build_type_statistics(records),
        )
