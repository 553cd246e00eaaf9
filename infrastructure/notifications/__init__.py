from infrastructure.notifications.notification_service import SupabaseNotificationService

__all__ = [
    "SupabaseNotificationService",
]
