from django.apps import AppConfig  # type: ignore


class FinancesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.finances"
    label = "finances"
    verbose_name = "Finances"

    def ready(self) -> None:
        from apps.bookings.domain.events import BookingCancelled
        from shared.application.message_bus import message_bus

        from .application.command_handlers import (
            ConfirmPaymentCommand,
            ConfirmPaymentHandler,
            log_refund_handoff,
        )

        message_bus.register_command_handler(ConfirmPaymentCommand, ConfirmPaymentHandler().handle)
        message_bus.register_event_handler(BookingCancelled, log_refund_handoff)
