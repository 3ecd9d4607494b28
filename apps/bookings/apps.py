from django.apps import AppConfig  # type: ignore


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"
    label = "bookings"
    verbose_name = "Bookings"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .application.command_handlers import (
            CancelBookingCommand,
            CancelBookingHandler,
            CreateBookingCommand,
            CreateBookingHandler,
        )

        message_bus.register_command_handler(CreateBookingCommand, CreateBookingHandler().handle)
        message_bus.register_command_handler(CancelBookingCommand, CancelBookingHandler().handle)
