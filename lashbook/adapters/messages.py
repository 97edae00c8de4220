"""
Spanish message texts for lifecycle notifications.

Texts use WhatsApp's ``*bold*`` markup; ``plain_text`` strips it for email.
"""

from ..domain.lifecycle import Notification, NotificationEvent
from ..domain.models import Appointment

SUBJECTS = {
    NotificationEvent.NEW_APPOINTMENT: "Nueva cita recibida",
    NotificationEvent.DEPOSIT_UPLOADED: "Comprobante de depósito recibido",
    NotificationEvent.CONFIRMED: "Tu cita ha sido confirmada",
    NotificationEvent.CANCELLED: "Cita cancelada",
}


def format_when(appointment: Appointment) -> str:
    """Spanish long date plus start time, e.g. ``martes 20 de octubre de 2026, 10:00``."""
    day = appointment.appointment_date.format("dddd D [de] MMMM [de] YYYY", locale="es")
    return f"{day}, {appointment.interval.start_string()}"


def render_message(notification: Notification) -> str:
    """Build the message text for a notification."""
    appointment = notification.appointment
    when = format_when(appointment)
    header = f"*{SUBJECTS[notification.event]}*\n\n"

    if notification.event == NotificationEvent.NEW_APPOINTMENT:
        return header + (
            f"Servicio: {appointment.service_name}\n"
            f"Fecha: {when}\n"
            f"Precio: ${appointment.service_price:g}\n\n"
            "Estado: pendiente de confirmación. "
            "Revisa la aplicación para confirmarla o rechazarla."
        )

    if notification.event == NotificationEvent.DEPOSIT_UPLOADED:
        return header + (
            f"Cita: {when}\n"
            f"Servicio: {appointment.service_name}\n\n"
            "Revisa el comprobante y confirma la cita."
        )

    if notification.event == NotificationEvent.CONFIRMED:
        # The deposit line reports the service price, not the profile's deposit_amount
        return header + (
            f"Servicio: {appointment.service_name}\n"
            f"Fecha: {when}\n"
            f"Precio: ${appointment.service_price:g}\n"
            f"Depósito: ${appointment.service_price:g}\n\n"
            "Te recomendamos llegar 10 minutos antes."
        )

    reason = appointment.cancellation_reason
    return (
        header
        + f"Servicio: {appointment.service_name}\n"
        + f"Fecha: {when}\n"
        + (f"Razón: {reason}\n" if reason else "")
    ).rstrip()


def plain_text(message: str) -> str:
    return message.replace("*", "")
