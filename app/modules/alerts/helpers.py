"""Dispatch helpers for the domain events that raise alerts.

Each helper builds the title, message, metadata and channel set of one event
and goes through ``send_alert``. Helpers hold no state besides the dispatcher
they were given.

Usage:
    helpers = AlertHelpers(dispatcher)
    helpers.reservation_confirmed(
        user_id="u1",
        email="u1@example.com",
        court_name="Cancha 1",
        date="2024-05-01",
        time="18:00",
        reservation_id="r-42",
    )
"""

from typing import Optional, Sequence

from modules.alerts.dispatcher import AlertDispatcher
from modules.alerts.models import (
    AlertChannel,
    AlertMetadata,
    AlertRecipient,
    AlertSeverity,
    AlertType,
    DispatchOutcome,
)

DEFAULT_CHANNELS = (AlertChannel.IN_APP, AlertChannel.EMAIL)


def _money(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:.2f}"


class AlertHelpers:
    def __init__(self, dispatcher: AlertDispatcher):
        self.dispatcher = dispatcher

    def send_alert(
        self,
        type: AlertType,
        severity: AlertSeverity,
        title: str,
        message: str,
        recipients: Sequence[AlertRecipient],
        channels: Optional[Sequence[AlertChannel]] = None,
        metadata: Optional[AlertMetadata] = None,
    ) -> DispatchOutcome:
        """Create and send an alert; channels default to in-app and email."""
        return self.dispatcher.create_and_notify(
            type=type,
            severity=severity,
            title=title,
            message=message,
            recipients=recipients,
            channels=list(channels) if channels else list(DEFAULT_CHANNELS),
            metadata=metadata,
        )

    def reservation_confirmed(
        self,
        user_id: str,
        email: str,
        court_name: str,
        date: str,
        time: str,
        reservation_id: str,
        price: Optional[float] = None,
        action_url: Optional[str] = None,
        push_token: Optional[str] = None,
    ) -> DispatchOutcome:
        return self.send_alert(
            type=AlertType.RESERVATION_CONFIRMED,
            severity=AlertSeverity.SUCCESS,
            title="¡Reserva Confirmada!",
            message=(
                f"Tu reserva en {court_name} para el {date} a las {time} "
                "ha sido confirmada."
            ),
            recipients=[
                AlertRecipient(user_id=user_id, email=email, push_token=push_token)
            ],
            channels=[AlertChannel.EMAIL, AlertChannel.IN_APP, AlertChannel.PUSH],
            metadata=AlertMetadata(
                reservation_id=reservation_id,
                court_name=court_name,
                date=date,
                time=time,
                price=price,
                action_url=action_url or f"/reservas/{reservation_id}",
            ),
        )

    def reservation_cancelled(
        self,
        user_id: str,
        email: str,
        court_name: str,
        date: str,
        time: str,
        reservation_id: str,
        reason: Optional[str] = None,
    ) -> DispatchOutcome:
        message = f"Tu reserva en {court_name} para el {date} a las {time} ha sido cancelada."
        if reason:
            message = f"{message} Razón: {reason}"

        return self.send_alert(
            type=AlertType.RESERVATION_CANCELLED,
            severity=AlertSeverity.WARNING,
            title="Reserva Cancelada",
            message=message,
            recipients=[AlertRecipient(user_id=user_id, email=email)],
            channels=[AlertChannel.EMAIL, AlertChannel.IN_APP],
            metadata=AlertMetadata(
                reservation_id=reservation_id,
                court_name=court_name,
                date=date,
                time=time,
                reason=reason,
            ),
        )

    def reservation_reminder(
        self,
        user_id: str,
        email: str,
        court_name: str,
        date: str,
        time: str,
        reservation_id: str,
        hours_before_event: int,
        push_token: Optional[str] = None,
    ) -> DispatchOutcome:
        when = f"en {hours_before_event} horas" if hours_before_event > 1 else "muy pronto"
        return self.send_alert(
            type=AlertType.RESERVATION_REMINDER,
            severity=AlertSeverity.INFO,
            title="Recordatorio de Reserva",
            message=(
                f"Recordatorio: Tienes una reserva en {court_name} {when}. "
                f"{date} a las {time}."
            ),
            recipients=[
                AlertRecipient(user_id=user_id, email=email, push_token=push_token)
            ],
            channels=[AlertChannel.IN_APP, AlertChannel.PUSH, AlertChannel.BROWSER],
            metadata=AlertMetadata(
                reservation_id=reservation_id,
                court_name=court_name,
                date=date,
                time=time,
                action_url=f"/reservas/{reservation_id}",
            ),
        )

    def payment_confirmed(
        self,
        user_id: str,
        email: str,
        amount: float,
        reservation_id: str,
        payment_method: str,
    ) -> DispatchOutcome:
        return self.send_alert(
            type=AlertType.PAYMENT_CONFIRMED,
            severity=AlertSeverity.SUCCESS,
            title="Pago Confirmado",
            message=(
                f"Tu pago de ${_money(amount)} ha sido confirmado. "
                f"Método de pago: {payment_method}."
            ),
            recipients=[AlertRecipient(user_id=user_id, email=email)],
            channels=[AlertChannel.EMAIL, AlertChannel.IN_APP],
            metadata=AlertMetadata(
                reservation_id=reservation_id,
                amount=amount,
                payment_method=payment_method,
                action_url=f"/reservas/{reservation_id}",
            ),
        )

    def slot_released(
        self,
        user_ids: Sequence[str],
        emails: Sequence[Optional[str]],
        court_name: str,
        date: str,
        time: str,
        court_id: str,
        push_tokens: Sequence[Optional[str]] = (),
    ) -> DispatchOutcome:
        """Tell every interested user that a slot opened up.

        ``emails`` and ``push_tokens`` are matched to ``user_ids`` by position.
        """
        recipients = [
            AlertRecipient(
                user_id=user_id,
                email=emails[i] if i < len(emails) else None,
                push_token=push_tokens[i] if i < len(push_tokens) else None,
            )
            for i, user_id in enumerate(user_ids)
        ]
        return self.send_alert(
            type=AlertType.SLOT_RELEASED,
            severity=AlertSeverity.INFO,
            title="¡Horario Disponible!",
            message=(
                f"Se ha liberado un horario en {court_name} para el {date} "
                f"a las {time}. ¡Reserva ahora!"
            ),
            recipients=recipients,
            channels=[AlertChannel.EMAIL, AlertChannel.PUSH, AlertChannel.IN_APP],
            metadata=AlertMetadata(
                court_id=court_id,
                court_name=court_name,
                date=date,
                time=time,
                action_url=f"/reservar/{court_id}?date={date}&time={time}",
            ),
        )

    def challenge_created(
        self,
        user_id: str,
        email: str,
        challenger_team_name: str,
        challenge_id: str,
        push_token: Optional[str] = None,
    ) -> DispatchOutcome:
        return self.send_alert(
            type=AlertType.CHALLENGE_CREATED,
            severity=AlertSeverity.INFO,
            title="¡Nuevo Desafío Recibido!",
            message=f"El equipo {challenger_team_name} te ha desafiado a un partido.",
            recipients=[
                AlertRecipient(user_id=user_id, email=email, push_token=push_token)
            ],
            channels=[AlertChannel.EMAIL, AlertChannel.PUSH, AlertChannel.IN_APP],
            metadata=AlertMetadata(
                challenge_id=challenge_id,
                action_url=f"/desafios/{challenge_id}",
            ),
        )
