"""Helpers shared by the API routes."""

from __future__ import annotations

from storefront.domain.entities import DeliveryStatus, SendSummary


def describe_send_summary(summary: SendSummary) -> str:
    """Return the message shown to the administrator after a fan-out."""

    status = summary.status
    if status is DeliveryStatus.NO_RECIPIENTS:
        return "No se encontraron usuarios para notificar."
    if status is DeliveryStatus.DELIVERED:
        return "Notificación enviada a todos los usuarios."
    if status is DeliveryStatus.BROADCAST_ONLY:
        return (
            "Notificación enviada a todos los usuarios mediante difusión. "
            "Se omitieron las copias individuales."
        )
    if status is DeliveryStatus.FAILED:
        return "No se pudo entregar la notificación a ningún usuario."
    if summary.broadcast_ok:
        return (
            f"Notificación entregada con {summary.failed} fallos individuales. "
            "Todos los usuarios verán la difusión."
        )
    return (
        f"Notificación entregada con {summary.failed} fallos individuales. "
        "La difusión no pudo registrarse."
    )


__all__ = ["describe_send_summary"]
