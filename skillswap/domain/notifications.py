"""Notifications raised by booking transitions.

The state machine only describes *what* should be said to *whom*; storing
and delivering the notification is the publisher's job.
"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

BOOKER_BOOKINGS_URL = "/my-bookings"
OWNER_BOOKINGS_URL = "/owner-bookings"


class NotificationKind(str, Enum):
    """Notification types shown in the client's notification list."""

    BOOKING_REQUEST = "booking_request"
    BOOKING_STATUS = "booking_status"
    COMPLETION = "completion"
    COMPLETED = "completed"
    DISPUTE = "dispute"


@dataclass(frozen=True)
class NotificationIntent:
    """A notification to publish once the transition has been persisted."""

    recipient_id: UUID
    kind: NotificationKind
    title: str
    body: str
    link: str | None = None
    booking_id: UUID | None = None


def preview(text: str, length: int) -> str:
    """Shorten ``text`` to ``length`` characters, marking the cut with an ellipsis."""
    if len(text) <= length:
        return text
    return f"{text[:length]}..."


def booking_requested(
    owner_id: UUID, offer_id: UUID, offer_title: str, booker_name: str, booking_id: UUID | None
) -> NotificationIntent:
    return NotificationIntent(
        recipient_id=owner_id,
        kind=NotificationKind.BOOKING_REQUEST,
        title="New booking request",
        body=f"You have a new booking request for your offer: {offer_title}, from {booker_name}.",
        link=f"/offers/{offer_id}",
        booking_id=booking_id,
    )


def booking_decided(booker_id: UUID, booking_id: UUID, offer_title: str, status: str) -> NotificationIntent:
    return NotificationIntent(
        recipient_id=booker_id,
        kind=NotificationKind.BOOKING_STATUS,
        title=f"Booking {status}",
        body=f'Your booking for "{offer_title}" was {status}.',
        link=f"/bookings/{booking_id}",
        booking_id=booking_id,
    )


def completion_confirmed(
    recipient_id: UUID, recipient_link: str, booking_id: UUID, offer_title: str, actor_name: str
) -> NotificationIntent:
    return NotificationIntent(
        recipient_id=recipient_id,
        kind=NotificationKind.COMPLETION,
        title="Completion confirmed",
        body=(
            f'{actor_name} has confirmed completion for "{offer_title}". '
            "Please confirm from your side to finalize."
        ),
        link=recipient_link,
        booking_id=booking_id,
    )


def completion_withdrawn(
    recipient_id: UUID, recipient_link: str, booking_id: UUID, offer_title: str, actor_name: str
) -> NotificationIntent:
    return NotificationIntent(
        recipient_id=recipient_id,
        kind=NotificationKind.COMPLETION,
        title="Completion withdrawn",
        body=f'{actor_name} has withdrawn their completion confirmation for "{offer_title}".',
        link=recipient_link,
        booking_id=booking_id,
    )


def engagement_completed(
    booker_id: UUID, owner_id: UUID, booking_id: UUID, offer_id: UUID, offer_title: str, app_name: str
) -> list[NotificationIntent]:
    link = f"/offers/{offer_id}"
    return [
        NotificationIntent(
            recipient_id=booker_id,
            kind=NotificationKind.COMPLETED,
            title="Booking completed",
            body=f'Booking for "{offer_title}" has been completed! You can now leave a review.',
            link=link,
            booking_id=booking_id,
        ),
        NotificationIntent(
            recipient_id=owner_id,
            kind=NotificationKind.COMPLETED,
            title="Booking completed",
            body=(
                f'Booking for "{offer_title}" has been completed successfully! '
                f"Thank you for using {app_name}."
            ),
            link=link,
            booking_id=booking_id,
        ),
    ]


def dispute_raised(
    recipient_id: UUID,
    recipient_link: str,
    booking_id: UUID,
    offer_title: str,
    actor_name: str,
    reason_preview: str,
) -> NotificationIntent:
    return NotificationIntent(
        recipient_id=recipient_id,
        kind=NotificationKind.DISPUTE,
        title="Dispute raised",
        body=f'{actor_name} has raised a dispute for booking "{offer_title}". Reason: {reason_preview}',
        link=recipient_link,
        booking_id=booking_id,
    )
