"""Exception taxonomy shared by every partner_deals component."""

from __future__ import annotations


class DealError(Exception):
    """Base class for errors whose message can be shown to the requester."""


class ValidationError(DealError):
    """Malformed input: seller code, amount, missing required field."""


class NotFoundError(DealError):
    """A named entity (seller, order, card) does not exist."""

    def __init__(self, entity: str, key: str, message: str | None = None) -> None:
        self.entity = entity
        self.key = key
        super().__init__(message or f"Could not find {entity} `{key}`.")


class ArbitrationRejectedError(DealError):
    """Offer is not at least one undercut step below the current floor."""

    def __init__(self, floor: float, ceiling: float, step: float, symbol: str = "€") -> None:
        self.floor = floor
        self.ceiling = ceiling
        self.step = step
        super().__init__(
            "Your offer is too high.\n"
            f"Current lowest offer: **{symbol}{floor:.2f}**.\n"
            f"Your offer must be at least **{symbol}{step:.2f}** lower "
            f"(≤ **{symbol}{ceiling:.2f}**)."
        )


class AlreadyClaimedError(DealError):
    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__("This deal has already been claimed.")


class DealClosedError(DealError):
    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__("This deal is no longer available.")


class ClaimInProgressError(DealError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(
            "Another claim for this deal is being processed. Please try again shortly."
        )


class NoBroadcastTargetError(DealError):
    def __init__(self) -> None:
        super().__init__("No valid deal channels available.")


class CollaboratorError(Exception):
    """An external collaborator (record store, chat platform) call failed."""


class StoreError(CollaboratorError):
    pass


class ChatError(CollaboratorError):
    pass


class ChannelUnavailableError(ChatError):
    def __init__(self, channel_id: int) -> None:
        self.channel_id = channel_id
        super().__init__(f"Deals channel {channel_id} not found or not text-based.")


class ExpiredInteractionError(Exception):
    """The interaction can no longer be acknowledged."""
