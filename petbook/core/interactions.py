from sqlalchemy.orm import Session

from petbook.core.actor import Actor, PetActor, display_name
from petbook.core.errors import NotFoundError, ValidationError
from petbook.core.notifications import notify
from petbook.models.pet import Pet

INTERACTION_MESSAGES = {
    "paw": "{name} sent you a paw! 🐾",
    "hug": "{name} sent you a hug! ❤️",
    "treat": "{name} sent you a treat! 🍖",
}


def send_interaction(db: Session, actor: Actor, target_pet_id: str, kind: str) -> bool:
    """
    Profile-level paw / hug / treat. Nothing is stored besides the
    notification; returns False when it was suppressed (own pet).
    """
    template = INTERACTION_MESSAGES.get(kind)
    if template is None:
        raise ValidationError(f"Unknown interaction: {kind}")

    if not db.get(Pet, target_pet_id):
        raise NotFoundError("Pet not found")

    notification = notify(
        db,
        PetActor(target_pet_id),
        kind,
        template.format(name=display_name(db, actor)),
        actor,
    )
    db.commit()
    return notification is not None
