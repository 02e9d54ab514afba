from typing import Dict

from sqlalchemy.orm import Session

from petbook.core.errors import NotFoundError, ValidationError
from petbook.models.pet import Pet
from petbook.utils.time import utcnow

REPORT_SOURCE = "PetBook Health System"
REPORT_VERSION = "1.0"
REPORT_FORMATS = ("json", "pdf")


def build_health_report(db: Session, pet_id: str, fmt: str = "json") -> Dict:
    """
    Portable health history for one pet: ``pets`` joined with ``health_records``.
    """
    if fmt not in REPORT_FORMATS:
        raise ValidationError(f"Unsupported format: {fmt}")

    pet = db.get(Pet, pet_id) if pet_id else None
    if not pet:
        raise NotFoundError("Pet not found")

    if fmt == "pdf":
        # Rendering happens downstream from an HTML template
        return {"message": "PDF generation is handled through the HTML template"}

    return {
        "metadata": {
            "generated_at": utcnow().isoformat() + "Z",
            "source": REPORT_SOURCE,
            "version": REPORT_VERSION,
        },
        "pet_info": {
            "name": pet.name,
            "species": pet.species,
            "breed": pet.breed,
            "age": pet.age,
        },
        "medical_history": [
            {
                "date": r.record_date.isoformat(),
                "type": r.record_type,
                "title": r.title,
                "standardized_name": r.standardized_name,
                "notes": r.notes,
                "version": r.version,
            }
            for r in pet.health_records
        ],
    }
