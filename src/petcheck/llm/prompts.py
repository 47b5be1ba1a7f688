"""
Prompts for the pet health chat assistant.
"""

from collections.abc import Sequence

from petcheck.core.models import HealthRecord, Pet

SYSTEM_PROMPT = """You are a friendly assistant inside a pet health logging app.
Owners record their dogs and cats and check urine with a home dipstick that the app
reads from a camera photo (glucose, protein, pH and blood pads).

When helping users:
- Explain what dipstick readings can mean in plain language
- Point out when a reading or symptom warrants a visit to a veterinarian
- Never present a diagnosis; home dipstick colors are approximate
- Keep answers short and practical
"""


def format_pet(pet: Pet) -> str:
    breed = pet.breed or "unknown breed"
    return f"- {pet.name}: {breed}, {pet.age} years, {pet.gender.value}, {pet.weight:g} kg"


def format_record(record: HealthRecord, pets_by_id: dict) -> str:
    pet = pets_by_id.get(record.pet_id)
    who = pet.name if pet else "unassigned"
    readings = "; ".join(f"{r.parameter_key} {r.label}" for r in record.readings)
    return f"- {record.timestamp:%Y-%m-%d} ({who}, score {record.health_score}): {readings}"


def build_context(
    pets: Sequence[Pet],
    records: Sequence[HealthRecord],
    max_records: int = 5,
) -> str:
    """
    Summarize a user's pets and latest records for the system prompt.

    Args:
        pets: The user's pets.
        records: The user's records, newest first.
        max_records: How many records to include.

    Returns:
        Context text, empty if there is nothing to report.
    """
    sections = []
    if pets:
        sections.append("Pets:\n" + "\n".join(format_pet(p) for p in pets))
    if records:
        pets_by_id = {p.id: p for p in pets}
        lines = [format_record(r, pets_by_id) for r in records[:max_records]]
        sections.append("Recent dipstick records:\n" + "\n".join(lines))
    return "\n\n".join(sections)
