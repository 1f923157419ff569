"""Fixed catalog of studio experiences offered for booking."""
from typing import NamedTuple, Optional

EXPERIENCE_TIME_SLOTS = ("10:00 AM", "11:30 AM", "2:00 PM", "4:00 PM", "6:00 PM")

MIN_EXPERIENCE_GUESTS = 1
MAX_EXPERIENCE_GUESTS = 20


class Experience(NamedTuple):
    id: str
    title: str
    duration: str
    price: float
    per_person: bool

    def quote(self, guests: int) -> float:
        return self.price * guests if self.per_person else self.price


EXPERIENCES = {
    exp.id: exp
    for exp in (
        Experience("couple", "Couple Pottery Dates", "90 minutes", 3500, per_person=False),
        Experience("birthday", "Birthday Sessions", "2 hours", 12000, per_person=False),
        Experience("farm", "Farm & Garden Mini Parties", "2-3 hours", 15000, per_person=False),
        Experience("studio", "Studio-Based Experiences", "Flexible", 2500, per_person=True),
    )
}


def get_experience(experience_type: str) -> Optional[Experience]:
    return EXPERIENCES.get(experience_type)
