"""Facility instances under construction or in operation"""

from reconstruction.types import FacilityType, FacilityStatus, FacilityCategory


class Facility:
    """A facility type being built in (or operating for) a settlement.

    The type's fields are taken by value when the facility is created, so later
    catalog changes never reach an existing facility.
    """

    def __init__(self, facility_type: FacilityType, settlement_name: str):
        self.facility_type = facility_type
        self.settlement_name = settlement_name
        self.status = FacilityStatus.UNDER_CONSTRUCTION
        self.time_left = facility_type.cost

    @property
    def name(self) -> str:
        return self.facility_type.name

    @property
    def category(self) -> FacilityCategory:
        return self.facility_type.category

    @property
    def cost(self) -> int:
        return self.facility_type.cost

    @property
    def life_quality_score(self) -> int:
        return self.facility_type.life_quality_score

    @property
    def economy_score(self) -> int:
        return self.facility_type.economy_score

    @property
    def environment_score(self) -> int:
        return self.facility_type.environment_score

    @property
    def scores(self):
        return self.facility_type.scores

    def is_operational(self) -> bool:
        return self.status == FacilityStatus.OPERATIONAL

    def advance(self) -> FacilityStatus:
        """Spend one tick of construction, returns the resulting status"""
        if self.status == FacilityStatus.UNDER_CONSTRUCTION and self.time_left > 0:
            self.time_left -= 1
            if self.time_left == 0:
                self.status = FacilityStatus.OPERATIONAL
        assert self.time_left >= 0, f"{self.name} has negative time left"
        return self.status

    def clone(self) -> 'Facility':
        copy = Facility(self.facility_type, self.settlement_name)
        copy.status = self.status
        copy.time_left = self.time_left
        return copy

    def __str__(self):
        status = "Operational" if self.is_operational() else "Under Construction"
        return (f"Facility: {self.name}, Settlement: {self.settlement_name}, "
                f"Status: {status}, Time Left: {self.time_left}")

    def __repr__(self):
        return f"Facility({self.name!r}, {self.settlement_name!r}, {self.status.name}, {self.time_left})"
