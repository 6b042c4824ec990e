from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional

FRESHER = "Fresher"


class ReferralConflictError(ValueError):
    """Raised when a candidate claims both an employee and a consultancy referral"""

    message = "Only one referral type can be true."

    def __init__(self):
        super().__init__(self.message)


class CandidateIn(BaseModel):
    """Full field set accepted on create and update"""

    name: str = Field(..., min_length=1)
    specialization: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    years_experience: str
    remark: Optional[str] = None
    employee_referral: bool = False
    employee_id: Optional[str] = None
    consultancy_referral: bool = False
    consultancy_name: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Jane Doe",
                "specialization": "Backend Developer",
                "location": "Pune",
                "years_experience": "3-5",
                "remark": "Strong Python background",
                "employee_referral": True,
                "employee_id": "E1024",
                "consultancy_referral": False,
                "consultancy_name": None,
            }
        }

    @field_validator("employee_referral", "consultancy_referral", mode="before")
    @classmethod
    def parse_flag(cls, value):
        # Form posts send "true"/"false"; only "true" counts
        if isinstance(value, str):
            return value.strip().lower() == "true"
        if value is None:
            return False
        return value

    @model_validator(mode="after")
    def drop_unused_referral_fields(self):
        if not self.employee_referral:
            self.employee_id = None
        if not self.consultancy_referral:
            self.consultancy_name = None
        return self

    def check_referrals(self) -> "CandidateIn":
        if self.employee_referral and self.consultancy_referral:
            raise ReferralConflictError()
        return self


class Candidate(CandidateIn):
    id: int
    resume_url: Optional[str] = ""
    # Stored rows may predate the NOT NULL constraints
    name: Optional[str] = None
    specialization: Optional[str] = None
    location: Optional[str] = None
    years_experience: Optional[str] = None


class LocationCount(BaseModel):
    location: Optional[str] = None
    count: int


class ExperienceCount(BaseModel):
    years_experience: Optional[str] = None
    count: int


class DashboardStats(BaseModel):
    total_candidates: int
    freshers: int
    experienced: int
    employee_referrals: int
    consultancy_referrals: int
    candidates_by_location: List[LocationCount] = []
    candidates_by_experience: List[ExperienceCount] = []
