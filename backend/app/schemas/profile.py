"""
Candidate and company profile schemas.

The *Create models validate registration payloads, the *Update models carry
partial changes (only fields that were sent are applied), and the full
profile models describe what is stored under candidates/{uid} and
companies/{uid}.
"""

import re
from datetime import datetime
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator, model_validator

PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")


def check_phone(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return value
    if not PHONE_PATTERN.match(re.sub(r"[\s\-()]", "", value)):
        raise ValueError("Invalid phone number format")
    return value


def check_required_text(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{field_name} is required")
    return value.strip()


# ============== Candidate ==============


class PersonalInfo(BaseModel):
    first_name: str
    last_name: str
    phone: Optional[str] = None
    location: Optional[str] = None

    @field_validator("first_name")
    @classmethod
    def validate_first_name(cls, v: str) -> str:
        return check_required_text(v, "First name")

    @field_validator("last_name")
    @classmethod
    def validate_last_name(cls, v: str) -> str:
        return check_required_text(v, "Last name")

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return check_phone(v)


class ProfessionalInfo(BaseModel):
    title: Optional[str] = None
    experience: Optional[str] = None
    skills: list[str] = Field(default_factory=list)
    resume: Optional[str] = None


class SalaryRange(BaseModel):
    min: float
    max: float

    @model_validator(mode="after")
    def validate_bounds(self) -> "SalaryRange":
        if self.min < 0:
            raise ValueError("Minimum salary cannot be negative")
        if self.max < 0:
            raise ValueError("Maximum salary cannot be negative")
        if self.min > self.max:
            raise ValueError("Minimum salary cannot be greater than maximum salary")
        return self


class CandidatePreferences(BaseModel):
    job_types: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    salary_range: Optional[SalaryRange] = None


class CandidateProfileCreate(BaseModel):
    personal_info: PersonalInfo
    professional_info: ProfessionalInfo = Field(default_factory=ProfessionalInfo)
    preferences: CandidatePreferences = Field(default_factory=CandidatePreferences)


class PersonalInfoUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None


class ProfessionalInfoUpdate(BaseModel):
    title: Optional[str] = None
    experience: Optional[str] = None
    skills: Optional[list[str]] = None
    resume: Optional[str] = None


class CandidatePreferencesUpdate(BaseModel):
    job_types: Optional[list[str]] = None
    locations: Optional[list[str]] = None
    salary_range: Optional[SalaryRange] = None


class CandidateProfileUpdate(BaseModel):
    personal_info: Optional[PersonalInfoUpdate] = None
    professional_info: Optional[ProfessionalInfoUpdate] = None
    preferences: Optional[CandidatePreferencesUpdate] = None


class CandidateProfile(CandidateProfileCreate):
    user_id: str
    applications: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


# ============== Company ==============


class CompanyInfo(BaseModel):
    name: str
    description: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[str] = None
    website: Optional[str] = None
    logo: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return check_required_text(v, "Company name")

    @field_validator("website")
    @classmethod
    def validate_website(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return v
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Invalid website URL format")
        return v


class ContactInfo(BaseModel):
    contact_person: str
    phone: Optional[str] = None
    address: Optional[str] = None

    @field_validator("contact_person")
    @classmethod
    def validate_contact_person(cls, v: str) -> str:
        return check_required_text(v, "Contact person")

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return check_phone(v)


class CompanyProfileCreate(BaseModel):
    company_info: CompanyInfo
    contact_info: ContactInfo


class CompanyInfoUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[str] = None
    website: Optional[str] = None
    logo: Optional[str] = None


class ContactInfoUpdate(BaseModel):
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class CompanyProfileUpdate(BaseModel):
    company_info: Optional[CompanyInfoUpdate] = None
    contact_info: Optional[ContactInfoUpdate] = None


class CompanyProfile(CompanyProfileCreate):
    user_id: str
    job_postings: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ProfileIsolationReport(BaseModel):
    is_valid: bool
    issues: list[str]
