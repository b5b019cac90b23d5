"""Job application models for jobhunter."""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class JobStatus(str, Enum):
    """Pipeline stage of an application."""
    SAVED = "saved"
    APPLIED = "applied"
    SCREEN = "screen"
    INTERVIEW = "interview"
    OFFER = "offer"


class ContactStatus(str, Enum):
    """How far outreach to a contact has gone."""
    NONE = "none"
    CONNECTED = "connected"
    MESSAGED = "messaged"
    RESPONDED = "responded"


class Contact(BaseModel):
    """A networking contact attached to one application."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: int = Field(..., description="Identifier, unique within the application")
    name: str = Field(..., description="Contact name")
    linkedin: str = Field("", description="LinkedIn profile link")
    status: ContactStatus = Field(ContactStatus.NONE, description="Outreach progress")

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, v):
        if isinstance(v, ContactStatus):
            return v
        try:
            return ContactStatus(str(v).lower())
        except ValueError:
            return ContactStatus.NONE


class JobApplication(BaseModel):
    """One tracked job posting and the people contacted about it.

    Persisted in camelCase (``postUrl``) alongside the other blobs.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: int = Field(..., description="Identifier")
    title: str = Field(..., description="Job title")
    company: str = Field(..., description="Company name")
    post_url: str = Field("", alias="postUrl", description="Link to the job post")
    description: str = Field("", description="Pasted job description")
    status: JobStatus = Field(JobStatus.SAVED, description="Pipeline stage")
    contacts: List[Contact] = Field(default_factory=list, description="Networking contacts")

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, v):
        if isinstance(v, JobStatus):
            return v
        try:
            return JobStatus(str(v).lower())
        except ValueError:
            return JobStatus.SAVED

    @field_validator("contacts", mode="before")
    @classmethod
    def _coerce_contacts(cls, v):
        return v or []

    def find_contact(self, contact_id: int) -> Optional[Contact]:
        for contact in self.contacts:
            if contact.id == contact_id:
                return contact
        return None
