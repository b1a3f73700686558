"""Pydantic schemas for public submissions, admin edits and civic organization content.

Submission schemas strip surrounding whitespace before length checks. Optional
text fields accept an empty string in place of a missing value, the way the
browser forms send them.
"""

from functools import lru_cache
from typing import Annotated, Any, Literal, Optional, Union
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, create_model, model_validator


def _check_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise ValueError('Invalid URL')
    return value


UrlStr = Annotated[str, AfterValidator(_check_url)]
OptionalUrl = Optional[Union[Literal[''], UrlStr]]
OptionalEmail = Optional[Union[Literal[''], EmailStr]]


class SubmissionModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra='ignore')


# ========== Live content / staging payloads ==========

class EventSubmission(SubmissionModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=5000)
    location: str = Field(min_length=1, max_length=500)
    event_date: str = Field(min_length=1)
    event_time: str = Field(min_length=1)
    is_public: bool = True
    cover_photo_url: OptionalUrl = None
    registration_link: OptionalUrl = None
    registration_email: OptionalEmail = None
    registration_phone: Optional[str] = Field(default=None, max_length=20)
    registration_notes: Optional[str] = Field(default=None, max_length=1000)
    office_address: Optional[str] = Field(default=None, max_length=500)
    age_group: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    elected_officials: list[str] = Field(default_factory=list)
    additional_images: list[str] = Field(default_factory=list)
    civic_org_id: Optional[int] = None


class ResourceSubmission(SubmissionModel):
    organization_name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=5000)
    website: OptionalUrl = None
    email: OptionalEmail = None
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=500)
    categories: list[str] = Field(min_length=1)
    type: Literal['resource', 'organization'] = 'resource'
    logo_url: OptionalUrl = None
    cover_photo_url: OptionalUrl = None


class PublicResourceSubmission(SubmissionModel):
    """Anonymous form: website is free text, but a website or an address must be given."""
    organization_name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=5000)
    website: Optional[str] = None
    email: OptionalEmail = None
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=500)
    categories: list[str] = Field(min_length=1)
    type: Literal['resource', 'organization'] = 'resource'
    logo_url: Optional[str] = None
    cover_photo_url: Optional[str] = None

    @model_validator(mode='after')
    def website_or_address(self):
        if not self.website and not self.address:
            raise ValueError('Either website or address must be provided')
        return self


class JobSubmission(SubmissionModel):
    title: str = Field(min_length=1, max_length=200)
    employer: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=5000)
    location: str = Field(min_length=1, max_length=200)
    salary: str = Field(min_length=1, max_length=100)
    apply_info: str = Field(min_length=1, max_length=1000)
    category: Literal['government', 'private', 'nonprofit']
    subcategory: Optional[str] = Field(default=None, max_length=100)
    is_apply_link: bool = False
    contact_email: OptionalEmail = None
    contact_phone: Optional[str] = Field(default=None, max_length=20)
    is_active: bool = True


class CommunityAlertSubmission(SubmissionModel):
    title: str = Field(min_length=1, max_length=200)
    short_description: str = Field(min_length=1, max_length=500)
    long_description: str = Field(min_length=1, max_length=5000)
    is_active: bool = True
    photos: list[str] = Field(default_factory=list)


class SpecialEventSubmission(SubmissionModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    type: str = Field(min_length=1, max_length=100)
    start_date: str = Field(min_length=1)
    end_date: Optional[str] = None
    is_active: bool = True


class ContactInfo(BaseModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    website: Optional[UrlStr] = None


class CivicOrganizationSubmission(SubmissionModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=5000)
    coverage_area: str = Field(min_length=1, max_length=500)
    meeting_info: Optional[str] = Field(default=None, max_length=1000)
    meeting_address: Optional[str] = Field(default=None, max_length=500)
    organization_type: str = Field(default='civic', min_length=1, max_length=100)
    contact_info: Optional[ContactInfo] = None
    access_code: str = Field(min_length=1, max_length=50)
    is_active: bool = True


class CivicOrganizationCreate(CivicOrganizationSubmission):
    password: str = Field(min_length=8)


class PasswordChange(BaseModel):
    password: str = Field(min_length=8)


class ReportSubmission(SubmissionModel):
    reason: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)


class ReviewDecision(BaseModel):
    notes: Optional[str] = Field(default=None, max_length=2000)


# ========== Civic organization self-service content ==========

class CivicAnnouncementPayload(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1, max_length=5000)
    photos: list[UrlStr] = Field(default_factory=list)


class CivicNewsletterPayload(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    file_path: str = Field(min_length=1)


class CivicLeadershipPayload(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    title: str = Field(min_length=1, max_length=100)
    photo_url: Optional[UrlStr] = None
    contact_info: dict[str, Any] = Field(default_factory=dict)
    order_index: int = 0


class CivicLinkPayload(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    url: UrlStr
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True
    order_index: int = 0


class CivicGalleryPayload(BaseModel):
    photo_url: UrlStr
    title: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    order_index: int = 0


class CivicGeneralSettingsPayload(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=2000)
    coverage_area: str = Field(min_length=1, max_length=200)
    organization_type: str = Field(min_length=1)
    meeting_info: Optional[str] = Field(default=None, max_length=1000)
    meeting_address: Optional[str] = Field(default=None, max_length=300)
    contact_info: dict[str, Any] = Field(default_factory=dict)


# ========== Accounts, agencies and ingestion ==========

class CivicLoginRequest(BaseModel):
    access_code: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AdminLoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class InviteAdminRequest(BaseModel):
    email: EmailStr
    role: str
    full_name: Optional[str] = None
    phone_number: Optional[str] = None


class AcceptInviteRequest(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=8)


class AgencySearchRequest(BaseModel):
    query: str = ''
    preferredLevel: Literal['city', 'state', 'federal', 'unknown'] = 'unknown'


class AgencyPayload(SubmissionModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=2000)
    level: Literal['city', 'state', 'federal']
    website: UrlStr
    keywords: list[str] = Field(default_factory=list)


class DocumentIngestRequest(BaseModel):
    fileUrl: Optional[str] = None
    fileName: Optional[str] = None
    documentType: Optional[str] = None


class AltTextJobRequest(BaseModel):
    image_urls: list[str] = Field(min_length=1)


def dump_payload(model: BaseModel):
    """Plain dict of a validated payload, empty strings stored as null"""
    data = model.model_dump(mode='json')
    return {key: (None if value == '' else value) for key, value in data.items()}


@lru_cache(maxsize=None)
def _partial_schema(schema: type[BaseModel], fields: frozenset) -> type[BaseModel]:
    definitions = {
        name: (info.annotation, info)
        for name, info in schema.model_fields.items()
        if name in fields
    }
    return create_model(f'{schema.__name__}Changes', __config__=schema.model_config, **definitions)


def validate_changes(schema: type[BaseModel], changes: dict) -> dict:
    """Validate only the submitted fields of an edit against their schema rules.

    Model-level checks are skipped, and columns the edit leaves alone are not
    re-validated, so rows stored under a looser form stay editable.
    """
    fields = frozenset(changes or {}) & frozenset(schema.model_fields)
    if not fields:
        return {}
    model = _partial_schema(schema, fields).model_validate(changes)
    return dump_payload(model)
