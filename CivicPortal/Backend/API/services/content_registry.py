"""
Entity registries for the moderation workflow

Staging types: public and sub-admin submissions land in a pending_* table and
are copied into the live table on approval.

Modification types: sub-admin edits and deletes of live rows are recorded in a
pending_*_modifications table and applied to the live row on approval.
"""

from dataclasses import dataclass
from typing import Optional, Type

from models import (
    Events, PendingEvents, Resources, PendingResources,
    CommunityAlerts, PendingCommunityAlerts, SpecialEvents, PendingSpecialEvents,
    Jobs, PendingJobs, CivicOrganizations,
    PendingResourceModifications, PendingJobModifications, PendingCivicModifications
)
from utils.validation_schemas import (
    EventSubmission, ResourceSubmission, CommunityAlertSubmission,
    SpecialEventSubmission, JobSubmission, CivicOrganizationSubmission
)


@dataclass(frozen=True)
class StagingType:
    name: str
    pending_model: Type
    live_model: Type
    schema: Type
    title_field: str

    @property
    def copy_fields(self):
        return self.live_model.COPY_FIELDS


@dataclass(frozen=True)
class ModificationType:
    name: str
    modification_model: Type
    live_model: Type
    schema: Type
    title_field: str
    fk_column: str
    actions: tuple


STAGING_TYPES = {
    'event': StagingType('event', PendingEvents, Events, EventSubmission, 'title'),
    'resource': StagingType('resource', PendingResources, Resources, ResourceSubmission, 'organization_name'),
    'job': StagingType('job', PendingJobs, Jobs, JobSubmission, 'title'),
    'community_alert': StagingType('community_alert', PendingCommunityAlerts, CommunityAlerts,
                                   CommunityAlertSubmission, 'title'),
    'special_event': StagingType('special_event', PendingSpecialEvents, SpecialEvents,
                                 SpecialEventSubmission, 'title'),
}

MODIFICATION_TYPES = {
    'resource_modification': ModificationType(
        'resource_modification', PendingResourceModifications, Resources,
        ResourceSubmission, 'organization_name', 'resource_id', ('update', 'delete')),
    'job_modification': ModificationType(
        'job_modification', PendingJobModifications, Jobs,
        JobSubmission, 'title', 'job_id', ('update', 'delete')),
    'civic_modification': ModificationType(
        'civic_modification', PendingCivicModifications, CivicOrganizations,
        CivicOrganizationSubmission, 'name', 'civic_org_id',
        ('update', 'delete', 'deactivate', 'password_change')),
}

# entity tag used by admin edit routes -> modification type
MODIFIABLE_ENTITIES = {
    'resource': 'resource_modification',
    'job': 'job_modification',
    'civic': 'civic_modification',
}

# live tables a main admin may edit directly but that have no modification queue
DIRECT_ONLY_ENTITIES = {
    'event': (Events, EventSubmission),
    'community_alert': (CommunityAlerts, CommunityAlertSubmission),
    'special_event': (SpecialEvents, SpecialEventSubmission),
}


def get_staging_type(name) -> Optional[StagingType]:
    return STAGING_TYPES.get(name)


def get_modification_type(name) -> Optional[ModificationType]:
    return MODIFICATION_TYPES.get(name)


def normalize_action(action):
    """'edit' is an older spelling of 'update'"""
    return 'update' if action == 'edit' else action
