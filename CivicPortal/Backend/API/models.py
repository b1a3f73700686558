from sqlalchemy import CheckConstraint
from extensions import db
from sqlalchemy.dialects.postgresql import JSONB
from datetime import datetime, timezone

# JSONB on PostgreSQL, plain JSON elsewhere (tests run on SQLite)
JSONType = db.JSON().with_variant(JSONB, 'postgresql')

ROLE_MAIN_ADMIN = 'main_admin'
ROLE_SUB_ADMIN = 'sub_admin'


def utcnow():
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


# ========== Accounts ==========

class Users(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Text, primary_key=True)
    email = db.Column(db.Text, unique=True, nullable=False)
    password_hash = db.Column(db.Text)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    login_time = db.Column(db.DateTime(timezone=True))
    is_deleted = db.Column(db.Boolean, default=False)

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'created_at': _iso(self.created_at),
            'login_time': _iso(self.login_time),
            'is_deleted': self.is_deleted
        }


class UserRoles(db.Model):
    __tablename__ = 'user_roles'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(db.Text, db.ForeignKey('users.id', ondelete='CASCADE'), unique=True, nullable=False)
    role = db.Column(db.String(20), nullable=False)
    created_by = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        CheckConstraint("role IN ('main_admin', 'sub_admin')", name='chk_user_role'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'role': self.role,
            'created_by': self.created_by,
            'created_at': _iso(self.created_at)
        }


class UserProfiles(db.Model):
    __tablename__ = 'user_profiles'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(db.Text, db.ForeignKey('users.id', ondelete='CASCADE'), unique=True, nullable=False)
    full_name = db.Column(db.Text)
    phone_number = db.Column(db.Text)

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'full_name': self.full_name,
            'phone_number': self.phone_number
        }


# ========== Shared column sets ==========

class EventFields:
    """Columns shared by events and pending_events"""
    title = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text, nullable=False)
    location = db.Column(db.Text, nullable=False)
    event_date = db.Column(db.Text, nullable=False)   # YYYY-MM-DD
    event_time = db.Column(db.Text, nullable=False)
    cover_photo_url = db.Column(db.Text)
    additional_images = db.Column(JSONType, default=list)
    tags = db.Column(JSONType, default=list)
    age_group = db.Column(JSONType, default=list)
    elected_officials = db.Column(JSONType, default=list)
    registration_link = db.Column(db.Text)
    registration_email = db.Column(db.Text)
    registration_phone = db.Column(db.Text)
    registration_notes = db.Column(db.Text)
    office_address = db.Column(db.Text)
    is_public = db.Column(db.Boolean, default=True)
    civic_org_id = db.Column(db.Integer, nullable=True)

    COPY_FIELDS = (
        'title', 'description', 'location', 'event_date', 'event_time',
        'cover_photo_url', 'additional_images', 'tags', 'age_group',
        'elected_officials', 'registration_link', 'registration_email',
        'registration_phone', 'registration_notes', 'office_address',
        'is_public', 'civic_org_id'
    )


class ResourceFields:
    """Columns shared by resources and pending_resources"""
    organization_name = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text, nullable=False)
    website = db.Column(db.Text)
    phone = db.Column(db.Text)
    email = db.Column(db.Text)
    address = db.Column(db.Text)
    logo_url = db.Column(db.Text)
    cover_photo_url = db.Column(db.Text)
    categories = db.Column(JSONType, default=list)
    type = db.Column(db.String(20), default='resource')

    COPY_FIELDS = (
        'organization_name', 'description', 'website', 'phone', 'email',
        'address', 'logo_url', 'cover_photo_url', 'categories', 'type'
    )


class JobFields:
    """Columns shared by jobs and pending_jobs"""
    title = db.Column(db.Text, nullable=False)
    employer = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text, nullable=False)
    location = db.Column(db.Text, nullable=False)
    salary = db.Column(db.Text, nullable=False)
    apply_info = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(20), nullable=False)
    subcategory = db.Column(db.Text)
    is_apply_link = db.Column(db.Boolean, default=False)
    contact_email = db.Column(db.Text)
    contact_phone = db.Column(db.Text)
    is_active = db.Column(db.Boolean, default=True)

    COPY_FIELDS = (
        'title', 'employer', 'description', 'location', 'salary', 'apply_info',
        'category', 'subcategory', 'is_apply_link', 'contact_email', 'contact_phone',
        'is_active'
    )


class CommunityAlertFields:
    """Columns shared by community_alerts and pending_community_alerts"""
    title = db.Column(db.Text, nullable=False)
    short_description = db.Column(db.Text, nullable=False)
    long_description = db.Column(db.Text, nullable=False)
    photos = db.Column(JSONType, default=list)
    is_active = db.Column(db.Boolean, default=True)

    COPY_FIELDS = ('title', 'short_description', 'long_description', 'photos', 'is_active')


class SpecialEventFields:
    """Columns shared by special_events and pending_special_events"""
    title = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text)
    type = db.Column(db.Text, nullable=False)
    start_date = db.Column(db.Text, nullable=False)
    end_date = db.Column(db.Text)
    is_active = db.Column(db.Boolean, default=True)

    COPY_FIELDS = ('title', 'description', 'type', 'start_date', 'end_date', 'is_active')


class ReviewFields:
    """Review columns carried by every pending_* table"""
    status = db.Column(db.String(20), nullable=False, default='pending')
    submitted_by = db.Column(db.Text, nullable=True)   # null for anonymous public submissions
    submitted_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    reviewed_by = db.Column(db.Text, nullable=True)
    reviewed_at = db.Column(db.DateTime(timezone=True), nullable=True)
    review_notes = db.Column(db.Text, nullable=True)

    def review_dict(self):
        return {
            'status': self.status,
            'submitted_by': self.submitted_by,
            'submitted_at': _iso(self.submitted_at),
            'reviewed_by': self.reviewed_by,
            'reviewed_at': _iso(self.reviewed_at),
            'review_notes': self.review_notes
        }


def _fields_dict(row, fields):
    return {name: getattr(row, name) for name in fields}


# ========== Live content ==========

class Events(EventFields, db.Model):
    __tablename__ = 'events'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    archived = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def to_dict(self):
        data = {'id': self.id, 'archived': self.archived}
        data.update(_fields_dict(self, self.COPY_FIELDS))
        data['created_at'] = _iso(self.created_at)
        data['updated_at'] = _iso(self.updated_at)
        return data


class Jobs(JobFields, db.Model):
    __tablename__ = 'jobs'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    reports = db.relationship('JobReports', backref='job', lazy=True,
                              cascade='all, delete-orphan')

    __table_args__ = (
        CheckConstraint("category IN ('government', 'private', 'nonprofit')", name='chk_job_category'),
    )

    def to_dict(self):
        data = {'id': self.id}
        data.update(_fields_dict(self, self.COPY_FIELDS))
        data['created_at'] = _iso(self.created_at)
        data['updated_at'] = _iso(self.updated_at)
        return data


class JobReports(db.Model):
    __tablename__ = 'job_reports'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    job_id = db.Column(db.Integer, db.ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)
    reason = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    def to_dict(self, include_target=False):
        data = {
            'id': self.id,
            'job_id': self.job_id,
            'reason': self.reason,
            'description': self.description,
            'created_at': _iso(self.created_at)
        }
        if include_target:
            data['job'] = self.job.to_dict() if self.job else None
        return data


class Resources(ResourceFields, db.Model):
    __tablename__ = 'resources'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    latitude = db.Column(db.Float)
    longitude = db.Column(db.Float)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    reports = db.relationship('ResourceReports', backref='resource', lazy=True,
                              cascade='all, delete-orphan')

    def to_dict(self):
        data = {'id': self.id}
        data.update(_fields_dict(self, self.COPY_FIELDS))
        data['latitude'] = self.latitude
        data['longitude'] = self.longitude
        data['created_at'] = _iso(self.created_at)
        data['updated_at'] = _iso(self.updated_at)
        return data


class ResourceReports(db.Model):
    __tablename__ = 'resource_reports'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    resource_id = db.Column(db.Integer, db.ForeignKey('resources.id', ondelete='CASCADE'), nullable=False)
    reason = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    def to_dict(self, include_target=False):
        data = {
            'id': self.id,
            'resource_id': self.resource_id,
            'reason': self.reason,
            'description': self.description,
            'created_at': _iso(self.created_at)
        }
        if include_target:
            data['resource'] = self.resource.to_dict() if self.resource else None
        return data


class CommunityAlerts(CommunityAlertFields, db.Model):
    __tablename__ = 'community_alerts'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def to_dict(self):
        data = {'id': self.id}
        data.update(_fields_dict(self, self.COPY_FIELDS))
        data['created_at'] = _iso(self.created_at)
        data['updated_at'] = _iso(self.updated_at)
        return data


class SpecialEvents(SpecialEventFields, db.Model):
    __tablename__ = 'special_events'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    days = db.relationship('SpecialEventDays', backref='special_event', lazy=True,
                           order_by='SpecialEventDays.date', cascade='all, delete-orphan')
    assignments = db.relationship('SpecialEventAssignments', backref='special_event', lazy=True,
                                  cascade='all, delete-orphan')

    def to_dict(self, include_days=False):
        data = {'id': self.id}
        data.update(_fields_dict(self, self.COPY_FIELDS))
        data['created_at'] = _iso(self.created_at)
        if include_days:
            data['days'] = [day.to_dict() for day in self.days]
            data['assignments'] = [a.to_dict() for a in self.assignments]
        return data


class SpecialEventDays(db.Model):
    __tablename__ = 'special_event_days'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    special_event_id = db.Column(db.Integer, db.ForeignKey('special_events.id', ondelete='CASCADE'), nullable=False)
    date = db.Column(db.Text, nullable=False)
    title = db.Column(db.Text)
    description = db.Column(db.Text)

    def to_dict(self):
        return {
            'id': self.id,
            'special_event_id': self.special_event_id,
            'date': self.date,
            'title': self.title,
            'description': self.description
        }


class SpecialEventAssignments(db.Model):
    __tablename__ = 'special_event_assignments'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    special_event_id = db.Column(db.Integer, db.ForeignKey('special_events.id', ondelete='CASCADE'), nullable=False)
    special_event_day_id = db.Column(db.Integer, db.ForeignKey('special_event_days.id', ondelete='SET NULL'), nullable=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False)

    event = db.relationship('Events', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'special_event_id': self.special_event_id,
            'special_event_day_id': self.special_event_day_id,
            'event_id': self.event_id,
            'event': self.event.to_dict() if self.event else None
        }


# ========== Civic organizations ==========

class CivicOrganizations(db.Model):
    __tablename__ = 'civic_organizations'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text, nullable=False)
    coverage_area = db.Column(db.Text, nullable=False)
    organization_type = db.Column(db.Text, nullable=False, default='civic')
    meeting_info = db.Column(db.Text)
    meeting_address = db.Column(db.Text)
    contact_info = db.Column(JSONType, default=dict)
    access_code = db.Column(db.Text, unique=True, nullable=False)
    password_hash = db.Column(db.Text, nullable=False)
    password_needs_reset = db.Column(db.Boolean, default=False)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def to_dict(self, include_private=False):
        data = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'coverage_area': self.coverage_area,
            'organization_type': self.organization_type,
            'meeting_info': self.meeting_info,
            'meeting_address': self.meeting_address,
            'contact_info': self.contact_info or {},
            'is_active': self.is_active,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }
        if include_private:
            data['access_code'] = self.access_code
            data['password_needs_reset'] = self.password_needs_reset
        return data


class CivicOrgSessions(db.Model):
    __tablename__ = 'civic_org_sessions'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    civic_org_id = db.Column(db.Integer, db.ForeignKey('civic_organizations.id', ondelete='CASCADE'), nullable=False)
    session_token = db.Column(db.Text, unique=True, nullable=False)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)


class CivicAnnouncements(db.Model):
    __tablename__ = 'civic_announcements'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    civic_org_id = db.Column(db.Integer, db.ForeignKey('civic_organizations.id', ondelete='CASCADE'), nullable=False)
    title = db.Column(db.Text, nullable=False)
    content = db.Column(db.Text, nullable=False)
    photos = db.Column(JSONType, default=list)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'civic_org_id': self.civic_org_id,
            'title': self.title,
            'content': self.content,
            'photos': self.photos or [],
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class CivicNewsletters(db.Model):
    __tablename__ = 'civic_newsletters'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    civic_org_id = db.Column(db.Integer, db.ForeignKey('civic_organizations.id', ondelete='CASCADE'), nullable=False)
    title = db.Column(db.Text, nullable=False)
    file_path = db.Column(db.Text, nullable=False)
    upload_date = db.Column(db.DateTime(timezone=True), default=utcnow)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'civic_org_id': self.civic_org_id,
            'title': self.title,
            'file_path': self.file_path,
            'upload_date': _iso(self.upload_date),
            'created_at': _iso(self.created_at)
        }


class CivicLeadership(db.Model):
    __tablename__ = 'civic_leadership'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    civic_org_id = db.Column(db.Integer, db.ForeignKey('civic_organizations.id', ondelete='CASCADE'), nullable=False)
    name = db.Column(db.Text, nullable=False)
    title = db.Column(db.Text, nullable=False)
    photo_url = db.Column(db.Text)
    contact_info = db.Column(JSONType, default=dict)
    order_index = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'civic_org_id': self.civic_org_id,
            'name': self.name,
            'title': self.title,
            'photo_url': self.photo_url,
            'contact_info': self.contact_info or {},
            'order_index': self.order_index,
            'created_at': _iso(self.created_at)
        }


class CivicImportantLinks(db.Model):
    __tablename__ = 'civic_important_links'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    civic_org_id = db.Column(db.Integer, db.ForeignKey('civic_organizations.id', ondelete='CASCADE'), nullable=False)
    title = db.Column(db.Text, nullable=False)
    url = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text)
    is_active = db.Column(db.Boolean, default=True)
    order_index = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'civic_org_id': self.civic_org_id,
            'title': self.title,
            'url': self.url,
            'description': self.description,
            'is_active': self.is_active,
            'order_index': self.order_index,
            'created_at': _iso(self.created_at)
        }


class CivicGallery(db.Model):
    __tablename__ = 'civic_gallery'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    civic_org_id = db.Column(db.Integer, db.ForeignKey('civic_organizations.id', ondelete='CASCADE'), nullable=False)
    photo_url = db.Column(db.Text, nullable=False)
    title = db.Column(db.Text)
    description = db.Column(db.Text)
    alt_text = db.Column(db.Text)
    order_index = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'civic_org_id': self.civic_org_id,
            'photo_url': self.photo_url,
            'title': self.title,
            'description': self.description,
            'alt_text': self.alt_text,
            'order_index': self.order_index,
            'created_at': _iso(self.created_at)
        }


# ========== Staging (pending submissions) ==========

class PendingEvents(EventFields, ReviewFields, db.Model):
    __tablename__ = 'pending_events'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name='chk_pending_events_status'),
    )

    def to_dict(self):
        data = {'id': self.id}
        data.update(_fields_dict(self, self.COPY_FIELDS))
        data.update(self.review_dict())
        return data


class PendingResources(ResourceFields, ReviewFields, db.Model):
    __tablename__ = 'pending_resources'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name='chk_pending_resources_status'),
    )

    def to_dict(self):
        data = {'id': self.id}
        data.update(_fields_dict(self, self.COPY_FIELDS))
        data.update(self.review_dict())
        return data


class PendingJobs(JobFields, ReviewFields, db.Model):
    __tablename__ = 'pending_jobs'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name='chk_pending_jobs_status'),
    )

    def to_dict(self):
        data = {'id': self.id}
        data.update(_fields_dict(self, self.COPY_FIELDS))
        data.update(self.review_dict())
        return data


class PendingCommunityAlerts(CommunityAlertFields, ReviewFields, db.Model):
    __tablename__ = 'pending_community_alerts'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name='chk_pending_alerts_status'),
    )

    def to_dict(self):
        data = {'id': self.id}
        data.update(_fields_dict(self, self.COPY_FIELDS))
        data.update(self.review_dict())
        return data


class PendingSpecialEvents(SpecialEventFields, ReviewFields, db.Model):
    __tablename__ = 'pending_special_events'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name='chk_pending_special_events_status'),
    )

    def to_dict(self):
        data = {'id': self.id}
        data.update(_fields_dict(self, self.COPY_FIELDS))
        data.update(self.review_dict())
        return data


# ========== Pending modifications (sub-admin edits of live rows) ==========

class ModificationFields(ReviewFields):
    action = db.Column(db.String(20), nullable=False)
    modified_data = db.Column(JSONType, nullable=False, default=dict)
    submitter_name = db.Column(db.Text)
    submitter_phone = db.Column(db.Text)


class PendingResourceModifications(ModificationFields, db.Model):
    __tablename__ = 'pending_resource_modifications'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    resource_id = db.Column(db.Integer, db.ForeignKey('resources.id', ondelete='SET NULL'), nullable=True)

    resource = db.relationship('Resources', lazy=True)

    def target_label(self):
        return self.resource.organization_name if self.resource else 'Resource'

    def to_dict(self):
        data = {
            'id': self.id,
            'resource_id': self.resource_id,
            'action': self.action,
            'modified_data': self.modified_data,
            'submitter_name': self.submitter_name,
            'submitter_phone': self.submitter_phone
        }
        data.update(self.review_dict())
        return data


class PendingJobModifications(ModificationFields, db.Model):
    __tablename__ = 'pending_job_modifications'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    job_id = db.Column(db.Integer, db.ForeignKey('jobs.id', ondelete='SET NULL'), nullable=True)

    job = db.relationship('Jobs', lazy=True)

    def target_label(self):
        return self.job.title if self.job else 'Job'

    def to_dict(self):
        data = {
            'id': self.id,
            'job_id': self.job_id,
            'action': self.action,
            'modified_data': self.modified_data,
            'submitter_name': self.submitter_name,
            'submitter_phone': self.submitter_phone
        }
        data.update(self.review_dict())
        return data


class PendingCivicModifications(ModificationFields, db.Model):
    __tablename__ = 'pending_civic_modifications'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    civic_org_id = db.Column(db.Integer, db.ForeignKey('civic_organizations.id', ondelete='SET NULL'), nullable=True)

    civic_organization = db.relationship('CivicOrganizations', lazy=True)

    def target_label(self):
        return self.civic_organization.name if self.civic_organization else 'Civic Org'

    def to_dict(self):
        modified = dict(self.modified_data or {})
        modified.pop('password_hash', None)  # never echo hashes back
        data = {
            'id': self.id,
            'civic_org_id': self.civic_org_id,
            'action': self.action,
            'modified_data': modified,
            'submitter_name': self.submitter_name,
            'submitter_phone': self.submitter_phone
        }
        data.update(self.review_dict())
        return data


# ========== Agencies and ingested documents ==========

class GovernmentAgencies(db.Model):
    __tablename__ = 'government_agencies'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text, nullable=False)
    level = db.Column(db.String(20), nullable=False)
    website = db.Column(db.Text, nullable=False)
    keywords = db.Column(JSONType, default=list)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'level': self.level,
            'website': self.website,
            'keywords': self.keywords or []
        }


class PdfContent(db.Model):
    __tablename__ = 'pdf_content'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    file_name = db.Column(db.Text, nullable=False)
    document_type = db.Column(db.Text)
    content = db.Column(db.Text, nullable=False)
    hyperlinks = db.Column(JSONType, default=dict)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'file_name': self.file_name,
            'document_type': self.document_type,
            'content': self.content,
            'hyperlinks': self.hyperlinks or {},
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }
