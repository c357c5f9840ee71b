# Import all models here so they can be imported elsewhere with a single import
# The order of imports is important here - import base first
from rotations.models.base import Base
from rotations.models.specialty import Specialty
from rotations.models.program import Program, ProgramType
from rotations.models.application import Application, ApplicationStatus
from rotations.models.favorite import Favorite
from rotations.models.review import Review
from rotations.models.content import Page, Section, SectionType
from rotations.models.blog import BlogCategory, BlogPost, BlogPostStatus
from rotations.models.team import TeamMember
from rotations.models.outreach import ContactQuery, ContactStatus, NewsletterSubscription

__all__ = [
    'Base', 'Specialty', 'Program', 'ProgramType', 'Application', 'ApplicationStatus',
    'Favorite', 'Review', 'Page', 'Section', 'SectionType',
    'BlogCategory', 'BlogPost', 'BlogPostStatus', 'TeamMember',
    'ContactQuery', 'ContactStatus', 'NewsletterSubscription'
]
