"""
Cœur client du back-office: formulaire d'upload, client REST avec cache,
panneau d'administration.
"""
from portfolio.client.admin_panel import AdminPanel, AdminPanelView
from portfolio.client.errors import (
    FetchError,
    FileTooLarge,
    InvalidFileType,
    MissingImage,
    PortfolioClientError,
    SubmissionInProgress,
    UploadError,
    ValidationError,
)
from portfolio.client.events import AppEvent, EventBus
from portfolio.client.remote import RemoteDataClient, Resource
from portfolio.client.session import SessionState
from portfolio.client.upload import ArtworkUploadForm, ImageFile, Notification, SubmissionStatus
from portfolio.client.validation import validate_artwork
