# Inbox Organizer
# A Python tool to sort downloaded and desktop files into music, video, image and document folders

from .models import (
    Category, Role, FileStats, LocalizedDirectorySet, MoveFailure, OrganizeOutcome, RunResult
)
from .exceptions import (
    OrganizerError, ValidationError, EmptyUsernameError, UserNotFoundError,
    FileOperationError, DirectoryCreationError, WorkerError, ConfigError
)
from .config import OrganizerConfig, load_config
from .user_provider import (
    UserProvider, WindowsUserProvider, MacUserProvider, UnixUserProvider, get_user_provider
)
from .analyzer import FolderAnalyzer, get_majority_type
from .mover import Mover
from .logger import ProgressLogger, LogConfig, create_default_logger, get_default_log_file
from .organizer import ALL_USERS, Organizer, organize_files

__all__ = [
    'Category',
    'Role',
    'FileStats',
    'LocalizedDirectorySet',
    'MoveFailure',
    'OrganizeOutcome',
    'RunResult',
    'OrganizerError',
    'ValidationError',
    'EmptyUsernameError',
    'UserNotFoundError',
    'FileOperationError',
    'DirectoryCreationError',
    'WorkerError',
    'ConfigError',
    'OrganizerConfig',
    'load_config',
    'UserProvider',
    'WindowsUserProvider',
    'MacUserProvider',
    'UnixUserProvider',
    'get_user_provider',
    'FolderAnalyzer',
    'get_majority_type',
    'Mover',
    'ProgressLogger',
    'LogConfig',
    'create_default_logger',
    'get_default_log_file',
    'ALL_USERS',
    'Organizer',
    'organize_files',
]
