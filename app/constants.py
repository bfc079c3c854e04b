import os

APP_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.path.join(APP_DIR, 'data')
CONFIG_DIR = os.path.join(APP_DIR, 'config')
DB_FILE = os.path.join(CONFIG_DIR, 'mangashelf.db')
CONFIG_FILE = os.path.join(CONFIG_DIR, 'settings.yaml')

MANGASHELF_DB = 'sqlite:///' + DB_FILE

BUILD_VERSION = '20261018_1200'

MANGA_STATUSES = [
    'Ongoing',
    'Completed',
    'Hiatus',
    'Cancelled',
]

DEFAULT_MANGA_DESCRIPTION = 'No description available.'

USER_ROLES = ['user', 'admin']
ROLE_USER = 'user'
ROLE_ADMIN = 'admin'

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 6

RATING_MIN = 1
RATING_MAX = 5
REVIEW_MAX_LENGTH = 1000
COMMENT_MAX_LENGTH = 2000

COMMENT_SORTS = ['newest', 'oldest']
CHAPTER_SORT_FIELDS = ['chapterNumber', 'publishedAt', 'views']

REACTION_TYPES = ['likes', 'dislikes']

NOTIFICATION_COMMENT_REPLY = 'comment_reply'
NOTIFICATION_REPORT_UPDATE = 'report_update'

REPORT_TYPES = ['comment', 'chapter']
REPORT_REASONS = ['spam', 'inappropriate', 'harassment', 'broken', 'other']
REPORT_STATUSES = ['pending', 'reviewed', 'resolved', 'dismissed']
# A user may hold one report in these states per reported item
REPORT_OPEN_STATUSES = ['pending', 'reviewed']
REPORT_DESCRIPTION_MAX_LENGTH = 1000

# Chapters shown per manga on the recent-with-chapters feed
RECENT_FEED_CHAPTERS = 3

DEFAULT_SETTINGS = {
    "server": {
        "host": "0.0.0.0",
        "port": 5000,
    },
    "database": {
        "uri": MANGASHELF_DB,
    },
    "auth": {
        "jwt_secret": "",
        "access_token_minutes": 60 * 24 * 7,
        "login_rate_limit": "20 per minute",
    },
    "search": {
        "default_limit": 20,
        "max_limit": 50,
        "pool_min": 100,
        "pool_max": 300,
        "pool_factor": 5,
        "recent_days": 7,
    },
    "comments": {
        "post_rate_limit": "2 per minute",
    },
    "notifications": {
        "retention_days": 30,
    },
    "pagination": {
        "default_per_page": 20,
        "max_per_page": 100,
    },
    "logging": {
        "level": "INFO",
        "format": "console",
    },
}
