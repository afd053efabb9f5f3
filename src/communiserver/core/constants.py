"""Application-wide constants.

Column sizes, token parameters and access-control defaults shared
between the models, schemas and services.
"""

# String field lengths
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
MAX_PHONE_LENGTH = 20
MAX_ROLE_LENGTH = 32
MAX_IPV6_LENGTH = 45
MAX_USER_AGENT_LENGTH = 512

# Hash lengths
SHA256_HEX_LENGTH = 64

# Password requirements
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128
BCRYPT_ROUNDS = 12

# Pagination defaults
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Token settings
ACCESS_TOKEN_JTI_LENGTH = 32
REFRESH_TOKEN_BYTES = 32

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"

# Where the guard sends users who fail a permission check
DEFAULT_FALLBACK_URL = "/dashboard"
LOGIN_URL = "/"
LOCATIONS_FALLBACK_URL = "/dashboard/locations"
