"""Constants shared by the harness and the scenario suites."""
from __future__ import annotations

# Application version
VERSION: str = "1.0.0"

# Service identities reported on the root endpoints
GATEWAY_SERVICE_NAME: str = "Titanic API Gateway"
AUTH_SERVICE_NAME: str = "Titanic Auth Service"
RUNNING_STATUS: str = "running"
HEALTHY_STATUS: str = "healthy"

# Backing services listed by the gateway health endpoint
BACKING_SERVICES: list[str] = ["auth_service", "passenger_service", "stats_service"]

# Token settings (15 minutes)
ACCESS_TOKEN_EXPIRES_IN: int = 900
TOKEN_TYPE: str = "bearer"

# Passenger validation bounds
MIN_AGE: int = 0
MAX_AGE: int = 150
PASSENGER_CLASSES: list[int] = [1, 2, 3]
SEX_VALUES: list[str] = ["male", "female"]

# Statistics keys
CLASS_KEYS: list[str] = [f"class_{pclass}" for pclass in PASSENGER_CLASSES]
KNOWN_PORTS: list[str] = ["Southampton", "Cherbourg", "Queenstown"]
AGE_GROUPS: list[str] = [
    "children_0_12",
    "teens_13_19",
    "adults_20_40",
    "middle_age_41_60",
    "seniors_61_plus",
]
PERCENTAGE_TOLERANCE: tuple[float, float] = (99.0, 101.0)

# Fixed server-side messages
INVALID_CREDENTIALS_DETAIL: str = "Incorrect username or password"
REVOKED_REFRESH_DETAIL: str = "Refresh token has been revoked or is invalid"
INVALID_SEX_DETAIL: str = "sex must be 'male' or 'female'"
ADMIN_REQUIRED_DETAIL: str = (
    "Admin access required. Only administrators can perform this action."
)
CABIN_CONFLICT_DETAIL: str = (
    "Different social classes cannot share cabins on Titanic. "
    "Jack (3rd class) and Rose (1st class) must remain separate... for now. \U0001f3ad\U0001f6a2"
)
DUPLICATE_USER_TEMPLATE: str = "User with username '{username}' already exists"

# Event bus
PASSENGER_CREATED_EVENT: str = "PASSENGER_CREATED"
TOPIC_PARTITIONS: int = 1
TOPIC_REPLICATION_FACTOR: int = 1
