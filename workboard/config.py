"""Service configuration loaded from environment variables and an optional .env file"""
import os

from dotenv import load_dotenv

load_dotenv()

# Capacity model
# Nominal hours per user per week when the directory has no value for the user
STANDARD_WEEKLY_CAPACITY = float(os.getenv("STANDARD_WEEKLY_CAPACITY", "40"))

# Hours used by an allocation request that omits allocated_hours
DEFAULT_ALLOCATED_HOURS = float(os.getenv("DEFAULT_ALLOCATED_HOURS", "8"))

# Utilization brackets: available < BUSY_THRESHOLD <= busy < OVER_ALLOCATION_THRESHOLD
BUSY_THRESHOLD = float(os.getenv("BUSY_THRESHOLD", "0.8"))
OVER_ALLOCATION_THRESHOLD = float(os.getenv("OVER_ALLOCATION_THRESHOLD", "1.0"))

# IANA zone used to truncate timestamps to a calendar day (unset: host local zone)
WORKBOARD_TIMEZONE = os.getenv("WORKBOARD_TIMEZONE") or None

# Optional YAML scenario loaded into the allocation store at startup
WORKBOARD_SEED_FILE = os.getenv("WORKBOARD_SEED_FILE") or None

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
