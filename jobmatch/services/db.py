import motor.motor_asyncio
from pymongo import ASCENDING, DESCENDING

from jobmatch.config import MONGO_DETAILS, DB_NAME
from jobmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

logger.info(f"Initializing MongoDB connection to database: {DB_NAME}")

try:
    client = motor.motor_asyncio.AsyncIOMotorClient(MONGO_DETAILS or "mongodb://localhost:27017")
    db = client[DB_NAME]
    logger.info("MongoDB client initialized successfully")
except Exception as e:
    logger.error(f"Failed to initialize MongoDB client: {e}")
    raise

# Collections
users_coll = db["app_users"]
resumes_coll = db["resumes"]
jobs_coll = db["jobs"]
recommendations_coll = db["job_recommendations"]
feedback_coll = db["recommendation_feedback"]
skills_coll = db["skills"]
user_skills_coll = db["user_skills"]

INDEXES = [
    (users_coll, [("user_id", ASCENDING)], True),
    (users_coll, [("auth_user_id", ASCENDING)], True),
    (resumes_coll, [("resume_id", ASCENDING)], True),
    (resumes_coll, [("user_id", ASCENDING), ("is_active", ASCENDING), ("upload_date", DESCENDING)], False),
    (jobs_coll, [("job_id", ASCENDING)], True),
    (jobs_coll, [("title", ASCENDING), ("company", ASCENDING)], True),
    (jobs_coll, [("is_active", ASCENDING)], False),
    (recommendations_coll, [("recommendation_id", ASCENDING)], True),
    (recommendations_coll, [("user_id", ASCENDING), ("resume_id", ASCENDING), ("created_at", DESCENDING)], False),
    (feedback_coll, [("feedback_id", ASCENDING)], True),
    (skills_coll, [("name_lower", ASCENDING)], True),
    (user_skills_coll, [("user_id", ASCENDING), ("skill_id", ASCENDING)], True),
]


async def init_indexes():
    """Index initialization for collections."""
    logger.info("Starting database index initialization")

    for coll, keys, unique in INDEXES:
        label = f"{coll.name}.({', '.join(k for k, _ in keys)})"
        try:
            await coll.create_index(keys, unique=unique)
            logger.debug(f"Created {'unique ' if unique else ''}index on {label}")
        except Exception as e:
            if "already exists" in str(e).lower():
                logger.debug(f"Index on {label} already exists")
            else:
                logger.warning(f"Could not create index on {label}: {e}")

    logger.info("Database index initialization completed")


async def ping() -> None:
    await db.command("ping")
