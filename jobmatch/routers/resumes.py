import asyncio
import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from jobmatch.config import (
    ALLOWED_MIME_TYPES, EMBED_TEXT_LIMIT, MAX_UPLOAD_BYTES, PDF_MIME, SETUP_GUIDE,
)
from jobmatch.models.models import AuthUser
from jobmatch.models.response import ResumeView
from jobmatch.models.schemas import ParsedProfile
from jobmatch.services.auth import get_current_user, require_full_mode
from jobmatch.services.db import resumes_coll, skills_coll, user_skills_coll, users_coll
from jobmatch.services.resume_parser import parse_resume
from jobmatch.services.storage import delete_file, upload_file
from jobmatch.utils.exceptions import StorageError
from jobmatch.utils.logging_config import get_logger, PerformanceMonitor
from jobmatch.utils.utils import embed_text, groq_chat

router = APIRouter(
    prefix="/api/resumes",
    tags=["resumes"],
    dependencies=[Depends(require_full_mode("Resumes API"))],
)
logger = get_logger(__name__)

SETUP_HINT_KEYWORDS = ("table", "database", "profile")


def needs_setup_hint(message: str) -> bool:
    return any(k in message for k in SETUP_HINT_KEYWORDS)


def upload_error(message: str) -> dict:
    """Error detail for upload failures; setup-related messages carry a hint."""
    detail = {"error": message}
    if needs_setup_hint(message):
        detail["setup_hint"] = {
            "title": "Database Setup Required",
            "message": "The database collections and storage bucket need to be set up before uploading.",
            "guide": SETUP_GUIDE,
        }
    return detail


async def get_or_create_app_user(auth_user: AuthUser) -> dict:
    user = await users_coll.find_one({"auth_user_id": auth_user.id})
    if user:
        return user

    email = auth_user.email or ""
    user = {
        "user_id": str(uuid.uuid4()),
        "auth_user_id": auth_user.id,
        "email": auth_user.email,
        "full_name": auth_user.full_name or (email.split("@")[0] if email else "") or "User",
        "created_at": datetime.utcnow(),
    }
    try:
        await users_coll.insert_one(user)
    except Exception as e:
        logger.error(f"Error creating user profile for {auth_user.id}: {e}")
        raise HTTPException(status_code=500, detail=upload_error(f"Failed to create user profile: {e}"))
    logger.info(f"Created app user {user['user_id']} for auth user {auth_user.id}")
    return user


def embedding_text(parsed: ParsedProfile, raw_text: str) -> str:
    return f"{parsed.summary or ''} {raw_text}"[:EMBED_TEXT_LIMIT]


def try_embed(text: str) -> Optional[List[float]]:
    try:
        return embed_text(text)
    except Exception as e:
        logger.warning(f"Resume embedding failed, storing without one: {e}")
        return None


async def save_user_skills(user_id: str, skills: List[str], resume_id: str) -> None:
    """Record the résumé's skills against the user. Failures are logged only."""
    try:
        skill_ids = []
        for name in skills:
            key = name.strip().lower()
            existing = await skills_coll.find_one({"name_lower": key})
            if existing:
                skill_ids.append(existing["skill_id"])
                continue
            skill = {
                "skill_id": str(uuid.uuid4()),
                "name": name.strip(),
                "name_lower": key,
                "category": "other",
            }
            await skills_coll.insert_one(skill)
            skill_ids.append(skill["skill_id"])

        for skill_id in skill_ids:
            await user_skills_coll.update_one(
                {"user_id": user_id, "skill_id": skill_id},
                {"$set": {
                    "proficiency_level": "intermediate",
                    "source": "resume",
                    "resume_id": resume_id,
                    "updated_at": datetime.utcnow(),
                }},
                upsert=True,
            )
        logger.debug(f"Saved {len(skill_ids)} skills for user {user_id}")
    except Exception as e:
        logger.error(f"Error saving user skills for {user_id}: {e}")


@router.post("")
async def upload_resume(
    resume: Optional[UploadFile] = File(None),
    auth_user: AuthUser = Depends(get_current_user),
):
    """Upload, parse and store a résumé for the signed-in user"""
    app_user = await get_or_create_app_user(auth_user)
    user_id = app_user["user_id"]

    if resume is None:
        raise HTTPException(status_code=400, detail=upload_error("No file uploaded"))

    if resume.content_type not in ALLOWED_MIME_TYPES:
        raise HTTPException(
            status_code=400,
            detail=upload_error("Invalid file type. Only PDF and DOCX files are allowed."),
        )

    data = await resume.read()
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail=upload_error("File size too large. Maximum size is 10MB."))

    file_name = f"{auth_user.id}/{int(datetime.utcnow().timestamp() * 1000)}-{resume.filename}"
    try:
        file_id = await upload_file(file_name, data, resume.content_type, user_id)
    except StorageError as e:
        logger.error(f"Upload error for {file_name}: {e.cause}")
        raise HTTPException(status_code=500, detail=upload_error("Failed to upload file"))

    loop = asyncio.get_running_loop()
    with PerformanceMonitor("parse_resume", logger, threshold_ms=15000):
        result = await loop.run_in_executor(None, parse_resume, data, resume.content_type, groq_chat)

    if result.error:
        await _discard_upload(file_id)
        raise HTTPException(status_code=500, detail=upload_error(f"Failed to parse resume: {result.error}"))

    embedding = await loop.run_in_executor(None, try_embed, embedding_text(result.parsed_data, result.raw_text))

    resume_doc = {
        "resume_id": str(uuid.uuid4()),
        "user_id": user_id,
        "file_name": resume.filename,
        "file_type": "pdf" if resume.content_type == PDF_MIME else "docx",
        "mime_type": resume.content_type,
        "file_size": len(data),
        "file_id": file_id,
        "raw_text": result.raw_text,
        "parsed_data": result.parsed_data.model_dump(),
        "parse_source": result.source,
        "embedding": embedding,
        "is_active": True,
        "upload_date": datetime.utcnow(),
    }
    try:
        await resumes_coll.insert_one(resume_doc)
    except Exception as e:
        logger.error(f"Database error saving resume for {user_id}: {e}")
        await _discard_upload(file_id)
        raise HTTPException(status_code=500, detail=upload_error("Failed to save resume data"))

    try:
        await resumes_coll.update_many(
            {"user_id": user_id, "is_active": True, "resume_id": {"$ne": resume_doc["resume_id"]}},
            {"$set": {"is_active": False, "deactivated_at": datetime.utcnow()}},
        )
    except Exception as e:
        logger.warning(f"Could not deactivate previous resumes for {user_id}: {e}")

    if result.parsed_data.skills:
        await save_user_skills(user_id, result.parsed_data.skills, resume_doc["resume_id"])

    logger.info(f"Stored resume {resume_doc['resume_id']} for user {user_id} ({result.source} parse)")
    return {
        "message": "Resume uploaded and processed successfully",
        "resume": {
            "id": resume_doc["resume_id"],
            "fileName": resume_doc["file_name"],
            "parsedData": resume_doc["parsed_data"],
            "uploadDate": resume_doc["upload_date"],
        },
    }


async def _discard_upload(file_id: str) -> None:
    try:
        await delete_file(file_id)
    except StorageError as e:
        logger.error(f"Could not clean up stored file {file_id}: {e.cause}")


@router.get("")
async def list_resumes(auth_user: AuthUser = Depends(get_current_user)):
    """Active résumés of the signed-in user, newest first"""
    app_user = await users_coll.find_one({"auth_user_id": auth_user.id})
    if not app_user:
        return {"resumes": []}

    try:
        cursor = resumes_coll.find(
            {"user_id": app_user["user_id"], "is_active": True},
        ).sort("upload_date", -1)
        docs = await cursor.to_list(length=None)
    except Exception as e:
        logger.error(f"Failed to fetch resumes for {app_user['user_id']}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch resumes")

    resumes = [
        ResumeView(
            id=d["resume_id"],
            file_name=d["file_name"],
            file_type=d["file_type"],
            file_size=d["file_size"],
            parsed_data=d.get("parsed_data") or {},
            upload_date=d.get("upload_date"),
            is_active=d.get("is_active", True),
        )
        for d in docs
    ]
    return {"resumes": resumes}
