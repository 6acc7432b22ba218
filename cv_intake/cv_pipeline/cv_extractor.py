"""LLM extraction of candidate data (contact details, qualifications, score) from CV text."""

import json
import re
from typing import Optional

from openai import AsyncOpenAI
from pydantic import ValidationError

from config import MODEL_NAME, OPENAI_API_KEY
from schemas.candidate import CandidateData
from utils.logger import get_logger

logger = get_logger(__name__)

MIN_CV_TEXT_CHARS = 50

CANDIDATE_EXTRACTION_SYSTEM_PROMPT = """You are a recruitment assistant screening CVs for teaching positions.
Extract the candidate's details from the CV below.
Return only valid JSON with these keys (no markdown, no code block):
{
  "candidate_name": "string",
  "email_address": "string",
  "contact_number": "string",
  "countries": "string",
  "educational_qualifications": "string",
  "job_history": "string",
  "current_employment": "string",
  "skill_set": "string",
  "score": "string",
  "justification": "string"
}
- countries: countries of citizenship, residence or work, comma separated.
- educational_qualifications: degrees and teaching qualifications with institution and year; say so if a degree is still in progress.
- job_history: previous roles with dates and years of experience.
- current_employment: current role and employer, empty if not employed.
- skill_set: subjects taught and professional skills, comma separated.
- score: suitability for an international teaching role from 0 to 10 as a whole number.
- justification: one or two sentences explaining the score.
Use an empty string when a value is not in the CV. Do not invent details."""


def _parse_llm_json(text: str) -> Optional[dict]:
    """JSON object from the model reply, with any markdown fence removed."""
    raw = (text or "").strip()
    if raw.startswith("```"):
        raw = re.sub(r"^```(?:json)?\s*", "", raw)
        raw = re.sub(r"\s*```$", "", raw)
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


async def extract_candidate_data(
    cv_text: str,
    client: Optional[AsyncOpenAI] = None,
) -> Optional[CandidateData]:
    """Ask the model for CandidateData. None when the text is too short, the key is missing, or the reply is unusable."""
    if not cv_text or len(cv_text.strip()) < MIN_CV_TEXT_CHARS:
        logger.warning("CV text too short for extraction")
        return None
    if client is None:
        if not OPENAI_API_KEY:
            logger.error("OPENAI_API_KEY is not set; cannot run CV extraction")
            return None
        client = AsyncOpenAI(api_key=OPENAI_API_KEY)
    try:
        response = await client.chat.completions.create(
            model=MODEL_NAME,
            messages=[
                {"role": "system", "content": CANDIDATE_EXTRACTION_SYSTEM_PROMPT},
                {"role": "user", "content": f"CV content:\n\n{cv_text.strip()}"},
            ],
            temperature=0.1,
        )
        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message or not choice.message.content:
            return None
        parsed = _parse_llm_json(choice.message.content)
        if not parsed:
            logger.warning("Model reply was not a JSON object")
            return None
        data = CandidateData.model_validate(parsed)
    except ValidationError as e:
        logger.warning("Candidate data validation failed: %s", e)
        return None
    except Exception as e:
        logger.exception("Candidate extraction failed: %s", e)
        return None
    if not (data.candidate_name or "").strip():
        logger.warning("Model returned no candidate name")
    return data
