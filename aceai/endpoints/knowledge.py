# Endpoints for the question bank, syllabuses, file import and backups
# aceai/endpoints/knowledge.py
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import Field

from aceai.models.content import UploadedFile
from aceai.models.question import CamelModel, Question
from aceai.models.syllabus import KnowledgeBackup, Syllabus
from aceai.services.import_merger import MergeReport
from aceai.services.retriever import find_relevant_questions, find_relevant_syllabuses
from aceai.state_manager import generation_orchestrator, knowledge_base, knowledge_store
from aceai.utils.exceptions import AceAIError, app_error_to_http
from aceai.utils.logger import logger

router = APIRouter()


class RawQuestionsRequest(CamelModel):
    raw_text: str = Field(min_length=1)
    source_name: str = "Manual Entry"


class RawSyllabusRequest(CamelModel):
    raw_text: str = Field(min_length=1)


class FileImportRequest(CamelModel):
    files: List[UploadedFile] = Field(min_length=1)
    topic_hint: str = ""


class ParsedQuestionsResponse(CamelModel):
    questions: List[Question]
    report: MergeReport


class ParsedSyllabusResponse(CamelModel):
    syllabus: Optional[Syllabus] = None
    report: MergeReport


class ImportResponse(CamelModel):
    imported: bool
    syllabus: Optional[Syllabus] = None
    questions: List[Question] = Field(default_factory=list)
    report: MergeReport = Field(default_factory=MergeReport)


# --- Question bank ---

@router.get("/questions", response_model=List[Question])
async def list_questions():
    return knowledge_base.questions


@router.post("/questions", response_model=MergeReport)
async def add_questions(questions: List[Question]):
    try:
        return await knowledge_base.merge_questions(questions)
    except AceAIError as e:
        raise app_error_to_http(e)


@router.get("/questions/search", response_model=List[Question])
async def search_questions(q: str = ""):
    try:
        return await find_relevant_questions(knowledge_store, q)
    except AceAIError as e:
        raise app_error_to_http(e)


@router.get("/questions/tags/{tag}", response_model=List[Question])
async def questions_by_tag(tag: str):
    try:
        return await knowledge_store.get_questions_by_tag(tag)
    except AceAIError as e:
        raise app_error_to_http(e)


@router.delete("/questions/{question_id}")
async def delete_question(question_id: str):
    try:
        removed = await knowledge_base.delete_question(question_id)
    except AceAIError as e:
        raise app_error_to_http(e)
    if not removed:
        raise HTTPException(status_code=404, detail="Question not found")
    return {"message": f"Question '{question_id}' deleted"}


@router.post("/questions/parse", response_model=ParsedQuestionsResponse)
async def parse_questions(request: RawQuestionsRequest):
    """Extracts questions from pasted text and adds the new ones to the bank."""
    try:
        questions = await generation_orchestrator.parse_raw_questions(request.raw_text, request.source_name)
        report = await knowledge_base.merge_questions(questions)
    except AceAIError as e:
        raise app_error_to_http(e)
    if not questions:
        logger.warning(f"No questions could be parsed from '{request.source_name}'")
    return ParsedQuestionsResponse(questions=questions, report=report)


# --- Syllabuses ---

@router.get("/syllabuses", response_model=List[Syllabus])
async def list_syllabuses():
    return knowledge_base.syllabuses


@router.post("/syllabuses", response_model=MergeReport)
async def add_syllabuses(syllabuses: List[Syllabus]):
    try:
        return await knowledge_base.merge_syllabuses(syllabuses)
    except AceAIError as e:
        raise app_error_to_http(e)


@router.get("/syllabuses/search", response_model=List[Syllabus])
async def search_syllabuses(q: str = ""):
    try:
        return await find_relevant_syllabuses(knowledge_store, q)
    except AceAIError as e:
        raise app_error_to_http(e)


@router.delete("/syllabuses/{syllabus_id}")
async def delete_syllabus(syllabus_id: str):
    try:
        removed = await knowledge_base.delete_syllabus(syllabus_id)
    except AceAIError as e:
        raise app_error_to_http(e)
    if not removed:
        raise HTTPException(status_code=404, detail="Syllabus not found")
    return {"message": f"Syllabus '{syllabus_id}' deleted"}


@router.post("/syllabuses/parse", response_model=ParsedSyllabusResponse)
async def parse_syllabus(request: RawSyllabusRequest):
    try:
        syllabus = await generation_orchestrator.parse_syllabus(request.raw_text)
        report = MergeReport()
        if syllabus is not None:
            report = await knowledge_base.merge_syllabuses([syllabus])
    except AceAIError as e:
        raise app_error_to_http(e)
    return ParsedSyllabusResponse(syllabus=syllabus, report=report)


# --- Import and backup ---

@router.post("/import", response_model=ImportResponse)
async def import_files(request: FileImportRequest):
    """Mixed extraction: a syllabus and/or questions found in the uploaded files."""
    logger.info(f"Import requested for {len(request.files)} file(s), hint '{request.topic_hint}'")
    try:
        result = await generation_orchestrator.analyze_and_import_file(request.files, request.topic_hint)
        if result is None:
            return ImportResponse(imported=False)
        report = await knowledge_base.merge_import_result(result)
    except AceAIError as e:
        raise app_error_to_http(e)
    return ImportResponse(imported=True, syllabus=result.syllabus, questions=result.questions, report=report)


@router.get("/backup", response_model=KnowledgeBackup)
async def export_backup():
    return knowledge_base.export_backup()


@router.post("/backup", response_model=Dict[str, MergeReport])
async def import_backup(backup: KnowledgeBackup):
    try:
        return await knowledge_base.import_backup(backup)
    except AceAIError as e:
        raise app_error_to_http(e)
