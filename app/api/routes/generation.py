from fastapi import APIRouter, Depends
import structlog

from app.models.schemas import (
    Feature, ERROR_RESPONSES,
    GenerateTestCasesRequest, AnalyzeBugRequest,
    GenerateBugReportRequest, GenerateReleaseNotesRequest,
)
from app.services.generation_gateway import FEATURES, GenerationGateway
from app.core.dependencies import get_generation_gateway

logger = structlog.get_logger()

router = APIRouter(tags=["generation"], responses=ERROR_RESPONSES)


async def _generate(gateway: GenerationGateway, feature: Feature, fields: dict) -> dict:
    result = await gateway.generate(feature, fields)
    return {FEATURES[feature].result_key: result.value}


@router.post("/generate-test-cases")
async def generate_test_cases(
    request: GenerateTestCasesRequest,
    gateway: GenerationGateway = Depends(get_generation_gateway)
):
    """Generate test cases for a feature description"""
    return await _generate(gateway, Feature.TEST_CASES, request.model_dump())


@router.post("/analyze-bug")
async def analyze_bug(
    request: AnalyzeBugRequest,
    gateway: GenerationGateway = Depends(get_generation_gateway)
):
    """Classify a bug and suggest a fix"""
    return await _generate(gateway, Feature.BUG_ANALYSIS, request.model_dump())


@router.post("/generate-bug-report")
async def generate_bug_report(
    request: GenerateBugReportRequest,
    gateway: GenerationGateway = Depends(get_generation_gateway)
):
    """Write a markdown bug report"""
    return await _generate(gateway, Feature.BUG_REPORT, request.model_dump())


@router.post("/generate-release-notes")
async def generate_release_notes(
    request: GenerateReleaseNotesRequest,
    gateway: GenerationGateway = Depends(get_generation_gateway)
):
    """Draft markdown release notes from commits or a changelog"""
    return await _generate(gateway, Feature.RELEASE_NOTES, request.model_dump())
