from fastapi import APIRouter

from app.models.schemas import NormalizeRequest
from app.services import response_normalizer as normalizer

router = APIRouter(prefix="/normalize", tags=["normalize"])


@router.post("/test-cases")
async def normalize_test_cases(request: NormalizeRequest):
    """Reshape a /generate-test-cases result into a list of test cases"""
    cases = normalizer.normalize_test_cases(request.content)
    return {"testCases": [case.model_dump() for case in cases]}


@router.post("/bug-analysis")
async def normalize_bug_analysis(request: NormalizeRequest):
    """Reshape an /analyze-bug result into a fixed analysis record"""
    return {"analysis": normalizer.normalize_bug_analysis(request.content).model_dump(mode="json")}


@router.post("/bug-report")
async def normalize_bug_report(request: NormalizeRequest):
    """Split a markdown bug report into its sections"""
    content = request.content
    return {
        "bugReport": normalizer.normalize_bug_report(content).model_dump(),
        "plainText": normalizer.strip_markdown(content) if isinstance(content, str) else "",
    }


@router.post("/release-notes")
async def normalize_release_notes(request: NormalizeRequest):
    """Group markdown release notes by heading"""
    sections = normalizer.normalize_release_notes(request.content)
    return {
        "sections": {
            name: [normalizer.strip_emphasis(item) for item in items]
            for name, items in sections.items()
        }
    }
