import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

import structlog

from app.core.exceptions import InternalError, QAToolkitError, ValidationError
from app.models.schemas import Feature, GenerationResult
from app.repositories.interfaces.generation_provider import IGenerationProvider

logger = structlog.get_logger()


@dataclass(frozen=True)
class FeatureSpec:
    required_fields: Tuple[str, ...]
    prompt_template: str
    result_key: str
    expects_json: bool
    failure_message: str

    def missing_fields(self, fields: Mapping[str, Any]) -> Tuple[str, ...]:
        return tuple(name for name in self.required_fields if not fields.get(name))

    def missing_message(self) -> str:
        quoted = " or ".join(f"'{name}'" for name in self.required_fields)
        return f"Missing {quoted} in request body."


FEATURES: Dict[Feature, FeatureSpec] = {
    Feature.TEST_CASES: FeatureSpec(
        required_fields=("description",),
        prompt_template=(
            "Generate detailed test cases for the following feature or requirement. "
            "Respond in JSON array format.\n\nDescription: {description}"
        ),
        result_key="testCases",
        expects_json=True,
        failure_message="Failed to generate test cases",
    ),
    Feature.BUG_ANALYSIS: FeatureSpec(
        required_fields=("description",),
        prompt_template=(
            "Analyze the following bug report. Respond in a single JSON object with the "
            "following fields: type of bug/error, possible cause, steps to fix (array), "
            "suggestions (array).\n\nBug Description: {description}"
        ),
        result_key="analysis",
        expects_json=True,
        failure_message="Failed to analyze bug",
    ),
    Feature.BUG_REPORT: FeatureSpec(
        required_fields=("description", "severity"),
        prompt_template=(
            "You are an expert QA engineer. Write a detailed, professional bug report in "
            "markdown format based on the following information. Include sections: Title, "
            "Severity, Description, Steps to Fix, Expected Behavior, Actual Behavior, and "
            "Suggestions. Use the provided severity.\n\n"
            "Bug Description: {description}\nSeverity: {severity}"
        ),
        result_key="bugReport",
        expects_json=False,
        failure_message="Failed to generate bug report",
    ),
    Feature.RELEASE_NOTES: FeatureSpec(
        required_fields=("input",),
        prompt_template=(
            "You are a release manager. Generate professional, user-friendly release notes "
            "in markdown format from the following commit messages or changelog. Group "
            "related changes, highlight new features, bug fixes, improvements, and breaking "
            "changes. Use clear section headings.\n\nCommits/Changelog:\n{input}"
        ),
        result_key="releaseNotes",
        expects_json=False,
        failure_message="Failed to generate release notes",
    ),
}


class GenerationGateway:
    """Validates a feature request, prompts the provider once and relays the text."""

    def __init__(self, provider: IGenerationProvider):
        self.provider = provider

    def build_prompt(self, feature: Feature, fields: Mapping[str, Any]) -> str:
        spec = FEATURES[feature]
        return spec.prompt_template.format(**{name: fields[name] for name in spec.required_fields})

    def validate(self, feature: Feature, fields: Mapping[str, Any]) -> None:
        spec = FEATURES[feature]
        missing = spec.missing_fields(fields)
        if missing:
            logger.info("Rejected generation request", feature=feature.value, missing=list(missing))
            raise ValidationError(spec.missing_message(), details=f"missing: {', '.join(missing)}")

    async def generate(self, feature: Feature, fields: Mapping[str, Any]) -> GenerationResult:
        spec = FEATURES[feature]
        self.validate(feature, fields)
        prompt = self.build_prompt(feature, fields)

        logger.info("Calling generation provider", feature=feature.value, prompt_length=len(prompt))
        try:
            text = await self.provider.generate_text(prompt)
        except QAToolkitError:
            raise
        except Exception as e:
            logger.error("Generation call failed", feature=feature.value, error=str(e))
            raise InternalError(spec.failure_message, details=str(e) or type(e).__name__) from e

        if not spec.expects_json:
            return GenerationResult(raw_text=text)

        parsed, ok = self._parse_json(text)
        return GenerationResult(raw_text=text, parsed=parsed if ok else text, structured=True)

    def _parse_json(self, text: Optional[str]) -> Tuple[Any, bool]:
        if text is None:
            return None, False
        try:
            return json.loads(text), True
        except ValueError:
            return None, False
