"""Map AMP validator findings onto required components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Sequence

from ..components import RUNTIME_FINDING_PARAM
from ..models import Requirements, ValidatorFinding

MANDATORY_TAG_MISSING = "MANDATORY_TAG_MISSING"
MISSING_EXTENSION_CODES = frozenset(
    {"MISSING_REQUIRED_EXTENSION", "ATTR_MISSING_REQUIRED_EXTENSION"}
)

STATUS_PASS = "PASS"
STATUS_FAIL = "FAIL"


@dataclass
class ValidationResult:
    """Outcome of validating one document."""

    status: str
    findings: List[ValidatorFinding] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status != STATUS_FAIL


def requirements_from_findings(result: ValidationResult) -> Requirements:
    """Collect missing components and the runtime flag from a failed validation.

    Extension names come straight from the validator, which already reports
    canonical component names, so no remapping or exclusion is applied.
    """
    requirements = Requirements()
    if result.passed:
        return requirements
    for finding in result.findings:
        if finding.code == MANDATORY_TAG_MISSING:
            if finding.params and finding.params[0] == RUNTIME_FINDING_PARAM:
                requirements.runtime = True
        elif finding.code in MISSING_EXTENSION_CODES:
            if len(finding.params) > 1 and finding.params[1]:
                requirements.components.add(finding.params[1].strip().lower())
    return requirements


def parse_validator_output(payload: object) -> ValidationResult:
    """Build a result from the validator's JSON report.

    The CLI keys its report by input name; a bare result object is accepted too.
    """
    if isinstance(payload, Mapping) and "status" not in payload:
        reports = [value for value in payload.values() if isinstance(value, Mapping)]
        payload = reports[0] if reports else {}
    if not isinstance(payload, Mapping):
        raise ValueError("Validator output must be a JSON object")
    status = str(payload.get("status") or STATUS_PASS).upper()
    findings: List[ValidatorFinding] = []
    errors = payload.get("errors")
    if isinstance(errors, Sequence) and not isinstance(errors, str):
        for raw in errors:
            finding = _finding_from_dict(raw)
            if finding is not None:
                findings.append(finding)
    return ValidationResult(status=status, findings=findings)


def _finding_from_dict(raw: object) -> ValidatorFinding | None:
    if not isinstance(raw, Mapping):
        return None
    code = raw.get("code")
    if not isinstance(code, str):
        return None
    params = raw.get("params")
    if not isinstance(params, Sequence) or isinstance(params, str):
        params = []
    line = raw.get("line")
    col = raw.get("col")
    return ValidatorFinding(
        code=code,
        params=tuple(str(param) for param in params),
        severity=str(raw.get("severity") or "ERROR"),
        line=line if isinstance(line, int) else None,
        col=col if isinstance(col, int) else None,
    )
