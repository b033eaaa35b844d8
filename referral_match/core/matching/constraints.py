"""
Hard constraint filter.

Constraints are absolute gates evaluated before scoring: an opening with
any violation is dropped, however well it would otherwise score.
"""

from typing import Optional

from referral_match.data.models import (
    ConstraintViolation,
    LicenseInstance,
    MatchConstraints,
    Opening,
    Referral,
)
from referral_match.utils.constants import LicenseStatus, ViolationType


def check_constraints(
    referral: Referral,
    opening: Opening,
    license: Optional[LicenseInstance],
    constraints: MatchConstraints,
) -> list[ConstraintViolation]:
    """
    Evaluate every enabled hard constraint for one opening.

    Args:
        referral: The client referral
        opening: Candidate opening (already known to be active with spots)
        license: License record for the opening's organization, if any
        constraints: Resolved constraint settings

    Returns:
        Violations found; empty when the opening may be scored
    """
    violations = []

    if constraints.require_funding_match:
        funding = (referral.funding_source or "").upper()
        accepted = {f.upper() for f in opening.funding_accepted}
        if not funding or funding not in accepted:
            violations.append(ConstraintViolation(
                type=ViolationType.FUNDING,
                message="Funding source not accepted",
            ))

    # Gender comparison here is exact; scoring compares case-insensitively
    required_gender = opening.gender_requirement
    if constraints.require_gender_match and required_gender and required_gender != "any":
        if referral.client_gender and referral.client_gender != required_gender:
            violations.append(ConstraintViolation(
                type=ViolationType.GENDER,
                message="Gender requirement not met",
            ))

    age = referral.client_age
    if constraints.require_age_range_match and age is not None:
        if opening.age_min is not None and age < opening.age_min:
            violations.append(ConstraintViolation(
                type=ViolationType.AGE,
                message="Client below minimum age",
            ))
        if opening.age_max is not None and age > opening.age_max:
            violations.append(ConstraintViolation(
                type=ViolationType.AGE,
                message="Client above maximum age",
            ))

    # No license record means nothing to check
    if constraints.require_verified_license and license is not None:
        if license.status != LicenseStatus.VERIFIED.value:
            violations.append(ConstraintViolation(
                type=ViolationType.LICENSE,
                message="License not verified",
            ))

    return violations
